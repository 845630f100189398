import os
import threading


def _bool_env(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ["true", "1", "yes", "on"]


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    postgres_url = os.environ.get("POSTGRES_URL")
    if postgres_url:
        user = os.environ.get("POSTGRES_USER")
        password = os.environ.get("POSTGRES_PASSWORD")
        db = os.environ.get("POSTGRES_DB")
        return f"postgresql://{user}:{password}@{postgres_url}/{db}"

    return "sqlite:///./pelangi.db"


class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.reload()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

    def reload(self):
        """Re-read the environment (used after a .env file has been loaded)."""
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE", "development")
        self.DATABASE_URL = _database_url()
        self.DB_STATEMENT_TIMEOUT_MS = int(os.environ.get("DB_STATEMENT_TIMEOUT_MS", "5000"))
        self.DB_ECHO = _bool_env("DB_ECHO", "false")

        # Authentication settings
        self.JWT_SECRET = os.environ.get("JWT_SECRET", "change-me")
        self.JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
        self.JWT_EXP_MINUTES = int(os.environ.get("JWT_EXP_MINUTES", "60"))
        self.ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", None)
        self.ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", None)

        self.CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

settings = BackendSettings()
