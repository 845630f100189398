import asyncio
import logging
import uvicorn
from dotenv import load_dotenv

load_dotenv()

from pelangi_backend.settings import settings
from pelangi_backend.server import startup_logic

if __name__ == "__main__":

    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if settings.DEBUG_MODE != "production":
        asyncio.run(startup_logic())

    uvicorn.run("pelangi_backend.server:app", host="0.0.0.0", port=8000, log_level=settings.LOG_LEVEL.lower(), reload=settings.DEBUG_MODE != "production", workers=1)
