from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from pelangi_backend.database import get_db
from pelangi_backend.interface.tokens import hash_password
from pelangi_backend.model.auth import User
from pelangi_backend.permissions.roles import Role, RoleNotApplicableError
from pelangi_backend.repositories.base import RepositoryError
from pelangi_backend.settings import settings
from pelangi_backend.api.auth import auth_router
from pelangi_backend.api.classes import class_router
from pelangi_backend.api.teachers import teacher_router

logger = logging.getLogger(__name__)

def init_admin_user(db: Session):

    email = settings.ADMIN_EMAIL
    password = settings.ADMIN_PASSWORD

    if not email or not password:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin bootstrap")
        return

    admin = db.query(User).filter(User.email == email).first()

    if admin != None:
        return

    db.add(User(
        email=email,
        full_name="Administrator",
        role=Role.ADMIN.value,
        status="ACTIVE",
        password=hash_password(password),
    ))
    db.commit()
    logger.info(f"Created bootstrap administrator {email}")

async def startup_logic():

    with next(get_db()) as db:
        init_admin_user(db)

@asynccontextmanager
async def lifespan(app: FastAPI):

    if settings.DEBUG_MODE == "production":
        await startup_logic()

    yield

app = FastAPI(title="Guru Digital Pelangi", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError):
    logger.error(f"Data access failure on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

@app.exception_handler(RoleNotApplicableError)
async def role_not_applicable_handler(request: Request, exc: RoleNotApplicableError):
    logger.info(f"Role {exc.role} rejected on {request.url.path}")
    return JSONResponse(status_code=403, content={"detail": "Insufficient role privileges"})

app.include_router(
    auth_router,
    prefix="/auth",
    tags=["auth"]
)

app.include_router(
    class_router,
    prefix="/classes",
    tags=["classes"]
)

app.include_router(
    teacher_router,
    prefix="/teachers",
    tags=["teachers"]
)
