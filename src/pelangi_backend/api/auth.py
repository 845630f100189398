import logging
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pelangi_backend.database import get_db
from pelangi_backend.interface.auth import LoginRequest, PrincipalGet, TokenResponse
from pelangi_backend.interface.tokens import create_access_token
from pelangi_backend.permissions.auth import AuthenticationService, PrincipalBuilder, get_current_principal
from pelangi_backend.permissions.principal import Principal

logger = logging.getLogger(__name__)

auth_router = APIRouter()

@auth_router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):

    user = AuthenticationService.authenticate_password(payload.email, payload.password, db)

    # Rejects accounts whose stored role is not recognized
    principal = PrincipalBuilder.build(user)

    logger.info(f"User {principal.user_id} logged in as {principal.role}")
    return TokenResponse(access_token=create_access_token(principal.user_id, principal.role.value))

@auth_router.get("/me", response_model=PrincipalGet)
def me(principal: Annotated[Principal, Depends(get_current_principal)]):
    return PrincipalGet.model_validate(principal)
