"""
Authentication and Principal creation.

This is the only place where a stored role string is turned into the closed
``Role`` enum. Everything downstream works with ``Principal`` objects.
"""

import logging
from typing import Annotated, Callable, Optional
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pelangi_backend.database import get_db
from pelangi_backend.api.exceptions import ForbiddenException, InternalServerException, UnauthorizedException
from pelangi_backend.interface.tokens import TokenError, decode_access_token, verify_password
from pelangi_backend.model.auth import User
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.roles import Role

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Verifies credentials against the user table"""

    @staticmethod
    def load_active_user(user_id: str, db: Session) -> User:
        try:
            user = db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError:
            logger.exception(f"Failed to load user {user_id}")
            raise InternalServerException("Error verifying credentials")

        if user is None:
            raise UnauthorizedException("User not found")
        if user.status != "ACTIVE":
            raise UnauthorizedException("Account is not active")
        return user

    @staticmethod
    def authenticate_password(email: str, password: str, db: Session) -> User:
        """Authenticate using email and password"""
        try:
            user = db.query(User).filter(User.email == email).first()
        except SQLAlchemyError:
            logger.exception("Failed to load user for login")
            raise InternalServerException("Error verifying credentials")

        if user is None or not verify_password(password, user.password):
            raise UnauthorizedException("Invalid credentials")
        if user.status != "ACTIVE":
            raise UnauthorizedException("Account is not active")
        return user


class PrincipalBuilder:
    """Builder for creating Principal objects from user rows"""

    @staticmethod
    def build(user: User) -> Principal:
        try:
            role = Role.from_string(user.role)
        except ValueError:
            logger.warning(f"User {user.id} has unrecognized role {user.role!r}")
            raise UnauthorizedException("Unrecognized role")

        return Principal(user_id=user.id, role=role, full_name=user.full_name)


def parse_bearer_token(request: Request) -> Optional[str]:
    """Return the bearer token, or None when no Authorization header is sent."""

    authorization = request.headers.get("Authorization")
    if not authorization:
        return None

    scheme, param = get_authorization_scheme_param(authorization)

    if scheme.lower() != "bearer" or not param:
        raise UnauthorizedException("Invalid authorization format")

    return param


def principal_from_token(token: str, db: Session) -> Principal:
    try:
        payload = decode_access_token(token)
    except TokenError as e:
        raise UnauthorizedException(str(e))

    user = AuthenticationService.load_active_user(payload["sub"], db)
    return PrincipalBuilder.build(user)


async def get_optional_principal(
    token: Annotated[Optional[str], Depends(parse_bearer_token)],
    db: Session = Depends(get_db),
) -> Optional[Principal]:
    """Principal of the request, or None when the request is anonymous."""

    if token is None:
        return None
    return principal_from_token(token, db)


async def get_current_principal(
    principal: Annotated[Optional[Principal], Depends(get_optional_principal)]
) -> Principal:
    """Main dependency for getting the current authenticated principal."""

    if principal is None:
        raise UnauthorizedException("No authorization provided")
    return principal


def require_roles(*allowed_roles: Role) -> Callable:
    """Dependency factory admitting only principals whose role is listed."""

    def dependency(principal: Annotated[Principal, Depends(get_current_principal)]) -> Principal:
        if principal.role not in allowed_roles:
            logger.info(f"Role {principal.role} of {principal.user_id} rejected, expected one of {[str(r) for r in allowed_roles]}")
            raise ForbiddenException("Insufficient role privileges")
        return principal

    return dependency


require_admin = require_roles(Role.ADMIN)
require_admin_or_teacher = require_roles(Role.ADMIN, Role.GURU)
