"""
Class-level access guard.

``AccessGuard.check`` decides whether a principal may act on a class before
the handler runs. The FastAPI dependencies below wrap it for routes that
carry a ``class_id`` (and optionally a ``subject_id``).
"""

import logging
from enum import Enum
from typing import Annotated, Optional
from fastapi import Depends, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from pelangi_backend.database import get_db
from pelangi_backend.api.exceptions import ForbiddenException, InternalServerException, response_to_http_exception
from pelangi_backend.permissions.auth import get_optional_principal
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.resolver import PermissionResolver
from pelangi_backend.permissions.roles import Role
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.base import RepositoryError

logger = logging.getLogger(__name__)


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"


_DENY_STATUS = {
    DenyReason.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    DenyReason.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    DenyReason.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
}


class AccessDecision(BaseModel):
    allowed: bool
    reason: Optional[DenyReason] = None
    detail: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def allow(cls) -> 'AccessDecision':
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, detail: str) -> 'AccessDecision':
        return cls(allowed=False, reason=reason, detail=detail)

    @property
    def status_code(self) -> int:
        if self.allowed:
            return status.HTTP_200_OK
        return _DENY_STATUS[self.reason]

    def to_exception(self):
        return response_to_http_exception(self.status_code, self.detail)


class AccessGuard:

    def __init__(self, assignments: AssignmentRepository):
        self.assignments = assignments

    def check(self, principal: Optional[Principal], class_id: Optional[str]) -> AccessDecision:
        """
        Decide whether ``principal`` may act on ``class_id``.

        A teacher passes when any active assignment exists in the class,
        whatever the subject. Read failures propagate as RepositoryError.
        """
        if principal is None:
            return AccessDecision.deny(DenyReason.UNAUTHENTICATED, "Authentication required")

        if principal.role == Role.ADMIN:
            return AccessDecision.allow()

        if not principal.is_teacher:
            return AccessDecision.deny(DenyReason.FORBIDDEN, "Only administrators and teachers may access classes")

        if not class_id:
            return AccessDecision.deny(DenyReason.BAD_REQUEST, "class_id is required")

        if not self.assignments.has_active_assignment(principal.user_id, class_id):
            return AccessDecision.deny(DenyReason.FORBIDDEN, "Access denied to this class")

        return AccessDecision.allow()


async def require_class_access(
    principal: Annotated[Optional[Principal], Depends(get_optional_principal)],
    class_id: Optional[str] = None,
    db: Session = Depends(get_db),
) -> Principal:
    """Route dependency running the access guard on the request's ``class_id``."""

    guard = AccessGuard(AssignmentRepository(db))

    try:
        decision = guard.check(principal, class_id)
    except RepositoryError:
        logger.exception(f"Error checking access to class {class_id}")
        raise InternalServerException("Error checking permissions")

    if not decision.allowed:
        user_id = principal.user_id if principal else None
        logger.info(f"Access to class {class_id} denied for {user_id}: {decision.reason.value}")
        raise decision.to_exception()

    return principal


async def require_subject_access(
    principal: Annotated[Principal, Depends(require_class_access)],
    class_id: str,
    subject_id: str,
    db: Session = Depends(get_db),
) -> Principal:
    """Class guard followed by the subject-level check of the same request."""

    resolver = PermissionResolver(AssignmentRepository(db))

    try:
        permitted = resolver.can_access_subject(principal, class_id, subject_id)
    except RepositoryError:
        logger.exception(f"Error checking access to subject {subject_id} in class {class_id}")
        raise InternalServerException("Error checking permissions")

    if not permitted:
        logger.info(f"Access to subject {subject_id} in class {class_id} denied for {principal.user_id}")
        raise ForbiddenException("Access denied to this subject")

    return principal
