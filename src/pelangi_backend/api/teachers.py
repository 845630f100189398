from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pelangi_backend.database import get_db
from pelangi_backend.api.exceptions import ForbiddenException
from pelangi_backend.interface.permissions import AccessibleClassGet
from pelangi_backend.permissions.auth import require_admin_or_teacher
from pelangi_backend.permissions.content import AccessibleContentAggregator
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.repositories.assignment import AssignmentRepository
from pelangi_backend.repositories.school import SchoolClassRepository

teacher_router = APIRouter()

@teacher_router.get("/{teacher_id}/classes", response_model=list[AccessibleClassGet])
def get_teacher_classes(teacher_id: str, principal: Annotated[Principal, Depends(require_admin_or_teacher)], db: Session = Depends(get_db)):

    if principal.is_teacher and principal.user_id != teacher_id:
        raise ForbiddenException("Access denied")

    aggregator = AccessibleContentAggregator(AssignmentRepository(db), SchoolClassRepository(db))

    return aggregator.for_teacher(teacher_id)
