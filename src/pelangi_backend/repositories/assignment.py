"""
Assignment repository.

Reads and writes ``ClassTeacherSubject`` rows, the records that bind a
teacher to one (class, subject) pair. Every read used for authorization is
restricted to active rows: an inactive assignment is treated as absent.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy import exists, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from .base import BaseRepository, DuplicateError, NotFoundError, RepositoryError
from ..model.auth import User
from ..model.school import ClassSubject, ClassTeacherSubject
from ..permissions.roles import Role

logger = logging.getLogger(__name__)


def _can_teach(user: User) -> bool:
    try:
        role = Role.from_string(user.role)
    except ValueError:
        return False
    return role in (Role.GURU, Role.ADMIN)


class AssignmentRepository(BaseRepository[ClassTeacherSubject]):
    """Repository for teacher/class/subject assignments."""

    def __init__(self, db: Session):
        super().__init__(db, ClassTeacherSubject)

    def find_active(
        self,
        teacher_id: str,
        class_id: Optional[str] = None,
        subject_id: Optional[str] = None,
    ) -> List[ClassTeacherSubject]:
        """
        Find the active assignments of one teacher, optionally narrowed to a
        class and/or subject.

        Rows are returned in creation order, with class and subject loaded.

        Raises:
            RepositoryError: If the read fails
        """
        query = (
            self.db.query(ClassTeacherSubject)
            .options(
                joinedload(ClassTeacherSubject.school_class),
                joinedload(ClassTeacherSubject.subject),
            )
            .filter(
                ClassTeacherSubject.teacher_id == teacher_id,
                ClassTeacherSubject.is_active.is_(True),
            )
        )
        if class_id is not None:
            query = query.filter(ClassTeacherSubject.class_id == class_id)
        if subject_id is not None:
            query = query.filter(ClassTeacherSubject.subject_id == subject_id)

        query = query.order_by(ClassTeacherSubject.created_at, ClassTeacherSubject.id)
        return self._fetch_all(query)

    def list_active_assignments(self, teacher_id: str) -> List[ClassTeacherSubject]:
        """All active assignments of ``teacher_id``; empty when there are none."""
        return self.find_active(teacher_id)

    def has_active_assignment(
        self,
        teacher_id: str,
        class_id: str,
        subject_id: Optional[str] = None,
    ) -> bool:
        """
        Point lookup for an active assignment.

        Without ``subject_id`` any active subject in the class matches.
        """
        conditions = [
            ClassTeacherSubject.teacher_id == teacher_id,
            ClassTeacherSubject.class_id == class_id,
            ClassTeacherSubject.is_active.is_(True),
        ]
        if subject_id is not None:
            conditions.append(ClassTeacherSubject.subject_id == subject_id)

        try:
            return bool(self.db.scalar(select(exists().where(*conditions))))
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to read {self.model.__name__}: {str(e)}") from e

    def assign(self, class_id: str, subject_id: str, teacher_id: str) -> Tuple[ClassTeacherSubject, bool]:
        """
        Assign a teacher to a subject of a class.

        An inactive record for the same triple is reactivated instead of
        creating a second row.

        Returns:
            (assignment, created) where ``created`` is False on reactivation

        Raises:
            NotFoundError: If the class-subject link or the teacher is missing
            DuplicateError: If the teacher is already actively assigned
        """
        class_subject = self._fetch_first(
            self.db.query(ClassSubject).filter(
                ClassSubject.class_id == class_id,
                ClassSubject.subject_id == subject_id,
                ClassSubject.is_active.is_(True),
            )
        )
        if class_subject is None:
            raise NotFoundError("ClassSubject", f"{class_id}/{subject_id}")

        teacher = self._fetch_first(self.db.query(User).filter(User.id == teacher_id))
        if teacher is None or teacher.status != "ACTIVE" or not _can_teach(teacher):
            raise NotFoundError("Teacher", teacher_id)

        existing = self.find_one_by(class_id=class_id, teacher_id=teacher_id, subject_id=subject_id)

        if existing is not None:
            if existing.is_active:
                raise DuplicateError(
                    self.model.__name__,
                    {"class_id": class_id, "teacher_id": teacher_id, "subject_id": subject_id},
                )
            logger.info(f"Reactivating assignment {existing.id} for teacher {teacher_id}")
            return self.update(existing, {"is_active": True}), False

        assignment = self.create(
            ClassTeacherSubject(
                class_id=class_id,
                teacher_id=teacher_id,
                subject_id=subject_id,
                is_active=True,
            )
        )
        logger.info(f"Assigned teacher {teacher_id} to {class_id}/{subject_id}")
        return assignment, True

    def deactivate(self, class_id: str, subject_id: str, teacher_id: str) -> ClassTeacherSubject:
        """
        Deactivate an active assignment. Rows are never deleted.

        Raises:
            NotFoundError: If there is no active assignment for the triple
        """
        existing = self.find_one_by(
            class_id=class_id, teacher_id=teacher_id, subject_id=subject_id, is_active=True
        )
        if existing is None:
            raise NotFoundError(self.model.__name__, f"{class_id}/{subject_id}/{teacher_id}")

        logger.info(f"Deactivating assignment {existing.id} for teacher {teacher_id}")
        return self.update(existing, {"is_active": False})
