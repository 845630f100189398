"""
School class repository.

Read-side helpers for classes, their subjects, teachers and students, used
to shape class listings and the accessible-content view.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from .base import BaseRepository
from ..model.auth import User
from ..model.school import (
    ClassSubject, ClassTeacherSubject, SchoolClass, Student,
    StudentSubjectEnrollment, Subject
)


class SchoolClassRepository(BaseRepository[SchoolClass]):
    """Repository for SchoolClass entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db, SchoolClass)

    def base_query(self) -> Query:
        return self.db.query(SchoolClass)

    def list_from_query(self, query: Query) -> List[SchoolClass]:
        return self._fetch_all(query.order_by(SchoolClass.name, SchoolClass.id))

    def list_physical_classes(self) -> List[SchoolClass]:
        """Classes that actually hold students, ordered by name."""
        return self.list_from_query(
            self.base_query().filter(SchoolClass.is_physical_class.is_(True))
        )

    def active_subjects_by_class(self, class_ids: Iterable[str]) -> Dict[str, List[Subject]]:
        """Map class id to its subjects with an active class-subject link."""
        class_ids = list(class_ids)
        if not class_ids:
            return {}

        rows = self._fetch_all(
            self.db.query(ClassSubject.class_id, Subject)
            .join(Subject, Subject.id == ClassSubject.subject_id)
            .filter(
                ClassSubject.class_id.in_(class_ids),
                ClassSubject.is_active.is_(True),
            )
            .order_by(Subject.name, Subject.id)
        )

        subjects: Dict[str, List[Subject]] = defaultdict(list)
        for class_id, subject in rows:
            subjects[class_id].append(subject)
        return dict(subjects)

    def active_student_counts(self, class_ids: Iterable[str]) -> Dict[str, int]:
        """Map class id to the number of ACTIVE students; classes without students are absent."""
        class_ids = list(class_ids)
        if not class_ids:
            return {}

        rows = self._fetch_all(
            self.db.query(Student.class_id, func.count(Student.id))
            .filter(Student.class_id.in_(class_ids), Student.status == "ACTIVE")
            .group_by(Student.class_id)
        )
        return {class_id: count for class_id, count in rows}

    def active_teachers_by_subject(self, class_id: str) -> Dict[str, List[User]]:
        """Map subject id to the teachers actively assigned to it in ``class_id``."""
        rows = self._fetch_all(
            self.db.query(ClassTeacherSubject.subject_id, User)
            .join(User, User.id == ClassTeacherSubject.teacher_id)
            .filter(
                ClassTeacherSubject.class_id == class_id,
                ClassTeacherSubject.is_active.is_(True),
            )
            .order_by(User.full_name, User.id)
        )

        teachers: Dict[str, List[User]] = defaultdict(list)
        for subject_id, teacher in rows:
            teachers[subject_id].append(teacher)
        return dict(teachers)

    def list_enrolled_students(self, class_id: str, subject_id: str) -> List[Tuple[StudentSubjectEnrollment, Student]]:
        """Active enrollments of a class-subject with their students, by student name."""
        return self._fetch_all(
            self.db.query(StudentSubjectEnrollment, Student)
            .join(Student, Student.id == StudentSubjectEnrollment.student_id)
            .filter(
                StudentSubjectEnrollment.class_id == class_id,
                StudentSubjectEnrollment.subject_id == subject_id,
                StudentSubjectEnrollment.is_active.is_(True),
            )
            .order_by(Student.full_name, Student.id)
        )

