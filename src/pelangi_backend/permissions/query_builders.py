from sqlalchemy import select
from sqlalchemy.orm import Query
from pelangi_backend.model.school import ClassTeacherSubject, SchoolClass
from pelangi_backend.permissions.principal import Principal
from pelangi_backend.permissions.roles import CapabilityTier


class ClassPermissionQueryBuilder:
    """Utility class for restricting class queries to what a principal may see"""

    @classmethod
    def teacher_classes_subquery(cls, teacher_id: str):
        """Select of class ids where the teacher holds an active assignment"""
        return select(ClassTeacherSubject.class_id).where(
            ClassTeacherSubject.teacher_id == teacher_id,
            ClassTeacherSubject.is_active.is_(True),
        )

    @classmethod
    def filter_classes(cls, principal: Principal, query: Query) -> Query:
        """
        Administrators keep the query unchanged; teachers are limited to classes
        with at least one active assignment. Other roles raise
        RoleNotApplicableError.
        """
        if principal.tier == CapabilityTier.ADMINISTRATOR:
            return query

        return query.filter(SchoolClass.id.in_(cls.teacher_classes_subquery(principal.user_id)))
