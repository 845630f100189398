from .base import Base, metadata
from .auth import User
from .school import (
    SchoolClass,
    Subject,
    ClassSubject,
    ClassTeacherSubject,
    Student,
    StudentSubjectEnrollment,
)

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    # School models
    'SchoolClass',
    'Subject',
    'ClassSubject',
    'ClassTeacherSubject',
    'Student',
    'StudentSubjectEnrollment',
]
