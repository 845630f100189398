"""
Repository layer for direct database access.

Repositories take an SQLAlchemy session in their constructor; nothing in
this package opens sessions on its own.
"""

from .base import BaseRepository, RepositoryError, NotFoundError, DuplicateError
from .assignment import AssignmentRepository
from .school import SchoolClassRepository

__all__ = [
    'BaseRepository',
    'RepositoryError',
    'NotFoundError',
    'DuplicateError',
    'AssignmentRepository',
    'SchoolClassRepository',
]
