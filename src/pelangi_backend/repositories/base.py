"""
Base repository pattern implementation.

Repositories receive their SQLAlchemy session at construction time, so
callers (and tests) decide which database a repository talks to.
"""

from abc import ABC
from typing import TypeVar, Generic, List, Optional, Dict, Any, Type
from sqlalchemy.orm import Session, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

# Type variable for generic entity type
T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository operations.

    Raised directly for infrastructure failures (connection lost, statement
    timeout, ...); never used to express a permission outcome.
    """
    pass


class NotFoundError(RepositoryError):
    """Exception raised when entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateError(RepositoryError):
    """Exception raised when attempting to create duplicate entity."""

    def __init__(self, entity_type: str, criteria: Dict[str, Any]):
        super().__init__(f"{entity_type} already exists with criteria: {criteria}")
        self.entity_type = entity_type
        self.criteria = criteria


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    This class implements the repository pattern, providing a clean
    abstraction over SQLAlchemy operations.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository with database session and model class.

        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def _fetch_all(self, query: Query) -> List[Any]:
        """Run ``query.all()``, converting driver errors into RepositoryError."""
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to read {self.model.__name__}: {str(e)}") from e

    def _fetch_first(self, query: Query) -> Optional[Any]:
        try:
            return query.first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to read {self.model.__name__}: {str(e)}") from e

    def get_by_id_optional(self, entity_id: Any) -> Optional[T]:
        """Get entity by ID, returning None if not found."""
        return self._fetch_first(
            self.db.query(self.model).filter(self.model.id == entity_id)
        )

    def find_one_by(self, **criteria) -> Optional[T]:
        """
        Find single entity by criteria.

        Args:
            **criteria: Search criteria as keyword arguments

        Returns:
            First matching entity or None
        """
        query = self.db.query(self.model)

        for key, value in criteria.items():
            if hasattr(self.model, key):
                query = query.filter(getattr(self.model, key) == value)

        return self._fetch_first(query)

    def create(self, entity: T) -> T:
        """
        Create a new entity.

        Raises:
            DuplicateError: If entity violates unique constraints
            RepositoryError: If database operation fails
        """
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(
                self.model.__name__,
                self._extract_entity_dict(entity)
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to create {self.model.__name__}: {str(e)}") from e

    def update(self, entity: T, updates: Dict[str, Any]) -> T:
        """
        Apply ``updates`` to an already loaded entity and commit.

        Raises:
            RepositoryError: If update fails
        """
        try:
            for key, value in updates.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)

            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Failed to update {self.model.__name__}: {str(e)}") from e

    def _extract_entity_dict(self, entity: T) -> Dict[str, Any]:
        return {
            column.key: getattr(entity, column.key, None)
            for column in self.model.__table__.columns
        }
