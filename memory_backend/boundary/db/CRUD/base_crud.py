"""
Base CRUD operations for SQLAlchemy models.

Create, get, update and count by primary key, shared by the user,
session, turn and summary CRUD classes. Deletes are keyed by session and
live in the model-specific classes.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term is matched literally (escape char: backslash)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Provides standard database operations that work with any SQLAlchemy model.
    Subclasses specify the model class and extend these methods with
    model-specific queries. CRUD methods flush but never commit; the caller
    owns the transaction.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and timestamps
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: int) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: Integer primary key

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: int,
        **kwargs,
    ) -> ModelT | None:
        """
        Update a record by primary key.

        Loads the row and assigns attributes so that onupdate hooks
        (updated_at) fire on flush.

        Args:
            session: Async database session
            id: Integer primary key
            **kwargs: Fields to update with new values

        Returns:
            Updated model instance if found, None otherwise
        """
        instance = await self.get_by_id(session, id)
        if instance is None:
            return None
        for field, value in kwargs.items():
            setattr(instance, field, value)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def count(self, session: AsyncSession) -> int:
        """Count all rows of the model."""
        stmt = select(func.count()).select_from(self.model)
        result = await session.execute(stmt)
        return int(result.scalar_one())
