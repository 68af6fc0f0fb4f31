"""
Session CRUD operations.

Provides Create, Read, Update, Delete operations for SessionModel
keyed by the external session key.

Dependencies: sqlalchemy, memory_backend.boundary.db.models.session_model
System role: Session persistence operations
"""

from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.CRUD.base_crud import BaseCRUD
from memory_backend.boundary.db.models.session_model import SessionModel


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with lookups by external session key and per-user
    listing.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def get_by_key(self, session: AsyncSession, session_key: str) -> SessionModel | None:
        """
        Retrieve a session by its external key.

        Args:
            session: Async database session
            session_key: External session key

        Returns:
            SessionModel if found, None otherwise
        """
        stmt = select(SessionModel).where(SessionModel.session_key == session_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: int,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[SessionModel]:
        """
        Retrieve a user's sessions, newest first.

        Args:
            session: Async database session
            user_id: Owning user id
            limit: Maximum number of sessions to return
            offset: Number of sessions to skip

        Returns:
            Sequence of SessionModels
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.user_id == user_id)
            .order_by(SessionModel.created_at.desc(), SessionModel.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_key(self, session: AsyncSession, session_key: str) -> bool:
        """Delete the session row for an external key."""
        stmt = delete(SessionModel).where(SessionModel.session_key == session_key)
        result = await session.execute(stmt)
        return result.rowcount > 0


session_crud = SessionCRUD()
