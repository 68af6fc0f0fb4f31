"""
Turn CRUD operations.

Chronological reads per session, lookups by external turn id, content
search and per-session counts.

Dependencies: sqlalchemy, memory_backend.boundary.db.models.turn_model
System role: Conversation turn persistence operations
"""

from typing import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.CRUD.base_crud import BaseCRUD, escape_like
from memory_backend.boundary.db.models.turn_model import TurnModel


class TurnCRUD(BaseCRUD[TurnModel]):
    """CRUD operations for TurnModel."""

    def __init__(self) -> None:
        """Initialize TurnCRUD with TurnModel."""
        super().__init__(TurnModel)

    async def create_many(self, session: AsyncSession, rows: Sequence[dict]) -> list[TurnModel]:
        """
        Insert several turns in one flush, preserving input order.

        Args:
            session: Async database session
            rows: Field values per turn

        Returns:
            Created TurnModels in input order
        """
        instances = [TurnModel(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        for instance in instances:
            await session.refresh(instance)
        return instances

    async def get_by_turn_id(self, session: AsyncSession, turn_id: str) -> TurnModel | None:
        stmt = select(TurnModel).where(TurnModel.turn_id == turn_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_turn_ids(self, session: AsyncSession, turn_ids: Sequence[str]) -> Sequence[TurnModel]:
        """
        Retrieve turns for a set of external ids in chronological order.

        Args:
            session: Async database session
            turn_ids: External turn ids; unknown ids are ignored

        Returns:
            Sequence of TurnModels ordered by created_at, id
        """
        if not turn_ids:
            return []
        stmt = (
            select(TurnModel)
            .where(TurnModel.turn_id.in_(list(turn_ids)))
            .order_by(TurnModel.created_at.asc(), TurnModel.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_for_session(
        self,
        session: AsyncSession,
        session_key: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[TurnModel]:
        """Turns of a session, oldest first."""
        stmt = (
            select(TurnModel)
            .where(TurnModel.session_key == session_key)
            .order_by(TurnModel.created_at.asc(), TurnModel.id.asc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def latest_for_session(self, session: AsyncSession, session_key: str) -> TurnModel | None:
        stmt = (
            select(TurnModel)
            .where(TurnModel.session_key == session_key)
            .order_by(TurnModel.created_at.desc(), TurnModel.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_session_keys(
        self,
        session: AsyncSession,
        session_keys: Sequence[str],
    ) -> dict[str, int]:
        """
        Count turns per session.

        Args:
            session: Async database session
            session_keys: Sessions to count

        Returns:
            Mapping of session key to turn count (sessions without turns are absent)
        """
        if not session_keys:
            return {}
        stmt = (
            select(TurnModel.session_key, func.count(TurnModel.id))
            .where(TurnModel.session_key.in_(list(session_keys)))
            .group_by(TurnModel.session_key)
        )
        result = await session.execute(stmt)
        return {key: int(count) for key, count in result.all()}

    async def search_content(
        self,
        session: AsyncSession,
        term: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[TurnModel]:
        """
        Case-insensitive substring search on content, newest first.

        An empty term matches every turn.
        """
        stmt = select(TurnModel)
        if term:
            stmt = stmt.where(TurnModel.content.ilike(f"%{escape_like(term)}%", escape="\\"))
        stmt = stmt.order_by(TurnModel.created_at.desc(), TurnModel.id.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_for_session(self, session: AsyncSession, session_key: str) -> int:
        """
        Delete every turn of a session.

        Returns:
            Number of deleted turns
        """
        stmt = delete(TurnModel).where(TurnModel.session_key == session_key)
        result = await session.execute(stmt)
        return int(result.rowcount or 0)


turn_crud = TurnCRUD()
