"""
Conversation summary CRUD operations.

Embedding-aware listing and counting, backlog queries, text search and
turn-reference lookups for SummaryModel.

Dependencies: sqlalchemy, memory_backend.boundary.db.models.summary_model
System role: Summary persistence operations
"""

from typing import Sequence

from sqlalchemy import String, cast, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.CRUD.base_crud import BaseCRUD, escape_like
from memory_backend.boundary.db.models.summary_model import SummaryModel


class SummaryCRUD(BaseCRUD[SummaryModel]):
    """CRUD operations for SummaryModel."""

    def __init__(self) -> None:
        """Initialize SummaryCRUD with SummaryModel."""
        super().__init__(SummaryModel)

    async def list_with_embedding(self, session: AsyncSession) -> Sequence[SummaryModel]:
        """Every summary whose embedding is not NULL."""
        stmt = select(SummaryModel).where(SummaryModel.embedding.is_not(None))
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_without_embedding(
        self,
        session: AsyncSession,
        limit: int | None = None,
    ) -> Sequence[SummaryModel]:
        """Summaries still waiting for an embedding, oldest first."""
        stmt = (
            select(SummaryModel)
            .where(SummaryModel.embedding.is_(None))
            .order_by(SummaryModel.created_at.asc(), SummaryModel.id.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_referencing_turn(self, session: AsyncSession, turn_id: str) -> list[SummaryModel]:
        """
        Summaries whose turn_ids contain the external turn id, newest first.

        The JSON list is narrowed with a portable text match and then
        checked exactly in Python.

        Args:
            session: Async database session
            turn_id: External turn id

        Returns:
            List of matching SummaryModels
        """
        pattern = f'%"{escape_like(turn_id)}"%'
        stmt = (
            select(SummaryModel)
            .where(cast(SummaryModel.turn_ids, String).like(pattern, escape="\\"))
            .order_by(SummaryModel.created_at.desc(), SummaryModel.id.desc())
        )
        result = await session.execute(stmt)
        return [row for row in result.scalars().all() if turn_id in (row.turn_ids or [])]

    async def search_text(self, session: AsyncSession, term: str, limit: int) -> Sequence[SummaryModel]:
        """Case-insensitive literal substring match on summary_text, newest first."""
        stmt = (
            select(SummaryModel)
            .where(SummaryModel.summary_text.ilike(f"%{escape_like(term)}%", escape="\\"))
            .order_by(SummaryModel.created_at.desc(), SummaryModel.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_with_embedding(self, session: AsyncSession) -> int:
        stmt = select(func.count()).select_from(SummaryModel).where(SummaryModel.embedding.is_not(None))
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def set_embedding(self, session: AsyncSession, id: int, embedding: list[float]) -> bool:
        """
        Store an embedding on an existing summary.

        Returns:
            True if the summary existed and was updated, False otherwise
        """
        stmt = update(SummaryModel).where(SummaryModel.id == id).values(embedding=embedding)
        result = await session.execute(stmt)
        return result.rowcount > 0


summary_crud = SummaryCRUD()
