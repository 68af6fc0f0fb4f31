"""
SQLAlchemy-backed record store.

Implements the RecordStore contract over an AsyncSession using the CRUD
singletons. Every write commits on success and rolls back on any failure,
cancellation included. Connectivity failures surface as StoreUnavailableError.

Dependencies: sqlalchemy, memory_backend.boundary.db.CRUD
System role: Production persistence for users, sessions, turns and summaries
"""

import functools
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.CRUD import session_crud, summary_crud, turn_crud, user_crud
from memory_backend.core.exceptions import (
    InvalidQueryError,
    SessionAlreadyExistsError,
    StoreUnavailableError,
)
from memory_backend.core.record_store import RecordStore
from memory_backend.models.records import (
    NewTurn,
    SessionOverview,
    SessionRecord,
    SummaryRecord,
    TurnRecord,
    TurnRole,
    UserRecord,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, DisconnectionError, OSError)


def store_operation(func):
    """
    Translate connectivity failures of a store method into StoreUnavailableError.

    Any other exception propagates unchanged.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except UNAVAILABLE_ERRORS as e:
            logger.error(
                f"{__name__}:{func.__name__} - Record store unavailable",
                extra={"operation": func.__name__, "error": str(e)},
            )
            raise StoreUnavailableError(
                "Record store is unavailable",
                operation=func.__name__,
                details={"error": str(e)},
            ) from e

    return wrapper


class SQLRecordStore(RecordStore):
    """RecordStore over a single request-scoped AsyncSession."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize store with database session.

        Args:
            db: Async database session (not shared across concurrent tasks)
        """
        self.db = db

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self.db.commit()
        except BaseException:
            # BaseException so that task cancellation also rolls back
            await self.db.rollback()
            raise

    # Users

    @store_operation
    async def create_user(
        self,
        email: str,
        credential_hash: str,
        display_name: str | None = None,
    ) -> UserRecord:
        if await user_crud.get_by_email(self.db, email) is not None:
            raise InvalidQueryError("Email already registered", field="email")
        try:
            async with self._transaction():
                row = await user_crud.create(
                    self.db,
                    email=email,
                    credential_hash=credential_hash,
                    display_name=display_name,
                )
                user = UserRecord.model_validate(row)
        except IntegrityError as e:
            raise InvalidQueryError("Email already registered", field="email") from e
        return user

    @store_operation
    async def get_user(self, user_id: int) -> UserRecord | None:
        row = await user_crud.get_by_id(self.db, user_id)
        return UserRecord.model_validate(row) if row is not None else None

    # Sessions

    @store_operation
    async def get_session(self, session_key: str) -> SessionRecord | None:
        row = await session_crud.get_by_key(self.db, session_key)
        return SessionRecord.model_validate(row) if row is not None else None

    @store_operation
    async def create_session(
        self,
        session_key: str,
        user_id: int,
        title: str | None = None,
    ) -> SessionRecord:
        try:
            async with self._transaction():
                row = await session_crud.create(
                    self.db,
                    session_key=session_key,
                    user_id=user_id,
                    title=title,
                )
                session = SessionRecord.model_validate(row)
        except IntegrityError as e:
            logger.info(
                f"{__name__}:create_session - Session key already taken",
                extra={"session_key": session_key},
            )
            raise SessionAlreadyExistsError(session_key) from e
        logger.info(
            f"{__name__}:create_session - Session created",
            extra={"session_key": session_key, "user_id": user_id},
        )
        return session

    @store_operation
    async def list_sessions_for_user(
        self,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[SessionOverview]:
        rows = await session_crud.list_for_user(self.db, user_id, limit=limit, offset=offset)
        counts = await turn_crud.count_by_session_keys(self.db, [r.session_key for r in rows])

        overviews = []
        for row in rows:
            last = await turn_crud.latest_for_session(self.db, row.session_key)
            overviews.append(
                SessionOverview(
                    session=SessionRecord.model_validate(row),
                    message_count=counts.get(row.session_key, 0),
                    last_turn=TurnRecord.model_validate(last) if last is not None else None,
                )
            )
        return overviews

    @store_operation
    async def update_session_title(self, session_key: str, title: str) -> SessionRecord | None:
        async with self._transaction():
            row = await session_crud.get_by_key(self.db, session_key)
            if row is None:
                return None
            row = await session_crud.update_by_id(self.db, row.id, title=title)
            session = SessionRecord.model_validate(row)
        return session

    @store_operation
    async def delete_session(self, session_key: str) -> int | None:
        async with self._transaction():
            row = await session_crud.get_by_key(self.db, session_key)
            if row is None:
                return None
            deleted_turns = await turn_crud.delete_for_session(self.db, session_key)
            await session_crud.delete_by_key(self.db, session_key)
        logger.info(
            f"{__name__}:delete_session - Session deleted",
            extra={"session_key": session_key, "deleted_turns": deleted_turns},
        )
        return deleted_turns

    # Turns

    @store_operation
    async def append_turn(
        self,
        session_key: str,
        user_id: int,
        role: TurnRole,
        content: str,
    ) -> TurnRecord:
        async with self._transaction():
            row = await turn_crud.create(
                self.db,
                session_key=session_key,
                user_id=user_id,
                role=role.value,
                content=content,
            )
            turn = TurnRecord.model_validate(row)
        return turn

    @store_operation
    async def append_turns_batch(
        self,
        session_key: str,
        user_id: int,
        turns: Sequence[NewTurn],
    ) -> list[TurnRecord]:
        if not turns:
            return []
        async with self._transaction():
            rows = await turn_crud.create_many(
                self.db,
                [
                    {
                        "session_key": session_key,
                        "user_id": user_id,
                        "role": t.role.value,
                        "content": t.content,
                    }
                    for t in turns
                ],
            )
            saved = [TurnRecord.model_validate(row) for row in rows]
        return saved

    @store_operation
    async def get_turns_by_ids(self, turn_ids: Sequence[str]) -> list[TurnRecord]:
        rows = await turn_crud.get_by_turn_ids(self.db, turn_ids)
        return [TurnRecord.model_validate(row) for row in rows]

    @store_operation
    async def get_turns_for_session(
        self,
        session_key: str,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TurnRecord]:
        rows = await turn_crud.list_for_session(self.db, session_key, limit=limit, offset=offset)
        return [TurnRecord.model_validate(row) for row in rows]

    @store_operation
    async def update_turn(
        self,
        turn_id: str,
        content: str | None = None,
        role: TurnRole | None = None,
    ) -> TurnRecord | None:
        changes = {}
        if content is not None:
            changes["content"] = content
        if role is not None:
            changes["role"] = role.value

        async with self._transaction():
            row = await turn_crud.get_by_turn_id(self.db, turn_id)
            if row is None:
                return None
            row = await turn_crud.update_by_id(self.db, row.id, **changes)
            turn = TurnRecord.model_validate(row)
        return turn

    @store_operation
    async def search_turns(self, term: str, limit: int = 50, offset: int = 0) -> list[TurnRecord]:
        rows = await turn_crud.search_content(self.db, term, limit=limit, offset=offset)
        return [TurnRecord.model_validate(row) for row in rows]

    # Summaries

    @store_operation
    async def create_summary(
        self,
        summary_text: str,
        turn_ids: Sequence[str],
        embedding: Sequence[float] | None = None,
    ) -> SummaryRecord:
        async with self._transaction():
            row = await summary_crud.create(
                self.db,
                summary_text=summary_text,
                turn_ids=list(turn_ids),
                embedding=list(embedding) if embedding is not None else None,
            )
            summary = SummaryRecord.model_validate(row)
        return summary

    @store_operation
    async def get_summary(self, summary_id: int) -> SummaryRecord | None:
        row = await summary_crud.get_by_id(self.db, summary_id)
        return SummaryRecord.model_validate(row) if row is not None else None

    @store_operation
    async def list_summaries_with_embedding(self) -> list[SummaryRecord]:
        rows = await summary_crud.list_with_embedding(self.db)
        return [SummaryRecord.model_validate(row) for row in rows]

    @store_operation
    async def list_summaries_without_embedding(self, limit: int = 100) -> list[SummaryRecord]:
        rows = await summary_crud.list_without_embedding(self.db, limit=limit)
        return [SummaryRecord.model_validate(row) for row in rows]

    @store_operation
    async def list_summaries_for_turn(self, turn_id: str) -> list[SummaryRecord]:
        rows = await summary_crud.list_referencing_turn(self.db, turn_id)
        return [SummaryRecord.model_validate(row) for row in rows]

    @store_operation
    async def set_summary_embedding(self, summary_id: int, embedding: Sequence[float]) -> bool:
        async with self._transaction():
            updated = await summary_crud.set_embedding(self.db, summary_id, list(embedding))
        return updated

    @store_operation
    async def search_summaries_by_text(self, term: str, limit: int) -> list[SummaryRecord]:
        rows = await summary_crud.search_text(self.db, term, limit)
        return [SummaryRecord.model_validate(row) for row in rows]

    @store_operation
    async def count_summaries(self) -> int:
        return await summary_crud.count(self.db)

    @store_operation
    async def count_summaries_with_embedding(self) -> int:
        return await summary_crud.count_with_embedding(self.db)
