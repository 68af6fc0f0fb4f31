"""
Abstract record store contract.

The retrieval engine and the ingestion path talk to persistence only through
this interface. Implementations: SQLRecordStore (SQLAlchemy, production) and
InMemoryRecordStore (process-local, development and tests).

Every method is a suspension point. Implementations raise
StoreUnavailableError when the backing store cannot be reached and
SessionAlreadyExistsError when a session key is taken; all other failures
propagate unchanged.

Dependencies: memory_backend.models.records
System role: Persistence port for users, sessions, turns and summaries
"""

from abc import ABC, abstractmethod
from typing import Sequence

from memory_backend.core.exceptions import SessionAlreadyExistsError
from memory_backend.models.records import (
    NewTurn,
    SessionOverview,
    SessionRecord,
    SummaryRecord,
    TurnRecord,
    TurnRole,
    UserRecord,
)


class RecordStore(ABC):
    """Durable mapping of users -> sessions -> turns, plus summaries."""

    # Users

    @abstractmethod
    async def create_user(
        self,
        email: str,
        credential_hash: str,
        display_name: str | None = None,
    ) -> UserRecord:
        """Create a user. Raises InvalidQueryError if the email is taken."""

    @abstractmethod
    async def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user or None."""

    # Sessions

    @abstractmethod
    async def get_session(self, session_key: str) -> SessionRecord | None:
        """Return the session for an external key or None."""

    @abstractmethod
    async def create_session(
        self,
        session_key: str,
        user_id: int,
        title: str | None = None,
    ) -> SessionRecord:
        """Create a session. Raises SessionAlreadyExistsError if the key is taken."""

    async def create_session_if_absent(self, session_key: str, user_id: int) -> SessionRecord:
        """
        Return the existing session for key, creating it when missing.

        A concurrent creator winning the race is not an error: the session
        now exists, so it is re-read and returned.

        Args:
            session_key: External session key
            user_id: Owner for a newly created session

        Returns:
            SessionRecord: Existing or newly created session
        """
        existing = await self.get_session(session_key)
        if existing is not None:
            return existing
        try:
            return await self.create_session(session_key, user_id)
        except SessionAlreadyExistsError:
            existing = await self.get_session(session_key)
            if existing is None:
                raise
            return existing

    @abstractmethod
    async def list_sessions_for_user(
        self,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[SessionOverview]:
        """Sessions of a user, newest first, with turn counts and last turn."""

    @abstractmethod
    async def update_session_title(self, session_key: str, title: str) -> SessionRecord | None:
        """Set the title. Returns None if the session does not exist."""

    @abstractmethod
    async def delete_session(self, session_key: str) -> int | None:
        """
        Delete a session and its turns; summaries are untouched.

        Returns:
            Number of deleted turns, or None if the session did not exist
        """

    # Turns

    @abstractmethod
    async def append_turn(
        self,
        session_key: str,
        user_id: int,
        role: TurnRole,
        content: str,
    ) -> TurnRecord:
        """Append one turn with a freshly generated external turn id."""

    @abstractmethod
    async def append_turns_batch(
        self,
        session_key: str,
        user_id: int,
        turns: Sequence[NewTurn],
    ) -> list[TurnRecord]:
        """Append turns in order, all or nothing."""

    @abstractmethod
    async def get_turns_by_ids(self, turn_ids: Sequence[str]) -> list[TurnRecord]:
        """Turns whose external id is in turn_ids, chronological. Unknown ids are skipped."""

    @abstractmethod
    async def get_turns_for_session(
        self,
        session_key: str,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TurnRecord]:
        """Turns of a session in chronological order."""

    @abstractmethod
    async def update_turn(
        self,
        turn_id: str,
        content: str | None = None,
        role: TurnRole | None = None,
    ) -> TurnRecord | None:
        """Correct content and/or role. Returns None if the turn does not exist."""

    @abstractmethod
    async def search_turns(self, term: str, limit: int = 50, offset: int = 0) -> list[TurnRecord]:
        """Case-insensitive substring match on turn content, newest first."""

    # Summaries

    @abstractmethod
    async def create_summary(
        self,
        summary_text: str,
        turn_ids: Sequence[str],
        embedding: Sequence[float] | None = None,
    ) -> SummaryRecord:
        """Persist a summary produced by the summarization process."""

    @abstractmethod
    async def get_summary(self, summary_id: int) -> SummaryRecord | None:
        """Return the summary or None."""

    @abstractmethod
    async def list_summaries_with_embedding(self) -> list[SummaryRecord]:
        """Every summary whose embedding is present."""

    @abstractmethod
    async def list_summaries_without_embedding(self, limit: int = 100) -> list[SummaryRecord]:
        """Backlog of summaries still waiting for an embedding, oldest first."""

    @abstractmethod
    async def list_summaries_for_turn(self, turn_id: str) -> list[SummaryRecord]:
        """Summaries referencing an external turn id, newest first."""

    @abstractmethod
    async def set_summary_embedding(self, summary_id: int, embedding: Sequence[float]) -> bool:
        """Attach an embedding. Returns False if the summary does not exist."""

    @abstractmethod
    async def search_summaries_by_text(self, term: str, limit: int) -> list[SummaryRecord]:
        """Case-insensitive substring match on summary text, newest first."""

    @abstractmethod
    async def count_summaries(self) -> int:
        """Total number of summaries."""

    @abstractmethod
    async def count_summaries_with_embedding(self) -> int:
        """Number of summaries carrying an embedding."""
