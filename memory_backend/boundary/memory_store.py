"""
Process-local record store.

Keeps users, sessions, turns and summaries in dictionaries guarded by a
single asyncio.Lock. Intended for local development and tests; data is lost
when the process exits.

Dependencies: memory_backend.core.record_store
System role: In-memory persistence for development mode
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Sequence

from memory_backend.core.exceptions import InvalidQueryError, SessionAlreadyExistsError
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


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _newest_first(records):
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


def _oldest_first(records):
    return sorted(records, key=lambda r: (r.created_at, r.id))


class InMemoryRecordStore(RecordStore):
    """RecordStore held entirely in process memory."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._users: dict[int, UserRecord] = {}
        self._credentials: dict[int, str] = {}
        self._sessions: dict[str, SessionRecord] = {}
        self._turns: dict[str, TurnRecord] = {}
        self._summaries: dict[int, SummaryRecord] = {}
        self._next_id = {"user": 1, "session": 1, "turn": 1, "summary": 1}

    def _allocate_id(self, kind: str) -> int:
        value = self._next_id[kind]
        self._next_id[kind] = value + 1
        return value

    def _copy(self, record):
        return record.model_copy(deep=True)

    # Users

    async def create_user(
        self,
        email: str,
        credential_hash: str,
        display_name: str | None = None,
    ) -> UserRecord:
        async with self._lock:
            if any(u.email == email for u in self._users.values()):
                raise InvalidQueryError("Email already registered", field="email")
            user = UserRecord(
                id=self._allocate_id("user"),
                email=email,
                display_name=display_name,
                created_at=_now(),
            )
            self._users[user.id] = user
            self._credentials[user.id] = credential_hash
            return self._copy(user)

    async def get_user(self, user_id: int) -> UserRecord | None:
        user = self._users.get(user_id)
        return self._copy(user) if user is not None else None

    # Sessions

    async def get_session(self, session_key: str) -> SessionRecord | None:
        session = self._sessions.get(session_key)
        return self._copy(session) if session is not None else None

    async def create_session(
        self,
        session_key: str,
        user_id: int,
        title: str | None = None,
    ) -> SessionRecord:
        async with self._lock:
            if session_key in self._sessions:
                raise SessionAlreadyExistsError(session_key)
            now = _now()
            session = SessionRecord(
                id=self._allocate_id("session"),
                session_key=session_key,
                user_id=user_id,
                title=title,
                created_at=now,
                updated_at=now,
            )
            self._sessions[session_key] = session
            return self._copy(session)

    async def list_sessions_for_user(
        self,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[SessionOverview]:
        sessions = _newest_first(s for s in self._sessions.values() if s.user_id == user_id)
        overviews = []
        for session in sessions[offset : offset + limit]:
            turns = [t for t in self._turns.values() if t.session_key == session.session_key]
            last = _newest_first(turns)[0] if turns else None
            overviews.append(
                SessionOverview(
                    session=self._copy(session),
                    message_count=len(turns),
                    last_turn=self._copy(last) if last is not None else None,
                )
            )
        return overviews

    async def update_session_title(self, session_key: str, title: str) -> SessionRecord | None:
        async with self._lock:
            session = self._sessions.get(session_key)
            if session is None:
                return None
            updated = session.model_copy(update={"title": title, "updated_at": _now()})
            self._sessions[session_key] = updated
            return self._copy(updated)

    async def delete_session(self, session_key: str) -> int | None:
        async with self._lock:
            if self._sessions.pop(session_key, None) is None:
                return None
            doomed = [tid for tid, t in self._turns.items() if t.session_key == session_key]
            for tid in doomed:
                del self._turns[tid]
            return len(doomed)

    # Turns

    def _build_turn(self, session_key: str, user_id: int, role: TurnRole, content: str) -> TurnRecord:
        now = _now()
        return TurnRecord(
            id=self._allocate_id("turn"),
            turn_id=str(uuid.uuid4()),
            session_key=session_key,
            user_id=user_id,
            role=role,
            content=content,
            created_at=now,
            updated_at=now,
        )

    async def append_turn(
        self,
        session_key: str,
        user_id: int,
        role: TurnRole,
        content: str,
    ) -> TurnRecord:
        async with self._lock:
            turn = self._build_turn(session_key, user_id, role, content)
            self._turns[turn.turn_id] = turn
            return self._copy(turn)

    async def append_turns_batch(
        self,
        session_key: str,
        user_id: int,
        turns: Sequence[NewTurn],
    ) -> list[TurnRecord]:
        async with self._lock:
            # Build everything first so a failure leaves nothing behind
            built = [self._build_turn(session_key, user_id, t.role, t.content) for t in turns]
            for turn in built:
                self._turns[turn.turn_id] = turn
            return [self._copy(t) for t in built]

    async def get_turns_by_ids(self, turn_ids: Sequence[str]) -> list[TurnRecord]:
        found = [self._turns[tid] for tid in set(turn_ids) if tid in self._turns]
        return [self._copy(t) for t in _oldest_first(found)]

    async def get_turns_for_session(
        self,
        session_key: str,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TurnRecord]:
        turns = _oldest_first(t for t in self._turns.values() if t.session_key == session_key)
        return [self._copy(t) for t in turns[offset : offset + limit]]

    async def update_turn(
        self,
        turn_id: str,
        content: str | None = None,
        role: TurnRole | None = None,
    ) -> TurnRecord | None:
        async with self._lock:
            turn = self._turns.get(turn_id)
            if turn is None:
                return None
            changes = {"updated_at": _now()}
            if content is not None:
                changes["content"] = content
            if role is not None:
                changes["role"] = role
            updated = turn.model_copy(update=changes)
            self._turns[turn_id] = updated
            return self._copy(updated)

    async def search_turns(self, term: str, limit: int = 50, offset: int = 0) -> list[TurnRecord]:
        needle = term.lower()
        turns = _newest_first(t for t in self._turns.values() if needle in t.content.lower())
        return [self._copy(t) for t in turns[offset : offset + limit]]

    # Summaries

    async def create_summary(
        self,
        summary_text: str,
        turn_ids: Sequence[str],
        embedding: Sequence[float] | None = None,
    ) -> SummaryRecord:
        async with self._lock:
            now = _now()
            summary = SummaryRecord(
                id=self._allocate_id("summary"),
                summary_text=summary_text,
                turn_ids=list(turn_ids),
                embedding=list(embedding) if embedding is not None else None,
                created_at=now,
                updated_at=now,
            )
            self._summaries[summary.id] = summary
            return self._copy(summary)

    async def get_summary(self, summary_id: int) -> SummaryRecord | None:
        summary = self._summaries.get(summary_id)
        return self._copy(summary) if summary is not None else None

    async def list_summaries_with_embedding(self) -> list[SummaryRecord]:
        return [self._copy(s) for s in self._summaries.values() if s.has_embedding]

    async def list_summaries_without_embedding(self, limit: int = 100) -> list[SummaryRecord]:
        pending = _oldest_first(s for s in self._summaries.values() if not s.has_embedding)
        return [self._copy(s) for s in pending[:limit]]

    async def list_summaries_for_turn(self, turn_id: str) -> list[SummaryRecord]:
        matches = _newest_first(s for s in self._summaries.values() if turn_id in s.turn_ids)
        return [self._copy(s) for s in matches]

    async def set_summary_embedding(self, summary_id: int, embedding: Sequence[float]) -> bool:
        async with self._lock:
            summary = self._summaries.get(summary_id)
            if summary is None:
                return False
            self._summaries[summary_id] = summary.model_copy(
                update={"embedding": list(embedding), "updated_at": _now()}
            )
            return True

    async def search_summaries_by_text(self, term: str, limit: int) -> list[SummaryRecord]:
        needle = term.lower()
        matches = _newest_first(s for s in self._summaries.values() if needle in s.summary_text.lower())
        return [self._copy(s) for s in matches[:limit]]

    async def count_summaries(self) -> int:
        return len(self._summaries)

    async def count_summaries_with_embedding(self) -> int:
        return sum(1 for s in self._summaries.values() if s.has_embedding)
