"""
Chat service orchestrator.

Coordinates turn recording and session management for the chat surface
and shapes the results into response models.

Dependencies: memory_backend.core.ingestion
System role: Chat use case orchestration
"""

from typing import Sequence

from memory_backend.core.ingestion import ConversationRecorder
from memory_backend.core.record_store import RecordStore
from memory_backend.models.chat import (
    BatchMessageItem,
    ChatBatchResponse,
    ChatHistoryResponse,
    DeleteSessionResponse,
    SessionListItem,
    TurnSearchResponse,
    UserSessionsResponse,
)
from memory_backend.models.records import SessionRecord, TurnRecord, UserRecord

PREVIEW_LENGTH = 100


def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """Truncate text to length characters, marking the cut with '...'."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


class ChatService:
    """Chat service orchestrator."""

    def __init__(self, store: RecordStore) -> None:
        """
        Initialize chat service over a record store.

        Args:
            store: Record store implementation
        """
        self.recorder = ConversationRecorder(store)

    async def record_message(
        self,
        user_id: int,
        session_key: str,
        role: str,
        content: str,
    ) -> TurnRecord:
        """
        Record one turn, creating the session on first use.

        Raises:
            InvalidQueryError: Invalid role or blank content
            NotFoundError: Unknown user
        """
        return await self.recorder.record_turn(user_id, session_key, role, content)

    async def record_batch(
        self,
        user_id: int,
        session_key: str,
        messages: Sequence[BatchMessageItem],
    ) -> ChatBatchResponse:
        """
        Record several turns in one all-or-nothing write.

        Raises:
            InvalidQueryError: Any invalid role or blank content
            NotFoundError: Unknown user
        """
        turns = await self.recorder.record_turns_batch(
            user_id,
            session_key,
            [{"role": m.role, "content": m.content} for m in messages],
        )
        return ChatBatchResponse(session_key=session_key, turns=turns, count=len(turns))

    async def history(self, session_key: str, limit: int = 100, offset: int = 0) -> ChatHistoryResponse:
        session, turns = await self.recorder.session_history(session_key, limit=limit, offset=offset)
        return ChatHistoryResponse(session=session, turns=turns, count=len(turns))

    async def user_sessions(self, user_id: int, limit: int = 50, offset: int = 0) -> UserSessionsResponse:
        """
        A user's sessions with message counts and last-message previews.

        Args:
            user_id: Owning user
            limit: Maximum sessions to return
            offset: Sessions to skip

        Returns:
            UserSessionsResponse: Sessions, newest first
        """
        overviews = await self.recorder.list_user_sessions(user_id, limit=limit, offset=offset)
        items = [
            SessionListItem(
                session_key=o.session.session_key,
                title=o.session.title,
                created_at=o.session.created_at,
                updated_at=o.session.updated_at,
                message_count=o.message_count,
                last_message=preview(o.last_turn.content) if o.last_turn is not None else None,
            )
            for o in overviews
        ]
        return UserSessionsResponse(user_id=user_id, sessions=items, count=len(items))

    async def rename_session(self, session_key: str, title: str) -> SessionRecord:
        return await self.recorder.rename_session(session_key, title)

    async def delete_session(self, session_key: str) -> DeleteSessionResponse:
        deleted = await self.recorder.delete_session(session_key)
        return DeleteSessionResponse(session_key=session_key, deleted_turns=deleted)

    async def edit_turn(
        self,
        turn_id: str,
        content: str | None = None,
        role: str | None = None,
    ) -> TurnRecord:
        return await self.recorder.edit_turn(turn_id, content=content, role=role)

    async def search_turns(self, term: str | None, limit: int = 50, offset: int = 0) -> TurnSearchResponse:
        turns = await self.recorder.search_turns(term, limit=limit, offset=offset)
        return TurnSearchResponse(search_term=(term or "").strip(), turns=turns, count=len(turns))

    async def register_user(
        self,
        email: str,
        credential_hash: str,
        display_name: str | None = None,
    ) -> UserRecord:
        return await self.recorder.register_user(email, credential_hash, display_name)
