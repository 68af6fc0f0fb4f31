"""
Conversation ingestion and session management.

Records turns into sessions (creating sessions on first use), and offers
the history, listing, rename, delete, edit and search operations the chat
surface needs. All validation runs before the store is touched.

Dependencies: memory_backend.core.record_store
System role: Write path for conversation turns
"""

import logging
from typing import Any, Mapping, Sequence

from memory_backend.core.exceptions import InvalidQueryError, NotFoundError
from memory_backend.core.record_store import RecordStore
from memory_backend.models.records import (
    NewTurn,
    SessionOverview,
    SessionRecord,
    TurnRecord,
    TurnRole,
    UserRecord,
)

logger = logging.getLogger(__name__)

VALID_ROLES = ", ".join(role.value for role in TurnRole)


def parse_role(role: Any) -> TurnRole:
    """
    Coerce a role value into TurnRole.

    Raises:
        InvalidQueryError: Role is not user, assistant or system
    """
    if isinstance(role, TurnRole):
        return role
    try:
        return TurnRole(role)
    except ValueError as e:
        raise InvalidQueryError(
            f"Invalid role. Must be one of: {VALID_ROLES}",
            field="role",
            details={"role": str(role)},
        ) from e


def _require_content(content: Any, field: str = "content") -> str:
    if not isinstance(content, str) or not content.strip():
        raise InvalidQueryError("Message content is required", field=field)
    return content


def _require_session_key(session_key: Any) -> str:
    if not isinstance(session_key, str) or not session_key.strip():
        raise InvalidQueryError("Session key is required", field="session_key")
    return session_key


class ConversationRecorder:
    """Stateless write path over a record store."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def _require_user(self, user_id: int) -> UserRecord:
        user = await self.store.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def _open_session(self, session_key: str, user_id: int) -> SessionRecord:
        session = await self.store.create_session_if_absent(session_key, user_id)
        if session.user_id != user_id:
            raise InvalidQueryError(
                "Session belongs to another user",
                field="session_key",
                details={"session_key": session_key},
            )
        return session

    async def record_turn(
        self,
        user_id: int,
        session_key: str,
        role: TurnRole | str,
        content: str,
    ) -> TurnRecord:
        """
        Append one turn, creating the session if it does not exist yet.

        Args:
            user_id: Owner of the session
            session_key: External session key
            role: user, assistant or system
            content: Message text (non-blank)

        Returns:
            TurnRecord: Stored turn with its generated turn id

        Raises:
            InvalidQueryError: Invalid role, blank content, blank session key or a
                session owned by another user
            NotFoundError: Unknown user
        """
        session_key = _require_session_key(session_key)
        turn_role = parse_role(role)
        _require_content(content)

        await self._require_user(user_id)
        await self._open_session(session_key, user_id)
        turn = await self.store.append_turn(session_key, user_id, turn_role, content)

        logger.info(
            f"{__name__}:record_turn - Turn recorded",
            extra={"session_key": session_key, "turn_id": turn.turn_id, "role": turn_role.value},
        )
        return turn

    async def record_turns_batch(
        self,
        user_id: int,
        session_key: str,
        messages: Sequence[NewTurn | dict[str, Any]],
    ) -> list[TurnRecord]:
        """
        Append several turns in order as a single all-or-nothing write.

        Args:
            user_id: Owner of the session
            session_key: External session key
            messages: Turns to append, each with role and content

        Returns:
            list[TurnRecord]: Stored turns in input order; empty for empty input

        Raises:
            InvalidQueryError: Any message that is not a role/content mapping, or has
                an invalid role or blank content
            NotFoundError: Unknown user
        """
        if not messages:
            return []
        session_key = _require_session_key(session_key)

        turns: list[NewTurn] = []
        for index, message in enumerate(messages):
            if isinstance(message, NewTurn):
                role, content = message.role, message.content
            elif isinstance(message, Mapping):
                role, content = message.get("role"), message.get("content")
            else:
                raise InvalidQueryError(
                    "Each message must be an object with role and content",
                    field=f"messages[{index}]",
                    details={"type": type(message).__name__},
                )
            turns.append(
                NewTurn(
                    role=parse_role(role),
                    content=_require_content(content, field=f"messages[{index}].content"),
                )
            )

        await self._require_user(user_id)
        await self._open_session(session_key, user_id)
        saved = await self.store.append_turns_batch(session_key, user_id, turns)

        logger.info(
            f"{__name__}:record_turns_batch - Batch recorded",
            extra={"session_key": session_key, "count": len(saved)},
        )
        return saved

    async def session_history(
        self,
        session_key: str,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[SessionRecord, list[TurnRecord]]:
        """
        Turns of a session in chronological order, plus the session itself.

        Raises:
            NotFoundError: Unknown session
        """
        session = await self.store.get_session(session_key)
        if session is None:
            raise NotFoundError("Session", session_key)
        turns = await self.store.get_turns_for_session(session_key, limit=limit, offset=offset)
        return session, turns

    async def list_user_sessions(
        self,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[SessionOverview]:
        return await self.store.list_sessions_for_user(user_id, limit=limit, offset=offset)

    async def rename_session(self, session_key: str, title: str) -> SessionRecord:
        """
        Set a session title.

        Raises:
            InvalidQueryError: Blank title
            NotFoundError: Unknown session
        """
        if title is None or not title.strip():
            raise InvalidQueryError("Title is required", field="title")
        session = await self.store.update_session_title(session_key, title.strip())
        if session is None:
            raise NotFoundError("Session", session_key)
        return session

    async def delete_session(self, session_key: str) -> int:
        """
        Delete a session and its turns. Summaries are kept.

        Returns:
            int: Number of turns deleted

        Raises:
            NotFoundError: Unknown session
        """
        deleted = await self.store.delete_session(session_key)
        if deleted is None:
            raise NotFoundError("Session", session_key)
        logger.info(
            f"{__name__}:delete_session - Session deleted",
            extra={"session_key": session_key, "deleted_turns": deleted},
        )
        return deleted

    async def edit_turn(
        self,
        turn_id: str,
        content: str | None = None,
        role: TurnRole | str | None = None,
    ) -> TurnRecord:
        """
        Correct the content and/or role of a stored turn.

        Raises:
            InvalidQueryError: Nothing to change, blank content or invalid role
            NotFoundError: Unknown turn
        """
        if content is None and role is None:
            raise InvalidQueryError("Nothing to update: provide content or role")
        if content is not None:
            _require_content(content)
        turn_role = parse_role(role) if role is not None else None

        turn = await self.store.update_turn(turn_id, content=content, role=turn_role)
        if turn is None:
            raise NotFoundError("Turn", turn_id)
        return turn

    async def search_turns(self, term: str | None, limit: int = 50, offset: int = 0) -> list[TurnRecord]:
        """Substring search on turn content, newest first. A blank term lists recent turns."""
        return await self.store.search_turns((term or "").strip(), limit=limit, offset=offset)

    async def register_user(
        self,
        email: str,
        credential_hash: str,
        display_name: str | None = None,
    ) -> UserRecord:
        """
        Persist a user. The credential hash is stored as given.

        Raises:
            InvalidQueryError: Blank email or hash, or email already registered
        """
        if not email or not email.strip():
            raise InvalidQueryError("Email is required", field="email")
        if not credential_hash:
            raise InvalidQueryError("Credential hash is required", field="credential_hash")
        user = await self.store.create_user(email.strip().lower(), credential_hash, display_name)
        logger.info(f"{__name__}:register_user - User created", extra={"user_id": user.id})
        return user
