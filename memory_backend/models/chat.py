"""
Chat domain models and schemas.

Request/response schemas for recording turns and managing sessions.
Roles are accepted as plain strings and validated by the ingestion path so
that an invalid role is reported as a bad request, not a schema error.

Dependencies: pydantic, memory_backend.models.records
System role: Chat API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field

from memory_backend.models.records import SessionRecord, TurnRecord


class ChatMessageRequest(BaseModel):
    """Request schema for recording one turn."""

    user_id: int = Field(description="Owner of the session")
    session_key: str = Field(description="External session key; created on first use")
    role: str = Field(description="user, assistant or system")
    content: str = Field(description="Message text")


class BatchMessageItem(BaseModel):
    """One turn inside a batch."""

    role: str
    content: str


class ChatBatchRequest(BaseModel):
    """Request schema for recording several turns at once (all or nothing)."""

    user_id: int
    session_key: str
    messages: list[BatchMessageItem] = Field(default_factory=list)


class ChatBatchResponse(BaseModel):
    """Turns stored by a batch, in input order."""

    session_key: str
    turns: list[TurnRecord]
    count: int


class ChatHistoryResponse(BaseModel):
    """Session info plus its turns in chronological order."""

    session: SessionRecord
    turns: list[TurnRecord]
    count: int


class SessionListItem(BaseModel):
    """Session row in a user's session list."""

    session_key: str
    title: str | None = None
    created_at: datetime
    updated_at: datetime
    message_count: int
    last_message: str | None = Field(
        default=None,
        description="First 100 characters of the latest turn",
    )


class UserSessionsResponse(BaseModel):
    """A user's sessions, newest first."""

    user_id: int
    sessions: list[SessionListItem]
    count: int


class UpdateTitleRequest(BaseModel):
    """Request schema for renaming a session."""

    title: str


class DeleteSessionResponse(BaseModel):
    """Outcome of deleting a session."""

    session_key: str
    deleted_turns: int


class EditTurnRequest(BaseModel):
    """Request schema for correcting a turn."""

    content: str | None = None
    role: str | None = None


class TurnSearchResponse(BaseModel):
    """Turns matching a content search, newest first."""

    search_term: str
    turns: list[TurnRecord]
    count: int


class CreateUserRequest(BaseModel):
    """Request schema for registering a user. The hash is computed by the caller."""

    email: str
    credential_hash: str
    display_name: str | None = None
