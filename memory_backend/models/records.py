"""
Storage-agnostic domain records.

Plain pydantic views of users, sessions, turns and summaries. Record stores
return these so the retrieval engine never sees ORM rows.

Dependencies: pydantic
System role: Data model shared by core, stores and services
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TurnRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class UserRecord(BaseModel):
    """Identity anchor owning sessions."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    display_name: str | None = None
    created_at: datetime


class SessionRecord(BaseModel):
    """A named conversation thread."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    session_key: str = Field(description="Globally unique external session key")
    user_id: int
    title: str | None = None
    created_at: datetime
    updated_at: datetime


class TurnRecord(BaseModel):
    """One message in a session."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    turn_id: str = Field(description="Globally unique external turn id referenced by summaries")
    session_key: str
    user_id: int
    role: TurnRole
    content: str
    created_at: datetime
    updated_at: datetime


class SummaryRecord(BaseModel):
    """Condensation of one or more turns, optionally carrying an embedding."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    summary_text: str
    turn_ids: list[str] = Field(default_factory=list)
    embedding: list[float] | None = None
    created_at: datetime
    updated_at: datetime

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None


class NewTurn(BaseModel):
    """Role and content of a turn about to be appended."""

    role: TurnRole
    content: str


class SessionOverview(BaseModel):
    """Session with message count and last-message preview."""

    session: SessionRecord
    message_count: int
    last_turn: TurnRecord | None = None
