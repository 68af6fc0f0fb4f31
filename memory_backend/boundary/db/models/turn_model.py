"""
Turn ORM model.

One message in a session. The external turn_id is what summaries
reference, so it is globally unique and never reused.

Dependencies: sqlalchemy, memory_backend.boundary.db.base
System role: Conversation turn persistence
"""

import uuid

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memory_backend.boundary.db.base import Base, IntIdMixin, TimestampMixin


class TurnModel(Base, IntIdMixin, TimestampMixin):
    """
    Turn ORM model.

    Attributes:
        id: Integer primary key (chronological tie-break)
        turn_id: External uuid4 string referenced by summaries
        session_key: Owning session's external key
        user_id: Owning user
        role: user, assistant or system
        content: Message text
    """

    __tablename__ = "turns"
    __table_args__ = (Index("ix_turns_session_created", "session_key", "created_at"),)

    turn_id: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        index=True,
        nullable=False,
        default=lambda: str(uuid.uuid4()),
    )
    session_key: Mapped[str] = mapped_column(
        ForeignKey("sessions.session_key", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    session = relationship("SessionModel", back_populates="turns")
