"""
Session ORM model.

A named conversation thread identified externally by a globally unique
session key. Owns the ordered turns of that conversation.

Dependencies: sqlalchemy, memory_backend.boundary.db.base
System role: Session persistence for conversation grouping
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memory_backend.boundary.db.base import Base, IntIdMixin, TimestampMixin


class SessionModel(Base, IntIdMixin, TimestampMixin):
    """
    Session ORM model.

    The unique constraint on session_key is what makes concurrent
    create-if-absent safe: the loser of a race gets an IntegrityError.
    Deleting a session cascades to its turns; summaries are separate rows
    and are never touched.

    Attributes:
        id: Integer primary key
        session_key: Globally unique external key
        user_id: Owning user
        title: Optional display title
        turns: Turns of this session (cascading delete)
    """

    __tablename__ = "sessions"

    session_key: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    # Relationships
    user = relationship("UserModel", back_populates="sessions")
    turns = relationship(
        "TurnModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
