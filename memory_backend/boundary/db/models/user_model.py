"""
User ORM model.

Identity anchor that owns conversation sessions. Credentials are stored
as an opaque hash computed elsewhere.

Dependencies: sqlalchemy, memory_backend.boundary.db.base
System role: User persistence
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memory_backend.boundary.db.base import Base, IntIdMixin, TimestampMixin


class UserModel(Base, IntIdMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: Integer primary key
        email: Unique login email (stored lower-cased)
        credential_hash: Opaque password hash
        display_name: Optional name shown in clients
        sessions: Sessions owned by this user
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    credential_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    sessions = relationship(
        "SessionModel",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
