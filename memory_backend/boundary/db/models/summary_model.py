"""
Conversation summary ORM model.

Condensed text over one or more turns with an optional embedding. Turn
references are a JSON list of external turn ids and may span sessions, so
there is no foreign key: deleting a session leaves summaries intact.

Dependencies: sqlalchemy, memory_backend.boundary.db.base
System role: Summary and embedding persistence for semantic search
"""

from sqlalchemy import JSON, Text
from sqlalchemy.orm import Mapped, mapped_column

from memory_backend.boundary.db.base import Base, IntIdMixin, TimestampMixin


class SummaryModel(Base, IntIdMixin, TimestampMixin):
    """
    Summary ORM model.

    Attributes:
        id: Integer primary key
        summary_text: Condensed text
        turn_ids: Ordered external turn ids the summary covers
        embedding: Vector of the configured dimension, or NULL while pending
    """

    __tablename__ = "conversation_summaries"

    summary_text: Mapped[str] = mapped_column(Text, nullable=False)
    turn_ids: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="External turn ids, in the order the summarizer supplied them",
    )
    embedding: Mapped[list | None] = mapped_column(
        JSON(none_as_null=True),
        nullable=True,
        default=None,
        doc="Embedding vector; NULL until the embedding job fills it",
    )
