"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, IntIdMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - UserModel, SessionModel, TurnModel, SummaryModel: Core domain entities
  - user_crud, session_crud, turn_crud, summary_crud: CRUD operation singletons
  - SQLRecordStore: RecordStore implementation over an AsyncSession

Dependencies: sqlalchemy, memory_backend.configs
System role: Database adapter providing persistent storage for users,
sessions, conversation turns and summaries.
"""

from memory_backend.boundary.db.base import Base, IntIdMixin, TimestampMixin
from memory_backend.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from memory_backend.boundary.db.models import SessionModel, SummaryModel, TurnModel, UserModel
from memory_backend.boundary.db.CRUD import (
    BaseCRUD,
    SessionCRUD,
    SummaryCRUD,
    TurnCRUD,
    UserCRUD,
    session_crud,
    summary_crud,
    turn_crud,
    user_crud,
)
from memory_backend.boundary.db.record_store import SQLRecordStore

__all__ = [
    # Base classes
    "Base",
    "IntIdMixin",
    "TimestampMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "UserModel",
    "SessionModel",
    "TurnModel",
    "SummaryModel",
    # CRUD classes
    "BaseCRUD",
    "UserCRUD",
    "SessionCRUD",
    "TurnCRUD",
    "SummaryCRUD",
    # CRUD singletons
    "user_crud",
    "session_crud",
    "turn_crud",
    "summary_crud",
    # Record store
    "SQLRecordStore",
]
