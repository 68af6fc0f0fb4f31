"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from memory_backend.boundary.db.CRUD import summary_crud, turn_crud

    # Use singleton instances
    summary = await summary_crud.get_by_id(db, summary_id)

    # Or instantiate classes directly for custom behavior
    from memory_backend.boundary.db.CRUD import TurnCRUD
    custom_crud = TurnCRUD()
"""

from memory_backend.boundary.db.CRUD.base_crud import BaseCRUD, escape_like
from memory_backend.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from memory_backend.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from memory_backend.boundary.db.CRUD.turn_crud import TurnCRUD, turn_crud
from memory_backend.boundary.db.CRUD.summary_crud import SummaryCRUD, summary_crud

__all__ = [
    "BaseCRUD",
    "escape_like",
    "UserCRUD",
    "user_crud",
    "SessionCRUD",
    "session_crud",
    "TurnCRUD",
    "turn_crud",
    "SummaryCRUD",
    "summary_crud",
]
