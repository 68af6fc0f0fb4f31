"""
Database models package.

Exports:
  - UserModel: User ORM model
  - SessionModel: Session ORM model
  - TurnModel: Conversation turn ORM model
  - SummaryModel: Conversation summary ORM model

Dependencies: sqlalchemy, memory_backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from memory_backend.boundary.db.models.user_model import UserModel
from memory_backend.boundary.db.models.session_model import SessionModel
from memory_backend.boundary.db.models.turn_model import TurnModel
from memory_backend.boundary.db.models.summary_model import SummaryModel

__all__ = ["UserModel", "SessionModel", "TurnModel", "SummaryModel"]
