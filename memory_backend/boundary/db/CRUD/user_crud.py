"""
User CRUD operations.

Dependencies: sqlalchemy, memory_backend.boundary.db.models.user_model
System role: User persistence operations
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from memory_backend.boundary.db.CRUD.base_crud import BaseCRUD
from memory_backend.boundary.db.models.user_model import UserModel


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel."""

    def __init__(self) -> None:
        """Initialize UserCRUD with UserModel."""
        super().__init__(UserModel)

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        """
        Retrieve a user by email.

        Args:
            session: Async database session
            email: Lower-cased email address

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.email == email)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


user_crud = UserCRUD()
