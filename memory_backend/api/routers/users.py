"""
User API endpoints.

Routes: POST /users

Dependencies: memory_backend.application.services.chat_service
System role: User registration HTTP API
"""

from fastapi import APIRouter, Depends, status

from memory_backend.api.deps import get_chat_service
from memory_backend.api.error_handling import handle_memory_errors
from memory_backend.application.services.chat_service import ChatService
from memory_backend.models.chat import CreateUserRequest
from memory_backend.models.records import UserRecord

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRecord, status_code=status.HTTP_201_CREATED)
@handle_memory_errors
async def create_user(
    request: CreateUserRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> UserRecord:
    """
    Register a user with a pre-computed credential hash.

    Raises:
        HTTPException(400): Blank email or email already registered
    """
    return await chat_service.register_user(
        request.email,
        request.credential_hash,
        request.display_name,
    )
