"""
Chat API endpoints.

Routes:
- POST /chat/message - Record one turn (session created on first use)
- POST /chat/messages/batch - Record several turns, all or nothing
- GET /chat/history/{session_key} - Turns of a session, oldest first
- GET /chat/sessions/{user_id} - A user's sessions with counts and previews
- PUT /chat/session/{session_key}/title - Rename session
- DELETE /chat/session/{session_key} - Delete session and its turns
- PATCH /chat/turns/{turn_id} - Correct a turn
- GET /chat/turns/search - Search turn content

Dependencies: memory_backend.application.services.chat_service, memory_backend.models
System role: Chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from memory_backend.api.deps import get_chat_service
from memory_backend.api.error_handling import handle_memory_errors
from memory_backend.application.services.chat_service import ChatService
from memory_backend.models.chat import (
    ChatBatchRequest,
    ChatBatchResponse,
    ChatHistoryResponse,
    ChatMessageRequest,
    DeleteSessionResponse,
    EditTurnRequest,
    TurnSearchResponse,
    UpdateTitleRequest,
    UserSessionsResponse,
)
from memory_backend.models.records import SessionRecord, TurnRecord

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/message", response_model=TurnRecord, status_code=status.HTTP_201_CREATED)
@handle_memory_errors
async def record_message(
    request: ChatMessageRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> TurnRecord:
    """
    Record one turn.

    Args:
        request: user_id, session_key, role and content
        chat_service: Injected ChatService

    Returns:
        TurnRecord: Stored turn with generated turn_id

    Raises:
        HTTPException(400): Invalid role or blank content
        HTTPException(404): Unknown user
    """
    return await chat_service.record_message(
        request.user_id,
        request.session_key,
        request.role,
        request.content,
    )


@router.post("/messages/batch", response_model=ChatBatchResponse, status_code=status.HTTP_201_CREATED)
@handle_memory_errors
async def record_batch(
    request: ChatBatchRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatBatchResponse:
    """Record several turns in order. Nothing is stored if any turn fails."""
    return await chat_service.record_batch(request.user_id, request.session_key, request.messages)


@router.get("/history/{session_key}", response_model=ChatHistoryResponse)
@handle_memory_errors
async def chat_history(
    session_key: str,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    """
    Get session history.

    Raises:
        HTTPException(404): Session not found
    """
    return await chat_service.history(session_key, limit=limit, offset=offset)


@router.get("/sessions/{user_id}", response_model=UserSessionsResponse)
@handle_memory_errors
async def user_sessions(
    user_id: int,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    chat_service: ChatService = Depends(get_chat_service),
) -> UserSessionsResponse:
    """List a user's sessions, newest first."""
    return await chat_service.user_sessions(user_id, limit=limit, offset=offset)


@router.put("/session/{session_key}/title", response_model=SessionRecord)
@handle_memory_errors
async def rename_session(
    session_key: str,
    request: UpdateTitleRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> SessionRecord:
    """Set the session title."""
    return await chat_service.rename_session(session_key, request.title)


@router.delete("/session/{session_key}", response_model=DeleteSessionResponse)
@handle_memory_errors
async def delete_session(
    session_key: str,
    chat_service: ChatService = Depends(get_chat_service),
) -> DeleteSessionResponse:
    """
    Delete a session and its turns. Summaries are kept.

    Raises:
        HTTPException(404): Session not found
    """
    return await chat_service.delete_session(session_key)


@router.get("/turns/search", response_model=TurnSearchResponse)
@handle_memory_errors
async def search_turns(
    q: str = Query(default="", description="Search term; empty lists recent turns"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    chat_service: ChatService = Depends(get_chat_service),
) -> TurnSearchResponse:
    """Search turn content, newest first."""
    return await chat_service.search_turns(q, limit=limit, offset=offset)


@router.patch("/turns/{turn_id}", response_model=TurnRecord)
@handle_memory_errors
async def edit_turn(
    turn_id: str,
    request: EditTurnRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> TurnRecord:
    """
    Correct the content and/or role of a turn.

    Raises:
        HTTPException(400): Nothing to change or invalid role
        HTTPException(404): Turn not found
    """
    return await chat_service.edit_turn(turn_id, content=request.content, role=request.role)
