"""
Test suite for ChatService.

Tests message and batch recording, history, session listing with previews,
and the management operations, against the in-memory record store.

System role: Verification of chat service orchestration layer
"""

import pytest

from memory_backend.application.services.chat_service import ChatService, preview
from memory_backend.core.exceptions import InvalidQueryError, NotFoundError
from memory_backend.models.chat import BatchMessageItem


@pytest.fixture
def chat_service(memory_store) -> ChatService:
    """Provide ChatService over a fresh in-memory store."""
    return ChatService(memory_store)


@pytest.fixture
async def user(chat_service):
    return await chat_service.register_user("chat@example.com", "hash", "Chatter")


class TestPreview:
    """Test suite for preview()."""

    def test_short_text_unchanged(self) -> None:
        assert preview("hello") == "hello"

    def test_exact_length_unchanged(self) -> None:
        assert preview("x" * 100) == "x" * 100

    def test_long_text_truncated(self) -> None:
        # Act
        result = preview("y" * 150)

        # Assert
        assert result == "y" * 100 + "..."


class TestRecording:
    """Test suite for record_message() and record_batch()."""

    @pytest.mark.asyncio
    async def test_record_message(self, chat_service, user) -> None:
        # Act
        turn = await chat_service.record_message(user.id, "s1", "user", "hello")

        # Assert
        assert turn.content == "hello"
        history = await chat_service.history("s1")
        assert history.count == 1
        assert history.session.user_id == user.id

    @pytest.mark.asyncio
    async def test_record_batch(self, chat_service, user) -> None:
        # Arrange
        messages = [
            BatchMessageItem(role="user", content="one"),
            BatchMessageItem(role="assistant", content="two"),
        ]

        # Act
        response = await chat_service.record_batch(user.id, "s1", messages)

        # Assert
        assert response.session_key == "s1"
        assert response.count == 2
        assert [t.content for t in response.turns] == ["one", "two"]

    @pytest.mark.asyncio
    async def test_invalid_role(self, chat_service, user) -> None:
        with pytest.raises(InvalidQueryError) as exc_info:
            await chat_service.record_message(user.id, "s1", "robot", "hello")

        assert "Must be one of: user, assistant, system" in exc_info.value.message


class TestSessions:
    """Test suite for session listing and management."""

    @pytest.mark.asyncio
    async def test_user_sessions_with_preview(self, chat_service, user) -> None:
        """Test listing reports counts and a truncated last message."""
        # Arrange
        await chat_service.record_message(user.id, "s1", "user", "short")
        await chat_service.record_message(user.id, "s2", "user", "first")
        await chat_service.record_message(user.id, "s2", "assistant", "z" * 120)

        # Act
        response = await chat_service.user_sessions(user.id)

        # Assert
        assert response.count == 2
        by_key = {item.session_key: item for item in response.sessions}
        assert by_key["s1"].message_count == 1
        assert by_key["s1"].last_message == "short"
        assert by_key["s2"].message_count == 2
        assert by_key["s2"].last_message == "z" * 100 + "..."

    @pytest.mark.asyncio
    async def test_user_without_sessions(self, chat_service, user) -> None:
        response = await chat_service.user_sessions(user.id)

        assert response.sessions == []
        assert response.count == 0

    @pytest.mark.asyncio
    async def test_rename_and_delete(self, chat_service, user) -> None:
        # Arrange
        await chat_service.record_message(user.id, "s1", "user", "hello")

        # Act
        renamed = await chat_service.rename_session("s1", "Greetings")
        deleted = await chat_service.delete_session("s1")

        # Assert
        assert renamed.title == "Greetings"
        assert deleted.deleted_turns == 1
        with pytest.raises(NotFoundError):
            await chat_service.history("s1")

    @pytest.mark.asyncio
    async def test_edit_and_search_turns(self, chat_service, user) -> None:
        # Arrange
        turn = await chat_service.record_message(user.id, "s1", "user", "I feel tird")

        # Act
        await chat_service.edit_turn(turn.turn_id, content="I feel tired")
        response = await chat_service.search_turns(" TIRED ")

        # Assert
        assert response.search_term == "TIRED"
        assert response.count == 1
        assert response.turns[0].content == "I feel tired"
