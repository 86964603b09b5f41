"""
Integration tests for MessageService.

Runs the service against a real in-memory SQLite repository; store failures
are simulated with mocked sessions.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from message_store.core.exceptions import InfrastructureError, NotFoundError, ValidationError
from message_store.infrastructure.local.message_repository import SqliteMessageRepository
from message_store.models.message import MessageCreate
from message_store.services.message_service import MessageService


@pytest.fixture
def message_service(message_repo):
    return MessageService(message_repo, search_include_deleted=True)


@pytest.fixture
def failing_repo():
    """Repository whose session fails on every statement."""
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("db is down")))
    session.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("db is down")))
    session.refresh = AsyncMock()

    def factory():
        class SessionCtx:
            async def __aenter__(self):
                return session

            async def __aexit__(self, exc_type, exc_val, exc_tb):
                pass

        return SessionCtx()

    return SqliteMessageRepository(session_factory=factory)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_from_camel_case_mapping(self, message_service, sender_id):
        conversation_id = str(uuid4())

        message = await message_service.create(
            {"conversationId": conversation_id, "text": "Hello world", "tags": ["tag1", "tag2"]},
            sender_id,
        )

        assert message.conversation_id == conversation_id
        assert message.conversation.id == conversation_id
        assert message.sender.id == sender_id
        assert message.tags == ["tag1", "tag2"]

    @pytest.mark.asyncio
    async def test_create_from_model(self, message_service, sender_id, conversation_id):
        message = await message_service.create(
            MessageCreate(conversation_id=conversation_id, text="Hi"), sender_id
        )

        assert message.tags == []
        assert message.deleted is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"text": "no conversation"},
            {"conversationId": "", "text": "empty conversation"},
            {"conversationId": "   ", "text": "blank conversation"},
            {"conversationId": "c1"},
            {"conversationId": "c1", "text": ""},
            {"conversationId": "c1", "text": "   "},
            {"conversationId": "c1", "text": "bad tags", "tags": "tag1"},
            {"conversationId": "c1", "text": "bad tags", "tags": [""]},
        ],
    )
    async def test_create_invalid_input(self, message_service, sender_id, payload):
        with pytest.raises(ValidationError) as exc_info:
            await message_service.create(payload, sender_id)

        assert exc_info.value.details

    @pytest.mark.asyncio
    async def test_create_invalid_sender(self, message_service, conversation_id):
        with pytest.raises(ValidationError):
            await message_service.create({"conversationId": conversation_id, "text": "x"}, "")


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_create_tag_search_delete_flow(self, message_service, sender_id, conversation_id):
        message = await message_service.create(
            {"conversationId": conversation_id, "text": "Hello", "tags": ["tag1"]}, sender_id
        )

        fetched = await message_service.get_message(str(message.id))
        assert fetched == message

        await message_service.update_tag(str(message.id), ["tag3", "tag4"])
        assert (await message_service.get_message(message.id)).tags == ["tag3", "tag4"]
        assert await message_service.find_messages_by_tag("tag1") == []
        assert [m.id for m in await message_service.find_messages_by_tag("tag3")] == [message.id]

        deleted = await message_service.delete(message.id)
        assert deleted.deleted is True
        assert (await message_service.get_message(message.id)).deleted is True

    @pytest.mark.asyncio
    async def test_update_tag_rejects_invalid_tags(
        self, message_service, sender_id, conversation_id
    ):
        message = await message_service.create(
            {"conversationId": conversation_id, "text": "Hello", "tags": ["keep"]}, sender_id
        )

        with pytest.raises(ValidationError):
            await message_service.update_tag(message.id, ["ok", ""])

        assert (await message_service.get_message(message.id)).tags == ["keep"]

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, message_service):
        missing = str(uuid4())

        with pytest.raises(NotFoundError):
            await message_service.get_message(missing)
        with pytest.raises(NotFoundError):
            await message_service.update_tag(missing, ["a"])
        with pytest.raises(NotFoundError):
            await message_service.delete(missing)


class TestSearchPolicy:
    @pytest.mark.asyncio
    async def test_default_policy_excludes_deleted(self, message_repo, sender_id, conversation_id):
        service = MessageService(message_repo, search_include_deleted=False)
        kept = await service.create({"conversationId": conversation_id, "text": "a", "tags": ["t"]}, sender_id)
        gone = await service.create({"conversationId": conversation_id, "text": "b", "tags": ["t"]}, sender_id)
        await service.delete(gone.id)

        assert [m.id for m in await service.find_messages_by_tag("t")] == [kept.id]
        assert {m.id for m in await service.find_messages_by_tag("t", include_deleted=True)} == {
            kept.id,
            gone.id,
        }

    def test_policy_defaults_to_settings(self, message_repo):
        service = MessageService(message_repo)

        assert service.search_include_deleted is True

    @pytest.mark.asyncio
    async def test_policy_passed_to_repository(self):
        repo = MagicMock()
        repo.find_messages_by_tag = AsyncMock(return_value=[])
        service = MessageService(repo, search_include_deleted=False)

        await service.find_messages_by_tag("tag1")

        repo.find_messages_by_tag.assert_awaited_once_with("tag1", include_deleted=False)


class TestStoreFailure:
    @pytest.mark.asyncio
    async def test_get_wraps_store_error(self, failing_repo):
        with pytest.raises(InfrastructureError) as exc_info:
            await failing_repo.get_message(uuid4())

        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_create_wraps_store_error(self, failing_repo, sender_id, conversation_id):
        with pytest.raises(InfrastructureError):
            await failing_repo.create(
                sender_id, MessageCreate(conversation_id=conversation_id, text="x")
            )

    @pytest.mark.asyncio
    async def test_search_wraps_store_error(self, failing_repo):
        service = MessageService(failing_repo)

        with pytest.raises(InfrastructureError):
            await service.find_messages_by_tag("tag1")

    @pytest.mark.asyncio
    async def test_not_found_is_not_wrapped(self, failing_repo):
        """Malformed IDs fail before the store is touched."""
        with pytest.raises(NotFoundError):
            await failing_repo.delete("not-an-id")
