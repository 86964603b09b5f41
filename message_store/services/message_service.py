"""
Message service.

Caller-facing entry point of the message store. Validates raw input into the
message schemas and delegates persistence to the message repository.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from message_store.core.config import get_settings
from message_store.core.exceptions import ValidationError
from message_store.interfaces.message_repository import IMessageRepository, MessageId
from message_store.models.message import Message, MessageCreate


class MessageService:
    """
    Service for the message lifecycle.

    Handles:
    - Message creation and lookup
    - Tag replacement and tag search
    - Soft deletion
    """

    def __init__(
        self,
        message_repo: IMessageRepository,
        search_include_deleted: Optional[bool] = None,
    ):
        self.message_repo = message_repo
        if search_include_deleted is None:
            search_include_deleted = get_settings().MESSAGE_SEARCH_INCLUDE_DELETED
        self.search_include_deleted = search_include_deleted

    async def create(
        self,
        message: Union[MessageCreate, Mapping[str, Any]],
        sender_id: str,
    ) -> Message:
        """
        Create a message.

        Args:
            message: MessageCreate, or a mapping with conversation_id /
                conversationId, text and optional tags
            sender_id: Sending user ID

        Returns:
            Created message

        Raises:
            ValidationError: A required field is missing or malformed
        """
        if not isinstance(message, MessageCreate):
            try:
                message = MessageCreate.model_validate(message)
            except PydanticValidationError as e:
                raise ValidationError("Invalid message input", details=e.errors()) from e
        return await self.message_repo.create(sender_id, message)

    async def get_message(self, message_id: MessageId) -> Message:
        """Get a message by ID."""
        return await self.message_repo.get_message(message_id)

    async def update_tag(self, message_id: MessageId, tags: list[str]) -> Message:
        """
        Replace the tags of a message with ``tags``.

        Raises:
            ValidationError: A tag is empty or too long
            NotFoundError: No such message
        """
        return await self.message_repo.update_tag(message_id, tags)

    async def find_messages_by_tag(
        self,
        tag: str,
        include_deleted: Optional[bool] = None,
    ) -> list[Message]:
        """Find messages carrying ``tag``; deleted ones follow the configured policy."""
        if include_deleted is None:
            include_deleted = self.search_include_deleted
        return await self.message_repo.find_messages_by_tag(tag, include_deleted=include_deleted)

    async def delete(self, message_id: MessageId) -> Message:
        """Soft-delete a message."""
        return await self.message_repo.delete(message_id)
