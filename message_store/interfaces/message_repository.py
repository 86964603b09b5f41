"""
Message repository interface.

Defines the contract for chat message persistence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union
from uuid import UUID

from message_store.models.message import Message, MessageCreate

MessageId = Union[UUID, str]


class IMessageRepository(ABC):
    """Abstract interface for message persistence."""

    @abstractmethod
    async def create(self, sender_id: str, message: MessageCreate) -> Message:
        """
        Create a new message.

        Args:
            sender_id: Sending user ID
            message: Message creation data

        Returns:
            Created message with defaults applied

        Raises:
            ValidationError: sender_id is missing, blank or too long
        """
        pass

    @abstractmethod
    async def get_message(self, message_id: MessageId) -> Message:
        """
        Get a message by ID.

        Args:
            message_id: Message ID, as a UUID or its string form

        Returns:
            Current persisted state of the message

        Raises:
            NotFoundError: No such message, or message_id is not a valid ID
        """
        pass

    @abstractmethod
    async def update_tag(self, message_id: MessageId, tags: list[str]) -> Message:
        """
        Replace the tags of a message.

        The stored tag list becomes exactly ``tags``, in the same order.
        Nothing is merged with the previous tags.

        Args:
            message_id: Message ID
            tags: New tag list (may be empty)

        Returns:
            Updated message

        Raises:
            ValidationError: A tag is empty or too long
            NotFoundError: No such message
        """
        pass

    @abstractmethod
    async def find_messages_by_tag(
        self,
        tag: str,
        include_deleted: bool = True,
    ) -> list[Message]:
        """
        Find every message carrying a tag.

        Matching is exact on at least one element of ``tags``. Results are
        ordered by creation time, then ID.

        Args:
            tag: Tag to match
            include_deleted: Whether soft-deleted messages are returned

        Returns:
            Matching messages
        """
        pass

    @abstractmethod
    async def delete(self, message_id: MessageId) -> Message:
        """
        Soft-delete a message.

        Deleting an already deleted message succeeds.

        Args:
            message_id: Message ID

        Returns:
            Message with deleted set to True

        Raises:
            NotFoundError: No such message
        """
        pass
