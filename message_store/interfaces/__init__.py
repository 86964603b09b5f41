"""Abstract interfaces for infrastructure abstraction."""

from message_store.interfaces.message_repository import IMessageRepository, MessageId

__all__ = [
    "IMessageRepository",
    "MessageId",
]
