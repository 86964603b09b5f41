"""Pydantic models (schemas) for the message store."""

from message_store.models.message import (
    Message,
    MessageCreate,
    MessageReference,
    MessageTagsUpdate,
    Reaction,
)

__all__ = [
    "Message",
    "MessageCreate",
    "MessageReference",
    "MessageTagsUpdate",
    "Reaction",
]
