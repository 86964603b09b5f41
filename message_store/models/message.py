"""
Message model definitions.

A message is a single chat utterance inside a conversation. The store keeps
only the ids of the sender and conversation; ``sender`` and ``conversation``
are reference views derived from those ids, never fetched.
"""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, computed_field, field_validator
from pydantic.alias_generators import to_camel

from message_store.core.config import get_settings

settings = get_settings()

# Matches the String(255) identity columns.
IDENTITY_MAX_LENGTH = 255

Tag = Annotated[str, Field(min_length=1, max_length=settings.MESSAGE_TAG_MAX_LENGTH)]


def _coerce_identity(value: Any) -> Any:
    # Foreign ids are opaque; accept UUIDs and anything else with a str form.
    if isinstance(value, UUID):
        return str(value)
    return value


class MessageReference(BaseModel):
    """Read-only reference view of a related entity."""

    model_config = ConfigDict(frozen=True)

    id: str


class Reaction(BaseModel):
    """A single reaction left on a message."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(..., description="Reacting user ID")
    emoji: str = Field(..., description="Reaction emoji")


class MessageBase(BaseModel):
    """Base message fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    conversation_id: str = Field(..., description="Owning conversation ID")
    text: str = Field(..., description="Message body")
    tags: list[str] = Field(default_factory=list, description="Tags in caller order")

    @field_validator("conversation_id", mode="before")
    @classmethod
    def conversation_id_as_str(cls, value: Any) -> Any:
        return _coerce_identity(value)


class MessageCreate(MessageBase):
    """
    Schema for creating a new message.

    Length limits apply to writes only, so stored rows stay readable when the
    limits are lowered later.
    """

    conversation_id: str = Field(..., min_length=1, max_length=IDENTITY_MAX_LENGTH)
    text: str = Field(..., min_length=1, max_length=settings.MESSAGE_TEXT_MAX_LENGTH)
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("conversation_id", "text")
    @classmethod
    def not_blank(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name} must not be blank")
        return value


class MessageTagsUpdate(BaseModel):
    """Schema for replacing the tags of a message."""

    tags: list[Tag] = Field(default_factory=list)


class Message(MessageBase):
    """Complete message model."""

    id: UUID
    sender_id: str = Field(..., description="Sender ID")
    likes: list[str] = Field(default_factory=list, description="IDs of users who liked")
    likes_count: int = Field(0, ge=0)
    reactions: list[Reaction] = Field(default_factory=list)
    resolved: bool = Field(False)
    deleted: bool = Field(False, description="Soft-delete flag")
    created_at: datetime
    updated_at: datetime

    @field_validator("sender_id", mode="before")
    @classmethod
    def sender_id_as_str(cls, value: Any) -> Any:
        return _coerce_identity(value)

    @computed_field
    @property
    def sender(self) -> MessageReference:
        return MessageReference(id=self.sender_id)

    @computed_field
    @property
    def conversation(self) -> MessageReference:
        return MessageReference(id=self.conversation_id)
