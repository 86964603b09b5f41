"""
SQLite implementation of Message repository.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID, uuid4

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from message_store.core.exceptions import InfrastructureError, NotFoundError, ValidationError
from message_store.core.logger import logger
from message_store.infrastructure.local.database import MessageORM, get_session_factory
from message_store.interfaces.message_repository import IMessageRepository, MessageId
from message_store.models.message import (
    IDENTITY_MAX_LENGTH,
    Message,
    MessageCreate,
    MessageTagsUpdate,
    Reaction,
)
from message_store.utils.datetime_utils import ensure_utc, now_utc


def _parse_message_id(message_id: MessageId) -> str:
    """Normalize a message ID to its stored form; unparseable IDs cannot exist."""
    if isinstance(message_id, UUID):
        return str(message_id)
    try:
        return str(UUID(str(message_id)))
    except ValueError:
        raise NotFoundError(f"Message {message_id} not found") from None


class SqliteMessageRepository(IMessageRepository):
    """SQLite implementation of message repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: MessageORM) -> Message:
        """Convert ORM object to Pydantic model."""
        return Message(
            id=UUID(orm.id),
            conversation_id=orm.conversation_id,
            sender_id=orm.sender_id,
            text=orm.text,
            tags=json.loads(orm.tags) if orm.tags else [],
            likes=list(orm.likes or []),
            likes_count=orm.likes_count or 0,
            reactions=[Reaction.model_validate(r) for r in orm.reactions or []],
            resolved=bool(orm.resolved),
            deleted=bool(orm.deleted),
            created_at=ensure_utc(orm.created_at),
            updated_at=ensure_utc(orm.updated_at),
        )

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        """Open a session, reporting driver errors as InfrastructureError."""
        try:
            async with self._session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Message store failed to {action}: {e}")
            raise InfrastructureError(f"Failed to {action}", details=str(e)) from e

    async def _get_orm(self, session: AsyncSession, message_id: str) -> Optional[MessageORM]:
        result = await session.execute(select(MessageORM).where(MessageORM.id == message_id))
        return result.scalar_one_or_none()

    async def create(self, sender_id: str, message: MessageCreate) -> Message:
        """Create a new message."""
        if isinstance(sender_id, UUID):
            sender_id = str(sender_id)
        if not isinstance(sender_id, str) or not sender_id.strip():
            raise ValidationError("sender_id is required", details={"sender_id": sender_id})
        if len(sender_id) > IDENTITY_MAX_LENGTH:
            raise ValidationError(
                f"sender_id must be at most {IDENTITY_MAX_LENGTH} characters",
                details={"sender_id": sender_id[:IDENTITY_MAX_LENGTH]},
            )
        if not isinstance(message, MessageCreate):
            raise ValidationError("message must be a MessageCreate", details={"message": message})

        async with self._session("create message") as session:
            now = now_utc()
            orm = MessageORM(
                id=str(uuid4()),
                conversation_id=message.conversation_id,
                sender_id=sender_id,
                text=message.text,
                tags=json.dumps(list(message.tags)),
                likes=[],
                likes_count=0,
                reactions=[],
                resolved=False,
                deleted=False,
                created_at=now,
                updated_at=now,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            logger.info(f"Created message {orm.id} in conversation {orm.conversation_id}")
            return self._orm_to_model(orm)

    async def get_message(self, message_id: MessageId) -> Message:
        """Get a message by ID."""
        stored_id = _parse_message_id(message_id)
        async with self._session("get message") as session:
            orm = await self._get_orm(session, stored_id)
            if not orm:
                raise NotFoundError(f"Message {message_id} not found")
            return self._orm_to_model(orm)

    async def update_tag(self, message_id: MessageId, tags: list[str]) -> Message:
        """Replace the tags of a message."""
        stored_id = _parse_message_id(message_id)
        try:
            tags = MessageTagsUpdate(tags=tags).tags
        except PydanticValidationError as e:
            raise ValidationError("Invalid tags", details=e.errors()) from e

        async with self._session("update message tags") as session:
            orm = await self._get_orm(session, stored_id)
            if not orm:
                raise NotFoundError(f"Message {message_id} not found")

            orm.tags = json.dumps(list(tags))
            orm.updated_at = now_utc()

            await session.commit()
            await session.refresh(orm)
            logger.info(f"Replaced tags of message {stored_id} ({len(tags)} tags)")
            return self._orm_to_model(orm)

    async def find_messages_by_tag(
        self,
        tag: str,
        include_deleted: bool = True,
    ) -> list[Message]:
        """Find messages whose tags contain ``tag`` exactly."""
        async with self._session("search messages by tag") as session:
            # Narrow on the JSON text, then match elements exactly.
            query = select(MessageORM).where(
                MessageORM.tags.contains(json.dumps(tag), autoescape=True)
            )
            if not include_deleted:
                query = query.where(MessageORM.deleted == False)  # noqa: E712
            query = query.order_by(MessageORM.created_at.asc(), MessageORM.id.asc())

            result = await session.execute(query)
            messages = [
                self._orm_to_model(orm)
                for orm in result.scalars().all()
                if tag in json.loads(orm.tags or "[]")
            ]
            logger.debug(f"Tag search {tag!r} matched {len(messages)} messages")
            return messages

    async def delete(self, message_id: MessageId) -> Message:
        """Soft-delete a message."""
        stored_id = _parse_message_id(message_id)
        async with self._session("delete message") as session:
            orm = await self._get_orm(session, stored_id)
            if not orm:
                raise NotFoundError(f"Message {message_id} not found")

            if not orm.deleted:
                orm.deleted = True
                orm.updated_at = now_utc()
                await session.commit()
                await session.refresh(orm)
                logger.info(f"Soft-deleted message {stored_id}")
            return self._orm_to_model(orm)
