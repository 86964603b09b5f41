"""
Dependency wiring.

Provides the shared repository and service instances.
"""

from functools import lru_cache

from message_store.core.logger import configure_logging, logger
from message_store.infrastructure.local.database import init_db
from message_store.infrastructure.local.message_repository import SqliteMessageRepository
from message_store.interfaces.message_repository import IMessageRepository
from message_store.services.message_service import MessageService


@lru_cache()
def get_message_repository() -> IMessageRepository:
    """Get message repository instance."""
    return SqliteMessageRepository()


@lru_cache()
def get_message_service() -> MessageService:
    """Get message service instance."""
    return MessageService(get_message_repository())


async def init_message_store() -> MessageService:
    """
    Startup hook for callers embedding the message store.

    Configures logging, creates the tables if needed and returns the shared
    service instance.
    """
    configure_logging()
    logger.info("Starting message store...")
    await init_db()
    return get_message_service()
