"""
Shared pytest fixtures.

Each test gets its own in-memory SQLite database.
"""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from message_store.infrastructure.local.database import get_session_factory, init_db
from message_store.infrastructure.local.message_repository import SqliteMessageRepository


@pytest.fixture
async def engine():
    """Create in-memory database engine with tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


@pytest.fixture
def message_repo(session_factory):
    return SqliteMessageRepository(session_factory=session_factory)


@pytest.fixture
def sender_id():
    return "test_sender_123"


@pytest.fixture
def conversation_id():
    return str(uuid4())
