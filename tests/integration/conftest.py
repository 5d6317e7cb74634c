"""
Fixtures for tests against a real PostgreSQL database.

Set TEST_DATABASE_URL (postgresql+asyncpg://...) to run them. Every test
gets freshly created tables.
"""

import pytest
import pytest_asyncio
from factories import INTEGRATION_DATABASE_URL, SOCIAL_PROVIDERS, make_settings

from userguard.domain.events import AuthEvent
from userguard.infrastructure.config.container import build_container
from userguard.infrastructure.config.database import DatabaseConfig
from userguard.infrastructure.events.dispatcher import EventDispatcher


@pytest.fixture
def integration_settings():
    return make_settings(
        database_url=INTEGRATION_DATABASE_URL,
        social_login_enabled=True,
        oauth_providers=SOCIAL_PROVIDERS,
    )


@pytest_asyncio.fixture
async def database():
    db_config = DatabaseConfig(INTEGRATION_DATABASE_URL, use_null_pool=True)
    await db_config.drop_tables()
    await db_config.create_tables()
    yield db_config
    await db_config.drop_tables()
    await db_config.close()


@pytest.fixture
def recorded_events():
    """Events delivered through the real dispatcher, in order."""
    return []


@pytest_asyncio.fixture
async def container(integration_settings, database, recorded_events):
    dispatcher = EventDispatcher()
    for event in AuthEvent:
        dispatcher.subscribe(event, lambda payload: recorded_events.append(payload.event))

    container = build_container(integration_settings, dispatcher=dispatcher, database=database)
    yield container
    # database fixture disposes of the engine
