from datetime import datetime, timezone

import pytest
import pytest_asyncio

from userstore.db.migrate import run_migration
from userstore.db.session import make_session_factory

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
FIXED_NOW_ISO = "2024-01-02T03:04:05.678Z"


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest_asyncio.fixture
async def memory_engine():
    result = await run_migration(":memory:")
    yield result.engine
    await result.engine.dispose()


@pytest_asyncio.fixture
async def session(memory_engine):
    async with make_session_factory(memory_engine)() as session:
        yield session
