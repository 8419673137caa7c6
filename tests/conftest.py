import os

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Store original environment variables to restore after tests
_original_env = {}
_TEST_VARS = ['AUTH_CLIENT_ID', 'TOKEN_CACHE_BACKEND']


def _setup_test_env():
    """Set up environment variables the settings layer needs during tests"""
    for var in _TEST_VARS:
        if var in os.environ:
            _original_env[var] = os.environ[var]
    os.environ.setdefault("AUTH_CLIENT_ID", "test-client-id")


def _restore_env():
    for var in _TEST_VARS:
        if var not in _original_env and var in os.environ:
            del os.environ[var]
    for var, value in _original_env.items():
        os.environ[var] = value
    _original_env.clear()


_setup_test_env()

from surveys.config import refresh_settings_cache  # noqa: E402
from surveys.db.database import SQLITE_MEMORY_URL, engine_kwargs_for, init_models  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _restore_test_env():
    """Restore original environment variables after all tests complete"""
    yield
    _restore_env()


@pytest.fixture(autouse=True)
def _fresh_settings():
    refresh_settings_cache()
    yield
    refresh_settings_cache()


# Each test gets its own in-memory database; disposing the engine drops it,
# so no test sees rows another test inserted.
@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(SQLITE_MEMORY_URL, **engine_kwargs_for(SQLITE_MEMORY_URL))
    await init_models(bind=eng)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def seed(session_factory):
    """Insert rows through a session separate from the one under test."""
    async def _seed(*objects):
        async with session_factory() as db:
            db.add_all(objects)
            await db.commit()
    return _seed
