"""
Database engine and session management.

Builds the async SQLAlchemy engine from environment configuration with an
in-memory SQLite fallback under pytest, and exposes FastAPI dependencies
that hand every request its own session.
"""
import logging
import os
import sys
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from surveys.config import get_settings

logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+aiosqlite:///:memory:"


# Database connection URL
# Generate dynamically from individual components if DATABASE_URL is not provided
def _get_database_url() -> str:
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    db_user = os.getenv("POSTGRES_USER")
    db_password = os.getenv("POSTGRES_PASSWORD")
    db_host = os.getenv("POSTGRES_HOST")
    db_port = os.getenv("POSTGRES_PORT")
    db_name = os.getenv("POSTGRES_DB")

    if not all([db_user, db_password, db_host, db_port, db_name]):
        missing = []
        if not db_user: missing.append("POSTGRES_USER")
        if not db_password: missing.append("POSTGRES_PASSWORD")
        if not db_host: missing.append("POSTGRES_HOST")
        if not db_port: missing.append("POSTGRES_PORT")
        if not db_name: missing.append("POSTGRES_DB")
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while a test runs, so module import
    during collection is detected through ``sys.modules`` instead.
    ``PYTEST_RUNNING=1`` forces the check on.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if "pytest" in sys.modules:
        return True
    return False


def engine_kwargs_for(url: str) -> dict:
    """Return create_async_engine keyword arguments suited to ``url``."""
    if url.startswith("sqlite") and ":memory:" in url:
        # StaticPool keeps a single connection so the schema survives across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# Test override strategy:
# 1. If SURVEYS_TEST_DB is set, use it.
# 2. Else under pytest, force in-memory sqlite.
# 3. Else resolve from DATABASE_URL / POSTGRES_* (raises when incomplete).
explicit_test_db = os.getenv("SURVEYS_TEST_DB")

if explicit_test_db:
    DATABASE_URL = explicit_test_db
elif _is_pytest_runtime():
    DATABASE_URL = SQLITE_MEMORY_URL
else:
    DATABASE_URL = _get_database_url()

engine = create_async_engine(
    DATABASE_URL,
    echo=get_settings().sql_echo,
    **engine_kwargs_for(DATABASE_URL),
)

# expire_on_commit=False keeps loaded attributes usable after a write commits
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


async def init_models(bind=None) -> None:
    """Create all tables on ``bind`` (defaults to the module engine).

    Production schemas are managed by Alembic; this exists for SQLite test
    and local development databases.
    """
    from surveys.db import models  # local import to avoid circular import at module load

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
    logger.debug("schema_created: url=%s", target.url)


async def get_db():
    """Dependency to get a database session scoped to a single request."""
    async with SessionLocal() as db:
        try:
            yield db
        finally:
            await db.close()
