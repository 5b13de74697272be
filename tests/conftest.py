"""
Shared database fixtures.

SQLite databases live under tmp_path and are rebuilt for every test. The
PostgreSQL container is started once per session and only by tests marked
``postgres``; each test gets a freshly created and seeded schema.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session, sessionmaker
from testcontainers.postgres import PostgresContainer

from crudkit.repository.sqlalchemy import (
    create_schema,
    create_schema_async,
    drop_schema,
    drop_schema_async,
)

# Test modules import the suites after this conftest, so their asserts are rewritten.
pytest.register_assert_rewrite("crudkit.conformance")

# ==================== SQLite ====================


@pytest.fixture
def sqlite_engine(tmp_path) -> Generator[Engine, None, None]:
    """Create a pysqlite engine over a seeded database file."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'hr.db'}", connect_args={"check_same_thread": False}
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest_asyncio.fixture
async def async_sqlite_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create an aiosqlite engine over a seeded database file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'hr.db'}")
    await create_schema_async(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(sqlite_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def async_sqlite_session_factory(
    async_sqlite_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_sqlite_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )


# ==================== PostgreSQL ====================


@pytest.fixture(scope="session", name="postgres_container")
def init_postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start a PostgreSQL container for tests.

    Scope: session - the container is shared by every postgres-marked test
    because starting it is the expensive part.
    """
    postgres = PostgresContainer("postgres:16")
    postgres.start()
    yield postgres
    postgres.stop()


@pytest.fixture
def postgres_engine(postgres_container: PostgresContainer) -> Generator[Engine, None, None]:
    """
    Create a psycopg engine connected to the PostgreSQL container.

    Scope: function - tables are created and seeded per test for isolation.
    """
    connection_url = postgres_container.get_connection_url().replace(
        "postgresql+psycopg2://", "postgresql+psycopg://"
    )
    engine = create_engine(connection_url, echo=False)
    create_schema(engine)
    yield engine
    drop_schema(engine)
    engine.dispose()


@pytest_asyncio.fixture
async def async_postgres_engine(
    postgres_container: PostgresContainer,
) -> AsyncGenerator[AsyncEngine, None]:
    """Create an asyncpg engine connected to the PostgreSQL container."""
    connection_url = postgres_container.get_connection_url().replace(
        "postgresql+psycopg2://", "postgresql+asyncpg://"
    )
    engine = create_async_engine(connection_url, echo=False)
    await create_schema_async(engine)
    yield engine
    await drop_schema_async(engine)
    await engine.dispose()


@pytest.fixture
def postgres_session_factory(postgres_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(postgres_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def async_postgres_session_factory(
    async_postgres_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_postgres_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )
