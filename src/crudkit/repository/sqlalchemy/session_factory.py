"""SQLAlchemy session factories with environment variable configuration."""

import os

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Session, sessionmaker


def database_url(driver: str) -> str:
    """Build a database URL for the given driver from ``SQL_DB_*`` variables.

    Environment variables (required):
        - SQL_DB_HOST: Database host
        - SQL_DB_NAME: Database name
        - SQL_DB_USER: Database user
        - SQL_DB_PASSWORD: Database password

    Environment variables (optional):
        - SQL_DB_PORT: Database port (default: 5432)

    Raises:
        KeyError: If a required variable is not set.
    """
    host = os.environ["SQL_DB_HOST"]
    port = os.environ.get("SQL_DB_PORT", "5432")
    name = os.environ["SQL_DB_NAME"]
    user = os.environ["SQL_DB_USER"]
    password = os.environ["SQL_DB_PASSWORD"]

    return f"{driver}://{user}:{password}@{host}:{port}/{name}"


def create_default_session_factory(
    *,
    echo: bool = False,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async session factory for the asynchronous adapters.

    Configuration:
        - autoflush=False
        - expire_on_commit=False

    The driver comes from SQL_DB_DRIVER (default: postgresql+asyncpg); the
    rest of the URL is described in database_url().

    Args:
        echo: Enable SQL logging if True

    Returns:
        Tuple containing (engine, session_factory)
    """
    url = database_url(os.environ.get("SQL_DB_DRIVER", "postgresql+asyncpg"))

    engine = create_async_engine(url, echo=echo)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    return engine, session_factory


def create_default_sync_session_factory(
    *,
    echo: bool = False,
) -> tuple[Engine, sessionmaker[Session]]:
    """Create a session factory for the synchronous adapters.

    Same configuration as create_default_session_factory(), with the driver
    taken from SQL_DB_SYNC_DRIVER (default: postgresql+psycopg).

    Args:
        echo: Enable SQL logging if True

    Returns:
        Tuple containing (engine, session_factory)
    """
    url = database_url(os.environ.get("SQL_DB_SYNC_DRIVER", "postgresql+psycopg"))

    engine = create_engine(url, echo=echo)

    session_factory = sessionmaker(
        engine,
        autoflush=False,
        expire_on_commit=False,
    )

    return engine, session_factory
