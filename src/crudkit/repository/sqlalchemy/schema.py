"""SQLAlchemy schema for the HR tables, plus bootstrapping and seed data.

Generated keys start at 1000 on every dialect: PostgreSQL through an identity
column, SQLite by moving the AUTOINCREMENT sequence past the seed rows.
"""

import logging

from sqlalchemy import Connection, Engine, ForeignKey, Identity, String, insert, text, true
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from crudkit.repository.rows import GENERATED_KEY_START, SEED_CLASSIFICATIONS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base holding the HR metadata."""


class EmployeeClassificationRecord(Base):
    """Row of the employee_classification table."""

    __tablename__ = "employee_classification"
    __table_args__ = {"sqlite_autoincrement": True}

    employee_classification_key: Mapped[int] = mapped_column(
        Identity(start=GENERATED_KEY_START), primary_key=True
    )
    employee_classification_name: Mapped[str] = mapped_column(String(50), unique=True)
    is_exempt: Mapped[bool] = mapped_column(default=False)
    is_employee: Mapped[bool] = mapped_column(default=True, server_default=true())


class EmployeeRecord(Base):
    """Row of the employee table."""

    __tablename__ = "employee"
    __table_args__ = {"sqlite_autoincrement": True}

    employee_key: Mapped[int] = mapped_column(
        Identity(start=GENERATED_KEY_START), primary_key=True
    )
    first_name: Mapped[str] = mapped_column(String(50))
    middle_name: Mapped[str | None] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50), index=True)
    title: Mapped[str | None] = mapped_column(String(100))
    office_phone: Mapped[str | None] = mapped_column(String(15))
    cell_phone: Mapped[str | None] = mapped_column(String(15))
    employee_classification_key: Mapped[int] = mapped_column(
        ForeignKey("employee_classification.employee_classification_key")
    )


def _create_and_seed(connection: Connection) -> None:
    Base.metadata.create_all(connection)
    connection.execute(insert(EmployeeClassificationRecord), list(SEED_CLASSIFICATIONS))
    if connection.dialect.name == "sqlite":
        # sqlite_sequence only gains a row once a table has had an insert
        connection.execute(
            text("UPDATE sqlite_sequence SET seq = :seq WHERE name = :name"),
            {"seq": GENERATED_KEY_START - 1, "name": EmployeeClassificationRecord.__tablename__},
        )
        connection.execute(
            text("INSERT INTO sqlite_sequence (name, seq) VALUES (:name, :seq)"),
            {"seq": GENERATED_KEY_START - 1, "name": EmployeeRecord.__tablename__},
        )
    logger.debug("Created HR schema on %s", connection.dialect.name)


def _drop(connection: Connection) -> None:
    Base.metadata.drop_all(connection)


def create_schema(engine: Engine) -> None:
    """Create the HR tables and load the seed rows."""
    with engine.begin() as connection:
        _create_and_seed(connection)


def drop_schema(engine: Engine) -> None:
    """Drop the HR tables."""
    with engine.begin() as connection:
        _drop(connection)


async def create_schema_async(engine: AsyncEngine) -> None:
    """Create the HR tables and load the seed rows through an async engine."""
    async with engine.begin() as connection:
        await connection.run_sync(_create_and_seed)


async def drop_schema_async(engine: AsyncEngine) -> None:
    """Drop the HR tables through an async engine."""
    async with engine.begin() as connection:
        await connection.run_sync(_drop)
