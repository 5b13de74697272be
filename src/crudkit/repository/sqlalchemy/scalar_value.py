"""SQLAlchemy implementation of the scalar-value contracts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import Select, func, select
from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.repository.protocols import AsyncScalarValueRepository, ScalarValueRepository
from crudkit.repository.sqlalchemy.commit_manager import (
    AsyncSqlAlchemyCommitManager,
    SqlAlchemyCommitManager,
)
from crudkit.repository.sqlalchemy.mapper import SqlAlchemyExceptionMapper
from crudkit.repository.sqlalchemy.schema import EmployeeClassificationRecord

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

Record = EmployeeClassificationRecord
ENTITY_TYPE: Final = "EmployeeClassification"


def name_by_key(key: int) -> Select[tuple[str]]:
    key = ensure_argument(key, "key")
    return select(Record.employee_classification_name).where(
        Record.employee_classification_key == key
    )


def key_by_name(name: str) -> Select[tuple[int]]:
    name = ensure_argument(name, "name")
    return select(Record.employee_classification_key).where(
        Record.employee_classification_name == name
    )


def count_by_employee_flag(is_employee: bool) -> Select[tuple[int]]:
    is_employee = ensure_argument(is_employee, "is_employee")
    return select(func.count()).select_from(Record).where(Record.is_employee == is_employee)


def max_key_by_flags(is_exempt: bool, is_employee: bool) -> Select[tuple[int | None]]:
    is_exempt = ensure_argument(is_exempt, "is_exempt")
    is_employee = ensure_argument(is_employee, "is_employee")
    return select(func.max(Record.employee_classification_key)).where(
        Record.is_exempt == is_exempt, Record.is_employee == is_employee
    )


class SqlAlchemyScalarValue(ScalarValueRepository):
    """SQLAlchemy implementation of ScalarValueRepository.

    Each read selects a single column or aggregate and returns the first value
    of the first row; no record is loaded into the session.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._commits = SqlAlchemyCommitManager(
            session_factory, SqlAlchemyExceptionMapper(), ENTITY_TYPE
        )

    def _scalar(self, statement: Select[Any]) -> Any:
        with self._commits.transaction() as session:
            value = session.scalar(statement)
        logger.debug("Scalar read returned %r", value)
        return value

    @override
    def get_name(self, key: int) -> str | None:
        return self._scalar(name_by_key(key))

    @override
    def get_key(self, name: str) -> int | None:
        return self._scalar(key_by_name(name))

    @override
    def count(self, is_employee: bool) -> int:
        return self._scalar(count_by_employee_flag(is_employee))

    @override
    def get_max_key(self, is_exempt: bool, is_employee: bool) -> int | None:
        return self._scalar(max_key_by_flags(is_exempt, is_employee))


class SqlAlchemyAsyncScalarValue(AsyncScalarValueRepository):
    """SQLAlchemy implementation of AsyncScalarValueRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._commits = AsyncSqlAlchemyCommitManager(
            session_factory, SqlAlchemyExceptionMapper(), ENTITY_TYPE
        )

    async def _scalar(self, statement: Select[Any]) -> Any:
        async with self._commits.transaction() as session:
            value = await session.scalar(statement)
        logger.debug("Scalar read returned %r", value)
        return value

    @override
    async def get_name(self, key: int) -> str | None:
        return await self._scalar(name_by_key(key))

    @override
    async def get_key(self, name: str) -> int | None:
        return await self._scalar(key_by_name(name))

    @override
    async def count(self, is_employee: bool) -> int:
        return await self._scalar(count_by_employee_flag(is_employee))

    @override
    async def get_max_key(self, is_exempt: bool, is_employee: bool) -> int | None:
        return await self._scalar(max_key_by_flags(is_exempt, is_employee))
