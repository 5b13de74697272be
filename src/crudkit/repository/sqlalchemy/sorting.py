"""SQLAlchemy implementation of the sorting contracts."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Generic

from sqlalchemy import Select, select
from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.repository.protocols import AsyncSortingRepository, E, SortingRepository
from crudkit.repository.rows import employee_to_row, row_to_model
from crudkit.repository.sqlalchemy.commit_manager import (
    AsyncSqlAlchemyCommitManager,
    SqlAlchemyCommitManager,
)
from crudkit.repository.sqlalchemy.mapper import SqlAlchemyExceptionMapper
from crudkit.repository.sqlalchemy.schema import EmployeeRecord

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def _by_last_name(last_name: str, *order_by: Any) -> Select[tuple[EmployeeRecord]]:
    last_name = ensure_argument(last_name, "last_name")
    return (
        select(EmployeeRecord)
        .where(EmployeeRecord.last_name == last_name)
        .order_by(*order_by, EmployeeRecord.employee_key)
    )


def by_first_name(last_name: str) -> Select[tuple[EmployeeRecord]]:
    return _by_last_name(last_name, EmployeeRecord.first_name)


def by_middle_name_first_name(last_name: str) -> Select[tuple[EmployeeRecord]]:
    return _by_last_name(
        last_name, EmployeeRecord.middle_name.asc().nulls_first(), EmployeeRecord.first_name
    )


def by_middle_name_desc_first_name(last_name: str) -> Select[tuple[EmployeeRecord]]:
    return _by_last_name(
        last_name, EmployeeRecord.middle_name.desc().nulls_last(), EmployeeRecord.first_name
    )


class _SortingBase(Generic[E]):
    def __init__(self, model_type: type[E]) -> None:
        self.model_type = model_type
        self._exception_mapper = SqlAlchemyExceptionMapper()

    def _records(self, employees: Sequence[E]) -> list[EmployeeRecord]:
        employees = ensure_argument(employees, "employees")
        return [EmployeeRecord(**employee_to_row(employee)) for employee in employees]

    def _to_models(self, records: Any) -> list[E]:
        return [row_to_model(self.model_type, record) for record in records]


class SqlAlchemySorting(_SortingBase[E], SortingRepository[E]):
    """SQLAlchemy implementation of SortingRepository.

    Ordering happens in the database. None middle names are placed explicitly
    with NULLS FIRST and NULLS LAST, since dialects disagree on the default.
    """

    def __init__(self, session_factory: sessionmaker[Session], model_type: type[E]) -> None:
        super().__init__(model_type)
        self.session_factory = session_factory
        self._commits = SqlAlchemyCommitManager(
            session_factory, self._exception_mapper, model_type.__name__
        )

    def _fetch(self, statement: Select[tuple[EmployeeRecord]]) -> list[E]:
        with self._commits.transaction() as session:
            return self._to_models(session.scalars(statement))

    @override
    def insert_batch(self, employees: Sequence[E]) -> None:
        records = self._records(employees)
        if not records:
            return
        with self._commits.transaction() as session:
            session.add_all(records)
        logger.debug("Inserted %d employees", len(records))

    @override
    def sort_by_first_name(self, last_name: str) -> list[E]:
        return self._fetch(by_first_name(last_name))

    @override
    def sort_by_middle_name_first_name(self, last_name: str) -> list[E]:
        return self._fetch(by_middle_name_first_name(last_name))

    @override
    def sort_by_middle_name_desc_first_name(self, last_name: str) -> list[E]:
        return self._fetch(by_middle_name_desc_first_name(last_name))


class SqlAlchemyAsyncSorting(_SortingBase[E], AsyncSortingRepository[E]):
    """SQLAlchemy implementation of AsyncSortingRepository."""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], model_type: type[E]
    ) -> None:
        super().__init__(model_type)
        self.session_factory = session_factory
        self._commits = AsyncSqlAlchemyCommitManager(
            session_factory, self._exception_mapper, model_type.__name__
        )

    async def _fetch(self, statement: Select[tuple[EmployeeRecord]]) -> list[E]:
        async with self._commits.transaction() as session:
            return self._to_models(await session.scalars(statement))

    @override
    async def insert_batch(self, employees: Sequence[E]) -> None:
        records = self._records(employees)
        if not records:
            return
        async with self._commits.transaction() as session:
            session.add_all(records)
        logger.debug("Inserted %d employees", len(records))

    @override
    async def sort_by_first_name(self, last_name: str) -> list[E]:
        return await self._fetch(by_first_name(last_name))

    @override
    async def sort_by_middle_name_first_name(self, last_name: str) -> list[E]:
        return await self._fetch(by_middle_name_first_name(last_name))

    @override
    async def sort_by_middle_name_desc_first_name(self, last_name: str) -> list[E]:
        return await self._fetch(by_middle_name_desc_first_name(last_name))
