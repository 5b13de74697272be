"""In-memory implementation of the sorting contracts."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.repository.memory.database import InMemoryDatabase, Row
from crudkit.repository.protocols import AsyncSortingRepository, E, SortingRepository
from crudkit.repository.rows import employee_to_row, row_to_model

logger = logging.getLogger(__name__)


def _nulls_low(value: Any) -> tuple[bool, Any]:
    """Sort key placing None before every other value."""
    return (value is not None, value if value is not None else "")


class InMemorySorting(SortingRepository[E]):
    """In-memory implementation of SortingRepository.

    Python's sort is stable, so sorting rows already in key order, one sort key
    at a time from the least significant, breaks ties by key ascending.
    """

    table_name = "employee"

    def __init__(self, database: InMemoryDatabase, model_type: type[E]) -> None:
        self.database = database
        self.model_type = model_type

    def _rows_for(self, last_name: str) -> list[Row]:
        last_name = ensure_argument(last_name, "last_name")
        return self.database.table(self.table_name).select(
            lambda row: row["last_name"] == last_name
        )

    def _to_models(self, rows: list[Row]) -> list[E]:
        return [row_to_model(self.model_type, row) for row in rows]

    @override
    def insert_batch(self, employees: Sequence[E]) -> None:
        employees = ensure_argument(employees, "employees")
        keys = self.database.table(self.table_name).insert_many(
            employee_to_row(employee) for employee in employees
        )
        logger.debug("Inserted %d employees", len(keys))

    @override
    def sort_by_first_name(self, last_name: str) -> list[E]:
        rows = self._rows_for(last_name)
        rows.sort(key=lambda row: row["first_name"])
        return self._to_models(rows)

    @override
    def sort_by_middle_name_first_name(self, last_name: str) -> list[E]:
        rows = self._rows_for(last_name)
        rows.sort(key=lambda row: (_nulls_low(row["middle_name"]), row["first_name"]))
        return self._to_models(rows)

    @override
    def sort_by_middle_name_desc_first_name(self, last_name: str) -> list[E]:
        rows = self._rows_for(last_name)
        rows.sort(key=lambda row: row["first_name"])
        rows.sort(key=lambda row: _nulls_low(row["middle_name"]), reverse=True)
        # reverse=True keeps equal elements in their original order, so ties stay by key
        return self._to_models(rows)


class InMemoryAsyncSorting(AsyncSortingRepository[E]):
    """Asynchronous in-memory implementation of AsyncSortingRepository."""

    def __init__(self, database: InMemoryDatabase, model_type: type[E]) -> None:
        self._repository = InMemorySorting(database, model_type)

    @property
    def database(self) -> InMemoryDatabase:
        return self._repository.database

    @override
    async def insert_batch(self, employees: Sequence[E]) -> None:
        self._repository.insert_batch(employees)

    @override
    async def sort_by_first_name(self, last_name: str) -> list[E]:
        return self._repository.sort_by_first_name(last_name)

    @override
    async def sort_by_middle_name_first_name(self, last_name: str) -> list[E]:
        return self._repository.sort_by_middle_name_first_name(last_name)

    @override
    async def sort_by_middle_name_desc_first_name(self, last_name: str) -> list[E]:
        return self._repository.sort_by_middle_name_desc_first_name(last_name)
