"""In-memory implementation of the scalar-value contracts."""

from __future__ import annotations

from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.repository.memory.database import InMemoryDatabase, InMemoryTable
from crudkit.repository.protocols import AsyncScalarValueRepository, ScalarValueRepository
from crudkit.repository.rows import CLASSIFICATION_KEY


class InMemoryScalarValue(ScalarValueRepository):
    """In-memory implementation of ScalarValueRepository.

    Each read copies out only the matching rows and projects a single column.
    """

    table_name = "employee_classification"

    def __init__(self, database: InMemoryDatabase) -> None:
        self.database = database

    @property
    def _table(self) -> InMemoryTable:
        return self.database.table(self.table_name)

    @override
    def get_name(self, key: int) -> str | None:
        key = ensure_argument(key, "key")
        row = self._table.get(key)
        return None if row is None else row["employee_classification_name"]

    @override
    def get_key(self, name: str) -> int | None:
        name = ensure_argument(name, "name")
        rows = self._table.select(lambda row: row["employee_classification_name"] == name)
        return rows[0][CLASSIFICATION_KEY] if rows else None

    @override
    def count(self, is_employee: bool) -> int:
        is_employee = ensure_argument(is_employee, "is_employee")
        return len(self._table.select(lambda row: row["is_employee"] == is_employee))

    @override
    def get_max_key(self, is_exempt: bool, is_employee: bool) -> int | None:
        is_exempt = ensure_argument(is_exempt, "is_exempt")
        is_employee = ensure_argument(is_employee, "is_employee")
        rows = self._table.select(
            lambda row: row["is_exempt"] == is_exempt and row["is_employee"] == is_employee
        )
        return max((row[CLASSIFICATION_KEY] for row in rows), default=None)


class InMemoryAsyncScalarValue(AsyncScalarValueRepository):
    """Asynchronous in-memory implementation of AsyncScalarValueRepository."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self._repository = InMemoryScalarValue(database)

    @property
    def database(self) -> InMemoryDatabase:
        return self._repository.database

    @override
    async def get_name(self, key: int) -> str | None:
        return self._repository.get_name(key)

    @override
    async def get_key(self, name: str) -> int | None:
        return self._repository.get_key(name)

    @override
    async def count(self, is_employee: bool) -> int:
        return self._repository.count(is_employee)

    @override
    async def get_max_key(self, is_exempt: bool, is_employee: bool) -> int | None:
        return self._repository.get_max_key(is_exempt, is_employee)
