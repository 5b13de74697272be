"""In-memory tables with atomic key generation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final, Self

from crudkit.exceptions import DatabaseError, EntityAlreadyExistsError
from crudkit.repository.rows import (
    CLASSIFICATION_KEY,
    EMPLOYEE_KEY,
    GENERATED_KEY_START,
    SEED_CLASSIFICATIONS,
)

logger = logging.getLogger(__name__)


Row = dict[str, Any]


@dataclass(frozen=True)
class TableSpec:
    """Shape of an in-memory table.

    Attributes:
        key_column: Name of the integer primary key column.
        unique_columns: Columns carrying a unique index.
    """

    key_column: str
    unique_columns: tuple[str, ...] = field(default=())


HR_TABLES: Final[Mapping[str, TableSpec]] = {
    "employee_classification": TableSpec(
        key_column=CLASSIFICATION_KEY, unique_columns=("employee_classification_name",)
    ),
    "employee": TableSpec(key_column=EMPLOYEE_KEY),
}


class InMemoryTable:
    """A single table of rows keyed by integer.

    Every mutation runs under the table lock, so concurrent writers never
    receive the same generated key. Rows are copied on the way in and out;
    callers never hold references to stored state.
    """

    def __init__(self, name: str, spec: TableSpec, *, first_generated_key: int) -> None:
        self.name = name
        self.spec = spec
        self._rows: dict[int, Row] = {}
        self._next_key = first_generated_key
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._rows)

    def _ensure_unique(self, values: Mapping[str, Any], *, ignore_key: int | None = None) -> None:
        """Ensure no other row holds the same value in a unique column.

        Raises:
            EntityAlreadyExistsError: If a unique column value is already taken.
        """
        for column in self.spec.unique_columns:
            if column not in values:
                continue
            for key, row in self._rows.items():
                if key != ignore_key and row[column] == values[column]:
                    raise EntityAlreadyExistsError(self.name, str(values[column]), column)

    def _insert_locked(self, values: Mapping[str, Any], key: int | None) -> int:
        if key is None:
            key = self._next_key
            self._next_key += 1
        elif key in self._rows:
            raise EntityAlreadyExistsError(self.name, str(key), self.spec.key_column)
        self._rows[key] = {**values, self.spec.key_column: key}
        return key

    def insert(self, values: Mapping[str, Any], *, key: int | None = None) -> int:
        """Insert a row and return its key.

        Args:
            values: Column values. A key column in ``values`` is ignored.
            key: Explicit key for seed rows. Explicit keys never move the generator.

        Returns:
            The key of the new row.

        Raises:
            EntityAlreadyExistsError: If the key or a unique column value is taken.
        """
        with self._lock:
            self._ensure_unique(values)
            return self._insert_locked(values, key)

    def insert_many(self, batch: Iterable[Mapping[str, Any]]) -> list[int]:
        """Insert every row of the batch atomically, in order.

        Raises:
            EntityAlreadyExistsError: If any row violates a unique column.
                No row is inserted in that case.
        """
        batch = list(batch)
        with self._lock:
            seen: set[tuple[Any, ...]] = set()
            for values in batch:
                self._ensure_unique(values)
                unique_value = tuple(values.get(column) for column in self.spec.unique_columns)
                if self.spec.unique_columns and unique_value in seen:
                    columns = ", ".join(self.spec.unique_columns)
                    raise EntityAlreadyExistsError(self.name, str(unique_value), columns)
                seen.add(unique_value)
            return [self._insert_locked(values, None) for values in batch]

    def get(self, key: int) -> Row | None:
        """Return a copy of the row with this key, or None."""
        with self._lock:
            row = self._rows.get(key)
            return dict(row) if row is not None else None

    def select(self, predicate: Callable[[Row], bool] | None = None) -> list[Row]:
        """Return copies of the matching rows, in key order."""
        with self._lock:
            return [
                dict(row)
                for _, row in sorted(self._rows.items())
                if predicate is None or predicate(row)
            ]

    def update(self, key: int, changes: Mapping[str, Any]) -> bool:
        """Apply column changes to one row.

        Returns:
            True if the row existed and was updated, False otherwise.

        Raises:
            EntityAlreadyExistsError: If a change takes a unique value held by another row.
        """
        with self._lock:
            if key not in self._rows:
                return False
            self._ensure_unique(changes, ignore_key=key)
            self._rows[key].update(
                {
                    column: value
                    for column, value in changes.items()
                    if column != self.spec.key_column
                }
            )
            return True

    def delete(self, key: int) -> bool:
        """Delete one row.

        Returns:
            True if the row existed and was deleted, False otherwise.
        """
        with self._lock:
            return self._rows.pop(key, None) is not None


class InMemoryDatabase:
    """A set of in-memory tables sharing one key-generation floor.

    This is the connection handle injected into in-memory repositories; it is
    safe to share between repositories and threads.

    Example:
        >>> database = InMemoryDatabase.seeded()
        >>> repo = InMemoryCrud(database, EmployeeClassification)
        >>> repo.get_by_key(1).employee_classification_name
        'Exempt'
    """

    def __init__(
        self,
        tables: Mapping[str, TableSpec] = HR_TABLES,
        *,
        first_generated_key: int = GENERATED_KEY_START,
    ) -> None:
        self._tables = {
            name: InMemoryTable(name, spec, first_generated_key=first_generated_key)
            for name, spec in tables.items()
        }

    @classmethod
    def seeded(cls) -> Self:
        """Create a database holding the HR seed rows."""
        database = cls()
        classifications = database.table("employee_classification")
        for row in SEED_CLASSIFICATIONS:
            classifications.insert(row, key=row[CLASSIFICATION_KEY])
        logger.debug("Seeded %d employee classifications", len(classifications))
        return database

    def table(self, name: str) -> InMemoryTable:
        """Return the table with this name.

        Raises:
            DatabaseError: If the table does not exist.
        """
        try:
            return self._tables[name]
        except KeyError as e:
            msg = f"Table {name} does not exist"
            raise DatabaseError(msg) from e
