"""In-memory implementation of the classification CRUD contracts."""

from __future__ import annotations

import logging
from typing import Any, Generic

from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.exceptions import EntityModelError, EntityNotFoundError
from crudkit.repository.memory.database import InMemoryDatabase, InMemoryTable
from crudkit.repository.protocols import (
    AsyncCrudRepository,
    CrudRepository,
    M,
    MissingKeyPolicy,
)
from crudkit.repository.rows import classification_to_row, row_to_model

logger = logging.getLogger(__name__)


class InMemoryClassifications(Generic[M]):
    """Shared access to the in-memory classification table.

    The table is resolved on every call, so building a repository never touches
    the database handle.

    Attributes:
        database: The InMemoryDatabase holding the rows.
        model_type: The pydantic model class returned by reads.
        missing_key_policy: What writes do when their key does not exist.
    """

    table_name = "employee_classification"

    def __init__(
        self,
        database: InMemoryDatabase,
        model_type: type[M],
        *,
        missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE,
    ) -> None:
        self.database = database
        self.model_type = model_type
        self.missing_key_policy = missing_key_policy

    @property
    def _table(self) -> InMemoryTable:
        return self.database.table(self.table_name)

    def _ensure_model_type(self, model: Any) -> None:
        """Ensure a model is of the type this repository was built for.

        Raises:
            EntityModelError: If the model is not of the expected type.
        """
        if not isinstance(model, self.model_type):
            actual_type = model.__class__.__name__
            msg = f"Model must be of type {self.model_type.__name__}, got {actual_type}"
            raise EntityModelError(msg)

    def _missing(self, key: int) -> None:
        """Apply the missing-key policy to a write that matched no row."""
        if self.missing_key_policy is MissingKeyPolicy.RAISE:
            raise EntityNotFoundError(entity_type=self.model_type.__name__, entity_key=key)
        logger.debug("No %s with key %s, nothing written", self.model_type.__name__, key)

    def _to_model(self, row: dict[str, Any] | None) -> M | None:
        return None if row is None else row_to_model(self.model_type, row)

    def _create(self, model: M) -> int:
        model = ensure_argument(model, "model")
        self._ensure_model_type(model)
        key = self._table.insert(classification_to_row(model))
        logger.debug("Created %s with key %s", self.model_type.__name__, key)
        return key

    def _get_by_key(self, key: int) -> M | None:
        key = ensure_argument(key, "key")
        return self._to_model(self._table.get(key))

    def _patch(self, key: int, changes: dict[str, Any]) -> None:
        if not self._table.update(key, changes):
            self._missing(key)


class InMemoryCrud(InMemoryClassifications[M], CrudRepository[M]):
    """In-memory implementation of CrudRepository.

    Works for both mutable and immutable classification models: the stored state
    is a plain row and every read builds a fresh model from it.

    Example:
        repo = InMemoryCrud(InMemoryDatabase.seeded(), ReadOnlyEmployeeClassification)
        key = repo.create(ReadOnlyEmployeeClassification(...))
    """

    @override
    def create(self, model: M) -> int:
        return self._create(model)

    @override
    def get_by_key(self, key: int) -> M | None:
        return self._get_by_key(key)

    @override
    def get_all(self) -> list[M]:
        return [row_to_model(self.model_type, row) for row in self._table.select()]

    @override
    def find_by_name(self, name: str) -> M | None:
        name = ensure_argument(name, "name")
        rows = self._table.select(lambda row: row["employee_classification_name"] == name)
        return self._to_model(rows[0] if rows else None)

    @override
    def update(self, model: M) -> None:
        model = ensure_argument(model, "model")
        self._ensure_model_type(model)
        self._patch(model.employee_classification_key, classification_to_row(model))

    @override
    def delete(self, model: M) -> None:
        model = ensure_argument(model, "model")
        self._ensure_model_type(model)
        self.delete_by_key(model.employee_classification_key)

    @override
    def delete_by_key(self, key: int) -> None:
        key = ensure_argument(key, "key")
        if self._table.delete(key):
            logger.debug("Deleted %s with key %s", self.model_type.__name__, key)
        else:
            self._missing(key)


class InMemoryAsyncCrud(AsyncCrudRepository[M]):
    """Asynchronous in-memory implementation of AsyncCrudRepository.

    Delegates to InMemoryCrud; there is no I/O to await, so every call completes
    without suspending.
    """

    def __init__(
        self,
        database: InMemoryDatabase,
        model_type: type[M],
        *,
        missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE,
    ) -> None:
        self._repository = InMemoryCrud(
            database, model_type, missing_key_policy=missing_key_policy
        )
        self.missing_key_policy = missing_key_policy

    @property
    def database(self) -> InMemoryDatabase:
        return self._repository.database

    @override
    async def create(self, model: M) -> int:
        return self._repository.create(model)

    @override
    async def get_by_key(self, key: int) -> M | None:
        return self._repository.get_by_key(key)

    @override
    async def get_all(self) -> list[M]:
        return self._repository.get_all()

    @override
    async def find_by_name(self, name: str) -> M | None:
        return self._repository.find_by_name(name)

    @override
    async def update(self, model: M) -> None:
        self._repository.update(model)

    @override
    async def delete(self, model: M) -> None:
        self._repository.delete(model)

    @override
    async def delete_by_key(self, key: int) -> None:
        self._repository.delete_by_key(key)
