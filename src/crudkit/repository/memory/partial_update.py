"""In-memory implementation of the partial-update contracts."""

from __future__ import annotations

import logging

from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.models.messages import EmployeeClassificationFlagsUpdater, PartialUpdateMessage
from crudkit.repository.memory.database import InMemoryDatabase
from crudkit.repository.memory.repository import InMemoryClassifications
from crudkit.repository.protocols import (
    AsyncPartialUpdateRepository,
    M,
    MissingKeyPolicy,
    PartialUpdateRepository,
)

logger = logging.getLogger(__name__)


class InMemoryPartialUpdate(InMemoryClassifications[M], PartialUpdateRepository[M]):
    """In-memory implementation of PartialUpdateRepository.

    Only the columns returned by ``message.changes()`` are written.
    """

    @override
    def create(self, model: M) -> int:
        return self._create(model)

    @override
    def get_by_key(self, key: int) -> M | None:
        return self._get_by_key(key)

    @override
    def update(self, message: PartialUpdateMessage) -> None:
        message = ensure_argument(message, "message")
        changes = message.changes()
        if not changes:
            logger.debug("Empty %s message, nothing written", self.model_type.__name__)
            return
        logger.debug(
            "Patching %s %s with %s",
            self.model_type.__name__,
            message.employee_classification_key,
            sorted(changes),
        )
        self._patch(message.employee_classification_key, changes)

    @override
    def update_flags(self, key: int, is_exempt: bool, is_employee: bool) -> None:
        self.update(
            EmployeeClassificationFlagsUpdater(
                employee_classification_key=ensure_argument(key, "key"),
                is_exempt=ensure_argument(is_exempt, "is_exempt"),
                is_employee=ensure_argument(is_employee, "is_employee"),
            )
        )


class InMemoryAsyncPartialUpdate(AsyncPartialUpdateRepository[M]):
    """Asynchronous in-memory implementation of AsyncPartialUpdateRepository."""

    def __init__(
        self,
        database: InMemoryDatabase,
        model_type: type[M],
        *,
        missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE,
    ) -> None:
        self._repository = InMemoryPartialUpdate(
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
    async def update(self, message: PartialUpdateMessage) -> None:
        self._repository.update(message)

    @override
    async def update_flags(self, key: int, is_exempt: bool, is_employee: bool) -> None:
        self._repository.update_flags(key, is_exempt, is_employee)
