"""SQLAlchemy implementation of the partial-update contracts."""

from __future__ import annotations

import logging
from typing import Any

from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.models.messages import EmployeeClassificationFlagsUpdater, PartialUpdateMessage
from crudkit.repository.protocols import (
    AsyncPartialUpdateRepository,
    M,
    PartialUpdateRepository,
)
from crudkit.repository.sqlalchemy.repository import (
    AsyncSqlAlchemyClassifications,
    SqlAlchemyClassifications,
)

logger = logging.getLogger(__name__)


def _flags(key: int, is_exempt: bool, is_employee: bool) -> EmployeeClassificationFlagsUpdater:
    return EmployeeClassificationFlagsUpdater(
        employee_classification_key=ensure_argument(key, "key"),
        is_exempt=ensure_argument(is_exempt, "is_exempt"),
        is_employee=ensure_argument(is_employee, "is_employee"),
    )


def _changes(message: PartialUpdateMessage, entity_type: str) -> dict[str, Any]:
    """Columns to write for a message; empty when the message names none."""
    message = ensure_argument(message, "message")
    changes = message.changes()
    if not changes:
        # an UPDATE with an empty SET clause is not valid SQL
        logger.debug("Empty %s message, nothing written", entity_type)
        return changes
    logger.debug(
        "Patching %s %s with %s",
        entity_type,
        message.employee_classification_key,
        sorted(changes),
    )
    return changes


class SqlAlchemyPartialUpdate(SqlAlchemyClassifications[M], PartialUpdateRepository[M]):
    """SQLAlchemy implementation of PartialUpdateRepository.

    The UPDATE statement only names the columns returned by ``message.changes()``.
    """

    @override
    def create(self, model: M) -> int:
        return self._create(model)

    @override
    def get_by_key(self, key: int) -> M | None:
        return self._get_by_key(key)

    @override
    def update(self, message: PartialUpdateMessage) -> None:
        changes = _changes(message, self.model_type.__name__)
        if changes:
            self._patch(message.employee_classification_key, changes)

    @override
    def update_flags(self, key: int, is_exempt: bool, is_employee: bool) -> None:
        self.update(_flags(key, is_exempt, is_employee))


class SqlAlchemyAsyncPartialUpdate(
    AsyncSqlAlchemyClassifications[M], AsyncPartialUpdateRepository[M]
):
    """SQLAlchemy implementation of AsyncPartialUpdateRepository."""

    @override
    async def create(self, model: M) -> int:
        return await self._create(model)

    @override
    async def get_by_key(self, key: int) -> M | None:
        return await self._get_by_key(key)

    @override
    async def update(self, message: PartialUpdateMessage) -> None:
        changes = _changes(message, self.model_type.__name__)
        if changes:
            await self._patch(message.employee_classification_key, changes)

    @override
    async def update_flags(self, key: int, is_exempt: bool, is_employee: bool) -> None:
        await self.update(_flags(key, is_exempt, is_employee))
