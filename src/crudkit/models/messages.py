"""Partial-update messages.

A message carries the key of the row to patch plus only the fields it changes.
Fields outside the message are left untouched by every backend.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class PartialUpdateMessage(BaseModel):
    """Base class for sparse, field-scoped update messages."""

    model_config = ConfigDict(frozen=True)

    employee_classification_key: int

    def changes(self) -> dict[str, Any]:
        """Return the column values this message sets, without the key."""
        return self.model_dump(exclude={"employee_classification_key"})


class EmployeeClassificationNameUpdater(PartialUpdateMessage):
    """Renames a classification."""

    employee_classification_name: str


class EmployeeClassificationFlagsUpdater(PartialUpdateMessage):
    """Changes the exempt and employee flags of a classification."""

    is_exempt: bool
    is_employee: bool
