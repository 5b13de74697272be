"""Domain models for the HR schema."""

from crudkit.models.classification import (
    EmployeeClassification,
    ReadOnlyEmployeeClassification,
)
from crudkit.models.employee import EmployeeSimple
from crudkit.models.messages import (
    EmployeeClassificationFlagsUpdater,
    EmployeeClassificationNameUpdater,
    PartialUpdateMessage,
)

__all__ = [
    "EmployeeClassification",
    "EmployeeClassificationFlagsUpdater",
    "EmployeeClassificationNameUpdater",
    "EmployeeSimple",
    "PartialUpdateMessage",
    "ReadOnlyEmployeeClassification",
]
