"""Row mapping shared by every adapter.

Models are flattened to plain column dicts on write and rebuilt from rows on
read, so adapters never hand out references to stored state.
"""

from typing import Any, Final, TypeVar

from pydantic import BaseModel

from crudkit.repository.protocols import ClassificationModel, EmployeeModel

CLASSIFICATION_KEY: Final = "employee_classification_key"
EMPLOYEE_KEY: Final = "employee_key"

# First key a backend generates. Keys below it are reserved for seed rows.
GENERATED_KEY_START: Final = 1000

_ModelT = TypeVar("_ModelT", bound=BaseModel)

# Seed rows present in every certified backend. Keys below 1000 are never generated.
SEED_CLASSIFICATIONS: Final[tuple[dict[str, Any], ...]] = tuple(
    {
        CLASSIFICATION_KEY: key,
        "employee_classification_name": name,
        "is_exempt": is_exempt,
        "is_employee": is_employee,
    }
    for key, name, is_exempt, is_employee in (
        (1, "Exempt", True, True),
        (2, "Non-Exempt", False, True),
        (3, "Contractor", False, False),
    )
)


def classification_to_row(model: ClassificationModel) -> dict[str, Any]:
    """Column values of a classification, without its key."""
    return {
        "employee_classification_name": model.employee_classification_name,
        "is_exempt": model.is_exempt,
        "is_employee": model.is_employee,
    }


def employee_to_row(employee: EmployeeModel) -> dict[str, Any]:
    """Column values of an employee, without its key."""
    return {
        "first_name": employee.first_name,
        "middle_name": employee.middle_name,
        "last_name": employee.last_name,
        "title": employee.title,
        "office_phone": employee.office_phone,
        "cell_phone": employee.cell_phone,
        CLASSIFICATION_KEY: employee.employee_classification_key,
    }


def row_to_model(model_type: type[_ModelT], row: object) -> _ModelT:
    """Build a model from a mapping or from an object exposing matching attributes."""
    return model_type.model_validate(row, from_attributes=True)
