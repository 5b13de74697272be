"""Employee classification models.

Two construction disciplines share the same fields:

- ``EmployeeClassification`` is default-constructed and populated field by field.
- ``ReadOnlyEmployeeClassification`` is built with every value at once and can
  only be "updated" by building a new instance.
"""

from pydantic import BaseModel, ConfigDict


class EmployeeClassification(BaseModel):
    """Mutable employee classification."""

    model_config = ConfigDict(validate_assignment=True)

    employee_classification_key: int = 0
    employee_classification_name: str = ""
    is_exempt: bool = False
    is_employee: bool = True


class ReadOnlyEmployeeClassification(BaseModel):
    """Immutable employee classification."""

    model_config = ConfigDict(frozen=True)

    employee_classification_key: int
    employee_classification_name: str
    is_exempt: bool
    is_employee: bool
