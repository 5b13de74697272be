"""Employee model used by the sorting contract."""

from pydantic import BaseModel, ConfigDict


class EmployeeSimple(BaseModel):
    """An employee row without its relations."""

    model_config = ConfigDict(validate_assignment=True)

    employee_key: int = 0
    first_name: str
    middle_name: str | None = None
    last_name: str
    title: str | None = None
    office_phone: str | None = None
    cell_phone: str | None = None
    employee_classification_key: int
