"""Public models and schema records carry their own class docstring."""

import pytest

from crudkit import models
from crudkit.repository.sqlalchemy import Base, EmployeeClassificationRecord, EmployeeRecord


@pytest.mark.parametrize(
    "cls",
    [
        *(getattr(models, name) for name in models.__all__),
        Base,
        EmployeeClassificationRecord,
        EmployeeRecord,
    ],
    ids=lambda cls: cls.__name__,
)
def test_class_has_docstring(cls: type) -> None:
    # __doc__ is not inherited, so a missing docstring reads as None
    assert cls.__doc__, f"{cls.__name__} has no docstring"
