"""In-memory repository implementations."""

from crudkit.repository.memory.database import InMemoryDatabase, InMemoryTable, TableSpec
from crudkit.repository.memory.partial_update import (
    InMemoryAsyncPartialUpdate,
    InMemoryPartialUpdate,
)
from crudkit.repository.memory.repository import InMemoryAsyncCrud, InMemoryCrud
from crudkit.repository.memory.scalar_value import (
    InMemoryAsyncScalarValue,
    InMemoryScalarValue,
)
from crudkit.repository.memory.sorting import InMemoryAsyncSorting, InMemorySorting

__all__ = [
    "InMemoryAsyncCrud",
    "InMemoryAsyncPartialUpdate",
    "InMemoryAsyncScalarValue",
    "InMemoryAsyncSorting",
    "InMemoryCrud",
    "InMemoryDatabase",
    "InMemoryPartialUpdate",
    "InMemoryScalarValue",
    "InMemorySorting",
    "InMemoryTable",
    "TableSpec",
]
