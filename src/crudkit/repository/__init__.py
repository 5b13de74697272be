"""Repository contracts and their implementations.

Provides one set of classification and employee contracts, and the backends
certified against them.
"""

from crudkit.exceptions import (
    DatabaseError,
    EntityAlreadyExistsError,
    EntityModelError,
    EntityNotFoundError,
    InvalidArgumentError,
    RepositoryError,
)

# Implementations
from crudkit.repository.memory import (
    InMemoryAsyncCrud,
    InMemoryAsyncPartialUpdate,
    InMemoryAsyncScalarValue,
    InMemoryAsyncSorting,
    InMemoryCrud,
    InMemoryDatabase,
    InMemoryPartialUpdate,
    InMemoryScalarValue,
    InMemorySorting,
)
from crudkit.repository.protocols import (
    AsyncCrudRepository,
    AsyncPartialUpdateRepository,
    AsyncScalarValueRepository,
    AsyncSortingRepository,
    ClassificationModel,
    CrudRepository,
    EmployeeModel,
    MissingKeyPolicy,
    PartialUpdateRepository,
    ScalarValueRepository,
    SortingRepository,
)
from crudkit.repository.sqlalchemy import (
    SqlAlchemyAsyncCrud,
    SqlAlchemyAsyncPartialUpdate,
    SqlAlchemyAsyncScalarValue,
    SqlAlchemyAsyncSorting,
    SqlAlchemyCrud,
    SqlAlchemyPartialUpdate,
    SqlAlchemyScalarValue,
    SqlAlchemySorting,
)

__all__ = [  # noqa: RUF022
    # Core
    "AsyncCrudRepository",
    "AsyncPartialUpdateRepository",
    "AsyncScalarValueRepository",
    "AsyncSortingRepository",
    "ClassificationModel",
    "CrudRepository",
    "EmployeeModel",
    "MissingKeyPolicy",
    "PartialUpdateRepository",
    "ScalarValueRepository",
    "SortingRepository",
    # Exceptions
    "DatabaseError",
    "EntityAlreadyExistsError",
    "EntityModelError",
    "EntityNotFoundError",
    "InvalidArgumentError",
    "RepositoryError",
    # Implementations
    "InMemoryAsyncCrud",
    "InMemoryAsyncPartialUpdate",
    "InMemoryAsyncScalarValue",
    "InMemoryAsyncSorting",
    "InMemoryCrud",
    "InMemoryDatabase",
    "InMemoryPartialUpdate",
    "InMemoryScalarValue",
    "InMemorySorting",
    "SqlAlchemyAsyncCrud",
    "SqlAlchemyAsyncPartialUpdate",
    "SqlAlchemyAsyncScalarValue",
    "SqlAlchemyAsyncSorting",
    "SqlAlchemyCrud",
    "SqlAlchemyPartialUpdate",
    "SqlAlchemyScalarValue",
    "SqlAlchemySorting",
]
