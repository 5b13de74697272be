"""SQLAlchemy repository implementations."""

from crudkit.repository.sqlalchemy.partial_update import (
    SqlAlchemyAsyncPartialUpdate,
    SqlAlchemyPartialUpdate,
)
from crudkit.repository.sqlalchemy.repository import SqlAlchemyAsyncCrud, SqlAlchemyCrud
from crudkit.repository.sqlalchemy.scalar_value import (
    SqlAlchemyAsyncScalarValue,
    SqlAlchemyScalarValue,
)
from crudkit.repository.sqlalchemy.schema import (
    Base,
    EmployeeClassificationRecord,
    EmployeeRecord,
    create_schema,
    create_schema_async,
    drop_schema,
    drop_schema_async,
)
from crudkit.repository.sqlalchemy.session_factory import (
    create_default_session_factory,
    create_default_sync_session_factory,
)
from crudkit.repository.sqlalchemy.sorting import SqlAlchemyAsyncSorting, SqlAlchemySorting

__all__ = [
    "Base",
    "EmployeeClassificationRecord",
    "EmployeeRecord",
    "SqlAlchemyAsyncCrud",
    "SqlAlchemyAsyncPartialUpdate",
    "SqlAlchemyAsyncScalarValue",
    "SqlAlchemyAsyncSorting",
    "SqlAlchemyCrud",
    "SqlAlchemyPartialUpdate",
    "SqlAlchemyScalarValue",
    "SqlAlchemySorting",
    "create_default_session_factory",
    "create_default_sync_session_factory",
    "create_schema",
    "create_schema_async",
    "drop_schema",
    "drop_schema_async",
]
