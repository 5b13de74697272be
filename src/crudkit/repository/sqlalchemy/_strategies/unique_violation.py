"""Strategy for handling SQLAlchemy unique constraint violations."""

import re
from typing import cast

from sqlalchemy.exc import IntegrityError
from typing_extensions import override

from crudkit._internal.mapper import MappingStrategy
from crudkit.exceptions import DatabaseError, EntityAlreadyExistsError

_POSTGRES_UNIQUE_VIOLATION = "23505"
_POSTGRES_DETAIL = re.compile(r"Key \((?P<column>[^)]+)\)=\((?P<value>[^)]*)\) already exists")
_SQLITE_MESSAGE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w., ]+)")


class SqlAlchemyUniqueViolationStrategy(MappingStrategy):
    """Handle unique constraint violations on PostgreSQL and SQLite.

    PostgreSQL reports sqlstate 23505 with a ``Key (column)=(value)`` detail;
    SQLite reports ``UNIQUE constraint failed: table.column``.
    Both map to EntityAlreadyExistsError.
    """

    @override
    def can_handle(self, error: Exception) -> bool:
        """Check if error is an IntegrityError caused by a unique constraint."""
        if not isinstance(error, IntegrityError):
            return False

        if getattr(error.orig, "sqlstate", None) == _POSTGRES_UNIQUE_VIOLATION:
            return True
        return _SQLITE_MESSAGE.search(str(error.orig)) is not None

    @override
    def map(self, error: Exception, entity_type: str | None) -> DatabaseError:
        """Map to EntityAlreadyExistsError naming the offending column.

        Args:
            error: The IntegrityError to map (guaranteed by can_handle())
            entity_type: The entity type name for error messages
        """
        integrity_error = cast("IntegrityError", error)
        message = str(integrity_error.orig)

        postgres = _POSTGRES_DETAIL.search(message)
        if postgres:
            return EntityAlreadyExistsError(
                entity_type or "Entity", postgres.group("value"), postgres.group("column")
            )

        value = _first_parameter(integrity_error)
        sqlite = _SQLITE_MESSAGE.search(message)
        if sqlite:
            columns = ", ".join(
                column.strip().rpartition(".")[2] for column in sqlite.group("columns").split(",")
            )
            return EntityAlreadyExistsError(entity_type or "Entity", value, columns)

        # sqlstate 23505 without a parsable detail line
        return EntityAlreadyExistsError(entity_type or "Entity", value, "unique key")


def _first_parameter(error: IntegrityError) -> str:
    """Best-effort value for error messages: the first bound parameter, if any."""
    params = error.params
    if isinstance(params, dict) and params:
        return str(next(iter(params.values())))
    if isinstance(params, (list, tuple)) and params:
        first = params[0]
        if isinstance(first, dict) and first:
            return str(next(iter(first.values())))
        return str(first)
    return "unknown"
