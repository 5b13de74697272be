"""SQLAlchemy exception mapper."""

from typing_extensions import override

from crudkit._internal.mapper import ExceptionMapper
from crudkit._internal.registry import StrategyRegistry
from crudkit.exceptions import DatabaseError
from crudkit.repository.sqlalchemy._strategies.unique_violation import (
    SqlAlchemyUniqueViolationStrategy,
)


class SqlAlchemyExceptionMapper(ExceptionMapper):
    """Maps SQLAlchemy exceptions to repository exceptions.

    Uses a registry of strategies to handle different types of errors.
    Anything no strategy recognises becomes a generic DatabaseError.
    """

    def __init__(self) -> None:
        self._registry = StrategyRegistry()
        self._register_strategies()

    def _register_strategies(self) -> None:
        """Register all SQLAlchemy-specific mapping strategies.

        Strategies are tried in registration order.
        """
        self._registry.register(SqlAlchemyUniqueViolationStrategy())

    @override
    def map(self, error: Exception, entity_type: str | None = None) -> DatabaseError:
        """Map a SQLAlchemy exception to a repository exception.

        Args:
            error: The SQLAlchemy exception
            entity_type: The entity type name (e.g., "EmployeeClassification")

        Returns:
            The mapped repository exception
        """
        return self._registry.map(error, entity_type)
