"""
Tests for backend exception mapping.

This module tests:
1. StrategyRegistry ordering and fallback
2. SqlAlchemyUniqueViolationStrategy on PostgreSQL and SQLite error shapes
3. SqlAlchemyExceptionMapper end to end
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from crudkit._internal import MappingStrategy, StrategyRegistry
from crudkit.exceptions import DatabaseError, EntityAlreadyExistsError
from crudkit.repository.sqlalchemy._strategies.unique_violation import (
    SqlAlchemyUniqueViolationStrategy,
)
from crudkit.repository.sqlalchemy.mapper import SqlAlchemyExceptionMapper


class _PostgresUniqueViolation(Exception):
    sqlstate = "23505"


class _PostgresForeignKeyViolation(Exception):
    sqlstate = "23503"


def _postgres_unique_error() -> IntegrityError:
    orig = _PostgresUniqueViolation(
        'duplicate key value violates unique constraint "uq_name"\n'
        "DETAIL:  Key (employee_classification_name)=(Exempt) already exists."
    )
    return IntegrityError("INSERT INTO employee_classification ...", {"name": "Exempt"}, orig)


def _sqlite_unique_error() -> IntegrityError:
    orig = Exception(
        "UNIQUE constraint failed: employee_classification.employee_classification_name"
    )
    return IntegrityError("INSERT INTO employee_classification ...", ("Exempt", False, True), orig)


class _Exploding(MappingStrategy):
    def can_handle(self, error: Exception) -> bool:
        return True

    def map(self, error: Exception, entity_type: str | None) -> DatabaseError:
        raise ValueError("cannot map")


class _Fixed(MappingStrategy):
    def __init__(self, message: str) -> None:
        self.message = message

    def can_handle(self, error: Exception) -> bool:
        return True

    def map(self, error: Exception, entity_type: str | None) -> DatabaseError:
        return DatabaseError(self.message)


class TestStrategyRegistry:
    def test_fallback_is_generic_database_error(self) -> None:
        """With no strategy, errors become a DatabaseError naming the entity."""
        result = StrategyRegistry().map(RuntimeError("boom"), "EmployeeClassification")

        assert type(result) is DatabaseError
        assert "EmployeeClassification" in str(result)
        assert "boom" in str(result)

    def test_fallback_without_entity_type(self) -> None:
        result = StrategyRegistry().map(RuntimeError("boom"))

        assert "unknown entity" in str(result)

    def test_strategies_are_tried_in_order(self) -> None:
        registry = StrategyRegistry()
        registry.register(_Fixed("first"))
        registry.register(_Fixed("second"))

        assert str(registry.map(RuntimeError())) == "first"

    def test_failing_strategy_falls_through(self) -> None:
        """A strategy that raises while mapping is skipped."""
        registry = StrategyRegistry()
        registry.register(_Exploding())
        registry.register(_Fixed("second"))

        assert str(registry.map(RuntimeError())) == "second"


class TestUniqueViolationStrategy:
    @pytest.fixture
    def strategy(self) -> SqlAlchemyUniqueViolationStrategy:
        return SqlAlchemyUniqueViolationStrategy()

    def test_handles_postgres_sqlstate(self, strategy: SqlAlchemyUniqueViolationStrategy) -> None:
        assert strategy.can_handle(_postgres_unique_error())

    def test_handles_sqlite_message(self, strategy: SqlAlchemyUniqueViolationStrategy) -> None:
        assert strategy.can_handle(_sqlite_unique_error())

    def test_ignores_other_integrity_errors(
        self, strategy: SqlAlchemyUniqueViolationStrategy
    ) -> None:
        error = IntegrityError("INSERT ...", {}, _PostgresForeignKeyViolation("fk violation"))

        assert not strategy.can_handle(error)

    def test_ignores_non_integrity_errors(
        self, strategy: SqlAlchemyUniqueViolationStrategy
    ) -> None:
        assert not strategy.can_handle(OperationalError("SELECT 1", {}, Exception("locked")))
        assert not strategy.can_handle(ValueError("UNIQUE constraint failed: t.c"))

    def test_maps_postgres_detail(self, strategy: SqlAlchemyUniqueViolationStrategy) -> None:
        result = strategy.map(_postgres_unique_error(), "EmployeeClassification")

        assert isinstance(result, EntityAlreadyExistsError)
        assert result.column == "employee_classification_name"
        assert result.value == "Exempt"
        assert result.entity_type == "EmployeeClassification"

    def test_maps_sqlite_message(self, strategy: SqlAlchemyUniqueViolationStrategy) -> None:
        result = strategy.map(_sqlite_unique_error(), "EmployeeClassification")

        assert isinstance(result, EntityAlreadyExistsError)
        assert result.column == "employee_classification_name"
        assert result.value == "Exempt"

    def test_maps_sqlstate_without_detail(
        self, strategy: SqlAlchemyUniqueViolationStrategy
    ) -> None:
        error = IntegrityError("INSERT ...", None, _PostgresUniqueViolation("duplicate key"))

        result = strategy.map(error, None)

        assert isinstance(result, EntityAlreadyExistsError)
        assert result.column == "unique key"
        assert result.value == "unknown"
        assert result.entity_type == "Entity"


class TestSqlAlchemyExceptionMapper:
    def test_unique_violation(self) -> None:
        result = SqlAlchemyExceptionMapper().map(_sqlite_unique_error(), "EmployeeClassification")

        assert isinstance(result, EntityAlreadyExistsError)

    def test_anything_else_is_a_database_error(self) -> None:
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))

        result = SqlAlchemyExceptionMapper().map(error, "EmployeeClassification")

        assert type(result) is DatabaseError
        assert "database is locked" in str(result)
