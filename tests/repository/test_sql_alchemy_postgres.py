"""
Tests for the SQLAlchemy repository implementations on PostgreSQL.

Same conformance suites as test_sql_alchemy.py, run against a testcontainers
PostgreSQL instance through psycopg (sync) and asyncpg (async). Deselected by
default; run with ``pytest -m postgres``.
"""

from collections.abc import Callable

import pytest
from sqlalchemy import Engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, sessionmaker

from crudkit.conformance import (
    AsyncCrudContractTests,
    AsyncPartialUpdateContractTests,
    AsyncScalarValueContractTests,
    AsyncSortingContractTests,
    CrudContractTests,
    ImmutableScenario,
    MutableScenario,
    PartialUpdateContractTests,
    ScalarValueContractTests,
    ScenarioFactory,
    SortingContractTests,
)
from crudkit.exceptions import EntityAlreadyExistsError
from crudkit.models import EmployeeClassification, EmployeeSimple, ReadOnlyEmployeeClassification
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

pytestmark = pytest.mark.postgres


def _create_employee(**values: str | None) -> EmployeeSimple:
    return EmployeeSimple(employee_classification_key=1, **values)


class TestPostgresCrud(CrudContractTests[EmployeeClassification]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, postgres_session_factory: sessionmaker[Session]
    ) -> SqlAlchemyCrud[EmployeeClassification]:
        return SqlAlchemyCrud(postgres_session_factory, EmployeeClassification)

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[EmployeeClassification]:
        return MutableScenario(EmployeeClassification)

    # ==================== PostgreSQL-Specific Tests ====================

    def test_identity_starts_at_1000(
        self, repository: SqlAlchemyCrud[EmployeeClassification], postgres_engine: Engine
    ) -> None:
        key = repository.create(EmployeeClassification(employee_classification_name="First"))

        assert key == 1000
        with postgres_engine.connect() as connection:
            count = connection.execute(
                text(
                    "SELECT COUNT(*) FROM employee_classification "
                    "WHERE employee_classification_key >= 1000"
                )
            ).scalar()
        assert count == 1

    def test_unique_violation_is_mapped_from_sqlstate(
        self, repository: SqlAlchemyCrud[EmployeeClassification]
    ) -> None:
        """sqlstate 23505 maps to EntityAlreadyExistsError naming the column and value."""
        with pytest.raises(EntityAlreadyExistsError) as exc_info:
            repository.create(EmployeeClassification(employee_classification_name="Exempt"))

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert exc_info.value.column == "employee_classification_name"
        assert exc_info.value.value == "Exempt"


class TestPostgresImmutableCrud(CrudContractTests[ReadOnlyEmployeeClassification]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, postgres_session_factory: sessionmaker[Session]
    ) -> SqlAlchemyCrud[ReadOnlyEmployeeClassification]:
        return SqlAlchemyCrud(postgres_session_factory, ReadOnlyEmployeeClassification)

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[ReadOnlyEmployeeClassification]:
        return ImmutableScenario(ReadOnlyEmployeeClassification)


class TestPostgresAsyncCrud(AsyncCrudContractTests[EmployeeClassification]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, async_postgres_session_factory: async_sessionmaker[AsyncSession]
    ) -> SqlAlchemyAsyncCrud[EmployeeClassification]:
        return SqlAlchemyAsyncCrud(async_postgres_session_factory, EmployeeClassification)

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[EmployeeClassification]:
        return MutableScenario(EmployeeClassification)


class TestPostgresPartialUpdate(PartialUpdateContractTests[EmployeeClassification]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, postgres_session_factory: sessionmaker[Session]
    ) -> SqlAlchemyPartialUpdate[EmployeeClassification]:
        return SqlAlchemyPartialUpdate(postgres_session_factory, EmployeeClassification)


class TestPostgresAsyncPartialUpdate(AsyncPartialUpdateContractTests[EmployeeClassification]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, async_postgres_session_factory: async_sessionmaker[AsyncSession]
    ) -> SqlAlchemyAsyncPartialUpdate[EmployeeClassification]:
        return SqlAlchemyAsyncPartialUpdate(async_postgres_session_factory, EmployeeClassification)


class TestPostgresSorting(SortingContractTests[EmployeeSimple]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, postgres_session_factory: sessionmaker[Session]
    ) -> SqlAlchemySorting[EmployeeSimple]:
        return SqlAlchemySorting(postgres_session_factory, EmployeeSimple)

    @pytest.fixture
    def employee_factory(self) -> Callable[..., EmployeeSimple]:
        return _create_employee


class TestPostgresAsyncSorting(AsyncSortingContractTests[EmployeeSimple]):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, async_postgres_session_factory: async_sessionmaker[AsyncSession]
    ) -> SqlAlchemyAsyncSorting[EmployeeSimple]:
        return SqlAlchemyAsyncSorting(async_postgres_session_factory, EmployeeSimple)

    @pytest.fixture
    def employee_factory(self) -> Callable[..., EmployeeSimple]:
        return _create_employee


class TestPostgresScalarValue(ScalarValueContractTests):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(self, postgres_session_factory: sessionmaker[Session]) -> SqlAlchemyScalarValue:
        return SqlAlchemyScalarValue(postgres_session_factory)


class TestPostgresAsyncScalarValue(AsyncScalarValueContractTests):
    # noinspection PyMethodOverriding
    @pytest.fixture
    def repository(
        self, async_postgres_session_factory: async_sessionmaker[AsyncSession]
    ) -> SqlAlchemyAsyncScalarValue:
        return SqlAlchemyAsyncScalarValue(async_postgres_session_factory)
