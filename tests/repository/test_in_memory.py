"""
Tests for the in-memory repository implementations.

This module certifies every in-memory adapter by:
1. Inheriting the conformance suites from crudkit.conformance
2. Running the CRUD suite with both scenario factories and both missing-key policies
3. Adding in-memory specific tests (model type validation, no aliasing of stored rows)
"""

from collections.abc import Callable

import pytest
from pydantic import BaseModel

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
from crudkit.exceptions import EntityModelError
from crudkit.models import EmployeeClassification, EmployeeSimple, ReadOnlyEmployeeClassification
from crudkit.repository import MissingKeyPolicy
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


class TestInMemoryCrud(CrudContractTests[EmployeeClassification]):
    """CRUD suite over mutable models."""

    @pytest.fixture
    def repository(self) -> InMemoryCrud[EmployeeClassification]:
        return InMemoryCrud(InMemoryDatabase.seeded(), EmployeeClassification)

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[EmployeeClassification]:
        return MutableScenario(EmployeeClassification)

    # ==================== InMemory-Specific Tests ====================

    def test_entity_model_raise_error(
        self, repository: InMemoryCrud[EmployeeClassification]
    ) -> None:
        """InMemory should validate that models match the expected model type."""

        class Company(BaseModel):
            employee_classification_key: int = 0
            employee_classification_name: str = "Acme Corp"
            is_exempt: bool = False
            is_employee: bool = True

        company = Company()
        message = "Model must be of type EmployeeClassification, got Company"

        with pytest.raises(EntityModelError, match=message):
            repository.create(company)  # type: ignore[arg-type]

        with pytest.raises(EntityModelError, match=message):
            repository.update(company)  # type: ignore[arg-type]

        with pytest.raises(EntityModelError, match=message):
            repository.delete(company)  # type: ignore[arg-type]

    def test_reads_do_not_alias_stored_rows(
        self, repository: InMemoryCrud[EmployeeClassification]
    ) -> None:
        """Mutating a model returned by a read never changes the stored row."""
        echo = repository.get_by_key(1)
        assert echo is not None
        echo.employee_classification_name = "Changed"

        stored = repository.get_by_key(1)
        assert stored is not None
        assert stored.employee_classification_name == "Exempt"

    def test_create_ignores_model_key(
        self, repository: InMemoryCrud[EmployeeClassification]
    ) -> None:
        """The key carried by the model is never used on create."""
        model = EmployeeClassification(
            employee_classification_key=2, employee_classification_name="New"
        )

        key = repository.create(model)

        assert key >= 1000
        seed = repository.get_by_key(2)
        assert seed is not None
        assert seed.employee_classification_name == "Non-Exempt"


class TestInMemoryImmutableCrud(CrudContractTests[ReadOnlyEmployeeClassification]):
    """CRUD suite over immutable models."""

    @pytest.fixture
    def repository(self) -> InMemoryCrud[ReadOnlyEmployeeClassification]:
        return InMemoryCrud(InMemoryDatabase.seeded(), ReadOnlyEmployeeClassification)

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[ReadOnlyEmployeeClassification]:
        return ImmutableScenario(ReadOnlyEmployeeClassification)


class TestInMemoryStrictCrud(CrudContractTests[EmployeeClassification]):
    """CRUD suite with an adapter that raises on missing keys."""

    @pytest.fixture
    def repository(self) -> InMemoryCrud[EmployeeClassification]:
        return InMemoryCrud(
            InMemoryDatabase.seeded(),
            EmployeeClassification,
            missing_key_policy=MissingKeyPolicy.RAISE,
        )

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[EmployeeClassification]:
        return MutableScenario(EmployeeClassification)


class TestInMemoryAsyncCrud(AsyncCrudContractTests[ReadOnlyEmployeeClassification]):
    @pytest.fixture
    def repository(self) -> InMemoryAsyncCrud[ReadOnlyEmployeeClassification]:
        return InMemoryAsyncCrud(InMemoryDatabase.seeded(), ReadOnlyEmployeeClassification)

    @pytest.fixture
    def scenario(self) -> ScenarioFactory[ReadOnlyEmployeeClassification]:
        return ImmutableScenario(ReadOnlyEmployeeClassification)


class TestInMemoryPartialUpdate(PartialUpdateContractTests[EmployeeClassification]):
    @pytest.fixture
    def repository(self) -> InMemoryPartialUpdate[EmployeeClassification]:
        return InMemoryPartialUpdate(InMemoryDatabase.seeded(), EmployeeClassification)


class TestInMemoryStrictPartialUpdate(PartialUpdateContractTests[EmployeeClassification]):
    @pytest.fixture
    def repository(self) -> InMemoryPartialUpdate[EmployeeClassification]:
        return InMemoryPartialUpdate(
            InMemoryDatabase.seeded(),
            EmployeeClassification,
            missing_key_policy=MissingKeyPolicy.RAISE,
        )


class TestInMemoryAsyncPartialUpdate(AsyncPartialUpdateContractTests[EmployeeClassification]):
    @pytest.fixture
    def repository(self) -> InMemoryAsyncPartialUpdate[EmployeeClassification]:
        return InMemoryAsyncPartialUpdate(InMemoryDatabase.seeded(), EmployeeClassification)


class TestInMemorySorting(SortingContractTests[EmployeeSimple]):
    @pytest.fixture
    def repository(self) -> InMemorySorting[EmployeeSimple]:
        return InMemorySorting(InMemoryDatabase.seeded(), EmployeeSimple)

    @pytest.fixture
    def employee_factory(self) -> Callable[..., EmployeeSimple]:
        def _create_employee(**values: str | None) -> EmployeeSimple:
            return EmployeeSimple(employee_classification_key=1, **values)

        return _create_employee

    def test_insert_batch_does_not_alias_models(
        self,
        repository: InMemorySorting[EmployeeSimple],
        employee_factory: Callable[..., EmployeeSimple],
    ) -> None:
        """Models passed to insert_batch keep their key and stay detached from storage."""
        employee = employee_factory(first_name="Ann", middle_name=None, last_name="Alias")
        repository.insert_batch([employee])
        employee.first_name = "Changed"

        rows = repository.sort_by_first_name("Alias")

        assert [e.first_name for e in rows] == ["Ann"]
        assert employee.employee_key == 0
        assert rows[0].employee_key >= 1000


class TestInMemoryAsyncSorting(AsyncSortingContractTests[EmployeeSimple]):
    @pytest.fixture
    def repository(self) -> InMemoryAsyncSorting[EmployeeSimple]:
        return InMemoryAsyncSorting(InMemoryDatabase.seeded(), EmployeeSimple)

    @pytest.fixture
    def employee_factory(self) -> Callable[..., EmployeeSimple]:
        def _create_employee(**values: str | None) -> EmployeeSimple:
            return EmployeeSimple(employee_classification_key=1, **values)

        return _create_employee


class TestInMemoryScalarValue(ScalarValueContractTests):
    @pytest.fixture
    def repository(self) -> InMemoryScalarValue:
        return InMemoryScalarValue(InMemoryDatabase.seeded())

    def test_reads_see_rows_written_by_other_repositories(
        self, repository: InMemoryScalarValue
    ) -> None:
        """Repositories sharing a database see each other's writes."""
        crud = InMemoryCrud(repository.database, EmployeeClassification)
        key = crud.create(
            EmployeeClassification(
                employee_classification_name="Seasonal", is_exempt=True, is_employee=False
            )
        )

        assert repository.get_key("Seasonal") == key
        assert repository.get_name(key) == "Seasonal"
        assert repository.get_max_key(True, False) == key
        assert repository.count(False) == 2


class TestInMemoryAsyncScalarValue(AsyncScalarValueContractTests):
    @pytest.fixture
    def repository(self) -> InMemoryAsyncScalarValue:
        return InMemoryAsyncScalarValue(InMemoryDatabase.seeded())
