"""
Conformance suite for the CRUD contracts.

Every CrudRepository and AsyncCrudRepository implementation must pass these
tests. A concrete test class inherits from CrudContractTests (or
AsyncCrudContractTests) and provides two fixtures:

- repository: a repository over a seeded backing store
- scenario: the ScenarioFactory matching the repository's model type

The suites only go through the contract, so the same tests certify mutable and
immutable models alike.
"""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Final, Generic

import pytest
from ulid import ULID

from crudkit.conformance.scenario import ScenarioFactory
from crudkit.exceptions import EntityAlreadyExistsError, EntityNotFoundError, InvalidArgumentError
from crudkit.repository.protocols import (
    AsyncCrudRepository,
    ClassificationModel,
    CrudRepository,
    M,
    MissingKeyPolicy,
)

# Keys under this value were not generated by the backing store.
GENERATED_KEY_THRESHOLD: Final = 1000

SEED_KEYS: Final = (1, 2, 3)

CONCURRENT_CREATES: Final = 8


def unique_name(prefix: str = "Test") -> str:
    """Return a classification name no other test run will produce."""
    return f"{prefix} {ULID()}"


def assert_generated_key(key: Any, step: str) -> None:
    assert isinstance(key, int), f"{step}: expected an int key, got {key!r}"
    assert key >= GENERATED_KEY_THRESHOLD, (
        f"{step}: keys under {GENERATED_KEY_THRESHOLD} were not generated by the store, got {key}"
    )


def assert_same_values(
    step: str, expected: ClassificationModel, actual: ClassificationModel | None
) -> None:
    """Compare every non-key field of two classifications."""
    assert actual is not None, f"{step}: expected a row, got None"
    for field in ("employee_classification_name", "is_exempt", "is_employee"):
        wanted, got = getattr(expected, field), getattr(actual, field)
        assert wanted == got, f"{step}: {field} expected {wanted!r}, got {got!r}"


def keys_of(models: list[Any]) -> set[int]:
    return {model.employee_classification_key for model in models}


class CrudContractTests(ABC, Generic[M]):
    """
    Abstract base class defining the CRUD contract tests.

    Subclasses must implement:
    - repository: a CrudRepository over a seeded store
    - scenario: the ScenarioFactory for the repository's model type
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> CrudRepository[M]:
        """Return a repository over a store holding the seed classifications."""

    @pytest.fixture
    @abstractmethod
    def scenario(self) -> ScenarioFactory[M]:
        """Return the factory that builds models for this repository."""

    # ==================== Create and read ====================

    def test_create_and_read_back(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """create() returns a generated key; get_by_key() and find_by_name() echo it."""
        new_record = scenario.create_with_values(unique_name(), False, True)
        new_key = repository.create(new_record)
        assert_generated_key(new_key, "create")

        echo = repository.get_by_key(new_key)
        assert echo is not None, "get_by_key: created row not found"
        assert echo.employee_classification_key == new_key
        assert echo.employee_classification_name == new_record.employee_classification_name

        search = repository.find_by_name(new_record.employee_classification_name)
        assert search is not None, "find_by_name: created row not found"
        assert search.employee_classification_key == new_key
        assert search.employee_classification_name == new_record.employee_classification_name

    def test_create_round_trips_every_field(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """Every supplied field reads back unchanged, including non-default flags."""
        for is_exempt, is_employee in ((True, False), (False, False), (True, True)):
            new_record = scenario.create_with_values(unique_name(), is_exempt, is_employee)
            new_key = repository.create(new_record)
            echo = repository.get_by_key(new_key)
            assert_same_values("get_by_key after create", new_record, echo)

    def test_create_and_update(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """update() replaces the name and keeps the flags that were passed unchanged."""
        new_key = repository.create(scenario.create_with_values(unique_name(), True, False))
        echo = repository.get_by_key(new_key)
        assert echo is not None, "get_by_key: created row not found"

        changed = scenario.update_with_values(
            echo, unique_name("Updated"), echo.is_exempt, echo.is_employee
        )
        repository.update(changed)

        updated = repository.get_by_key(new_key)
        assert_same_values("get_by_key after update", changed, updated)
        assert updated is not None
        assert updated.is_exempt is True
        assert updated.is_employee is False

    def test_update_leaves_immutable_original_untouched(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """Building the updated model never changes an immutable original."""
        if not scenario.immutable:
            pytest.skip("scenario updates the original in place")
        new_key = repository.create(scenario.create_with_values(unique_name(), False, True))
        original = repository.get_by_key(new_key)
        assert original is not None
        original_name = original.employee_classification_name

        changed = scenario.update_with_values(original, unique_name("Updated"), True, False)
        repository.update(changed)

        assert changed is not original
        assert changed.employee_classification_key == new_key
        assert original.employee_classification_name == original_name
        assert original.is_exempt is False
        assert original.is_employee is True

    # ==================== Delete ====================

    def test_create_and_delete_by_model(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """delete() removes the row identified by the model's key."""
        new_key = repository.create(scenario.create_with_values(unique_name(), False, True))
        echo = repository.get_by_key(new_key)
        assert echo is not None

        repository.delete(echo)

        assert new_key not in keys_of(repository.get_all()), "get_all: deleted key still present"
        assert repository.get_by_key(new_key) is None, "get_by_key: deleted key still readable"

    def test_create_and_delete_by_key(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """delete_by_key() removes the row."""
        new_key = repository.create(scenario.create_with_values(unique_name(), False, True))

        repository.delete_by_key(new_key)

        assert new_key not in keys_of(repository.get_all()), "get_all: deleted key still present"

    def test_delete_missing_key_follows_policy(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """Deleting a key twice is a no-op or raises, as the adapter declares."""
        new_key = repository.create(scenario.create_with_values(unique_name(), False, True))
        repository.delete_by_key(new_key)

        if repository.missing_key_policy is MissingKeyPolicy.RAISE:
            with pytest.raises(EntityNotFoundError):
                repository.delete_by_key(new_key)
        else:
            repository.delete_by_key(new_key)

    # ==================== Bulk and keyed reads ====================

    def test_get_all_is_not_empty(self, repository: CrudRepository[M]) -> None:
        """get_all() returns at least the seed rows."""
        all_rows = repository.get_all()
        assert all_rows, "get_all: expected seed rows, got an empty list"

    def test_seed_keys_are_stable(self, repository: CrudRepository[M]) -> None:
        """The seed rows read back with keys 1, 2 and 3."""
        for key in SEED_KEYS:
            row = repository.get_by_key(key)
            assert row is not None, f"get_by_key({key}): seed row missing"
            assert row.employee_classification_key == key

    def test_get_by_key_missing_returns_none(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        new_key = repository.create(scenario.create_with_values(unique_name(), False, True))
        repository.delete_by_key(new_key)

        assert repository.get_by_key(new_key) is None

    def test_find_by_name_missing_returns_none(self, repository: CrudRepository[M]) -> None:
        assert repository.find_by_name(unique_name("Missing")) is None

    def test_find_by_name_is_case_sensitive(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """find_by_name() does not normalise case."""
        name = unique_name()
        repository.create(scenario.create_with_values(name, False, True))

        assert repository.find_by_name(name.upper()) is None, "find_by_name matched another case"

    # ==================== Argument checks ====================

    def test_create_none_is_rejected(self, repository: CrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.create(None)  # type: ignore[arg-type]

    def test_update_none_is_rejected(self, repository: CrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.update(None)  # type: ignore[arg-type]

    def test_delete_none_is_rejected(self, repository: CrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.delete(None)  # type: ignore[arg-type]

    def test_delete_by_key_none_is_rejected(self, repository: CrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.delete_by_key(None)  # type: ignore[arg-type]

    def test_get_by_key_none_is_rejected(self, repository: CrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.get_by_key(None)  # type: ignore[arg-type]

    # ==================== Constraints and concurrency ====================

    def test_duplicate_name_is_rejected(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """Classification names carry a unique index."""
        name = unique_name()
        repository.create(scenario.create_with_values(name, False, True))

        with pytest.raises(EntityAlreadyExistsError):
            repository.create(scenario.create_with_values(name, True, True))

    def test_concurrent_creates_return_unique_keys(
        self, repository: CrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """Concurrent writers never receive the same key."""
        models = [
            scenario.create_with_values(unique_name(), False, True)
            for _ in range(CONCURRENT_CREATES)
        ]
        with ThreadPoolExecutor(max_workers=4) as executor:
            keys = list(executor.map(repository.create, models))

        assert len(set(keys)) == CONCURRENT_CREATES, f"create: duplicate keys in {keys}"
        for key in keys:
            assert_generated_key(key, "concurrent create")


class AsyncCrudContractTests(ABC, Generic[M]):
    """
    Abstract base class defining the asynchronous CRUD contract tests.

    Same scenarios as CrudContractTests, awaited.
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> AsyncCrudRepository[M]:
        """Return a repository over a store holding the seed classifications."""

    @pytest.fixture
    @abstractmethod
    def scenario(self) -> ScenarioFactory[M]:
        """Return the factory that builds models for this repository."""

    # ==================== Create and read ====================

    @pytest.mark.asyncio
    async def test_create_and_read_back(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """create() returns a generated key; get_by_key() and find_by_name() echo it."""
        new_record = scenario.create_with_values(unique_name(), False, True)
        new_key = await repository.create(new_record)
        assert_generated_key(new_key, "create")

        echo = await repository.get_by_key(new_key)
        assert echo is not None, "get_by_key: created row not found"
        assert echo.employee_classification_key == new_key
        assert echo.employee_classification_name == new_record.employee_classification_name

        search = await repository.find_by_name(new_record.employee_classification_name)
        assert search is not None, "find_by_name: created row not found"
        assert search.employee_classification_key == new_key

    @pytest.mark.asyncio
    async def test_create_round_trips_every_field(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        for is_exempt, is_employee in ((True, False), (False, False), (True, True)):
            new_record = scenario.create_with_values(unique_name(), is_exempt, is_employee)
            new_key = await repository.create(new_record)
            echo = await repository.get_by_key(new_key)
            assert_same_values("get_by_key after create", new_record, echo)

    @pytest.mark.asyncio
    async def test_create_and_update(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        """update() replaces the name and keeps the flags that were passed unchanged."""
        new_key = await repository.create(scenario.create_with_values(unique_name(), True, False))
        echo = await repository.get_by_key(new_key)
        assert echo is not None, "get_by_key: created row not found"

        changed = scenario.update_with_values(
            echo, unique_name("Updated"), echo.is_exempt, echo.is_employee
        )
        await repository.update(changed)

        updated = await repository.get_by_key(new_key)
        assert_same_values("get_by_key after update", changed, updated)

    @pytest.mark.asyncio
    async def test_update_leaves_immutable_original_untouched(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        if not scenario.immutable:
            pytest.skip("scenario updates the original in place")
        new_key = await repository.create(scenario.create_with_values(unique_name(), False, True))
        original = await repository.get_by_key(new_key)
        assert original is not None
        original_name = original.employee_classification_name

        changed = scenario.update_with_values(original, unique_name("Updated"), True, False)
        await repository.update(changed)

        assert changed is not original
        assert original.employee_classification_name == original_name
        assert original.is_exempt is False

    # ==================== Delete ====================

    @pytest.mark.asyncio
    async def test_create_and_delete_by_model(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        new_key = await repository.create(scenario.create_with_values(unique_name(), False, True))
        echo = await repository.get_by_key(new_key)
        assert echo is not None

        await repository.delete(echo)

        all_rows = await repository.get_all()
        assert new_key not in keys_of(all_rows), "get_all: deleted key still present"

    @pytest.mark.asyncio
    async def test_create_and_delete_by_key(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        new_key = await repository.create(scenario.create_with_values(unique_name(), False, True))

        await repository.delete_by_key(new_key)

        all_rows = await repository.get_all()
        assert new_key not in keys_of(all_rows), "get_all: deleted key still present"

    @pytest.mark.asyncio
    async def test_delete_missing_key_follows_policy(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        new_key = await repository.create(scenario.create_with_values(unique_name(), False, True))
        await repository.delete_by_key(new_key)

        if repository.missing_key_policy is MissingKeyPolicy.RAISE:
            with pytest.raises(EntityNotFoundError):
                await repository.delete_by_key(new_key)
        else:
            await repository.delete_by_key(new_key)

    # ==================== Bulk and keyed reads ====================

    @pytest.mark.asyncio
    async def test_get_all_is_not_empty(self, repository: AsyncCrudRepository[M]) -> None:
        all_rows = await repository.get_all()
        assert all_rows, "get_all: expected seed rows, got an empty list"

    @pytest.mark.asyncio
    async def test_seed_keys_are_stable(self, repository: AsyncCrudRepository[M]) -> None:
        for key in SEED_KEYS:
            row = await repository.get_by_key(key)
            assert row is not None, f"get_by_key({key}): seed row missing"
            assert row.employee_classification_key == key

    @pytest.mark.asyncio
    async def test_get_by_key_missing_returns_none(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        new_key = await repository.create(scenario.create_with_values(unique_name(), False, True))
        await repository.delete_by_key(new_key)

        assert await repository.get_by_key(new_key) is None

    @pytest.mark.asyncio
    async def test_find_by_name_missing_returns_none(
        self, repository: AsyncCrudRepository[M]
    ) -> None:
        assert await repository.find_by_name(unique_name("Missing")) is None

    @pytest.mark.asyncio
    async def test_find_by_name_is_case_sensitive(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        name = unique_name()
        await repository.create(scenario.create_with_values(name, False, True))

        found = await repository.find_by_name(name.upper())
        assert found is None, "find_by_name matched another case"

    # ==================== Argument checks ====================

    @pytest.mark.asyncio
    async def test_create_none_is_rejected(self, repository: AsyncCrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.create(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_update_none_is_rejected(self, repository: AsyncCrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.update(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_delete_none_is_rejected(self, repository: AsyncCrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.delete(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_delete_by_key_none_is_rejected(
        self, repository: AsyncCrudRepository[M]
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.delete_by_key(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_get_by_key_none_is_rejected(self, repository: AsyncCrudRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.get_by_key(None)  # type: ignore[arg-type]

    # ==================== Constraints and concurrency ====================

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        name = unique_name()
        await repository.create(scenario.create_with_values(name, False, True))

        with pytest.raises(EntityAlreadyExistsError):
            await repository.create(scenario.create_with_values(name, True, True))

    @pytest.mark.asyncio
    async def test_concurrent_creates_return_unique_keys(
        self, repository: AsyncCrudRepository[M], scenario: ScenarioFactory[M]
    ) -> None:
        models = [
            scenario.create_with_values(unique_name(), False, True)
            for _ in range(CONCURRENT_CREATES)
        ]
        keys = await asyncio.gather(*(repository.create(model) for model in models))

        assert len(set(keys)) == CONCURRENT_CREATES, f"create: duplicate keys in {keys}"
        for key in keys:
            assert_generated_key(key, "concurrent create")
