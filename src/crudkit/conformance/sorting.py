"""
Conformance suite for the sorting contracts.

A concrete test class inherits from SortingContractTests (or
AsyncSortingContractTests) and provides:

- repository: a SortingRepository over an empty employee table
- employee_factory: a callable building an employee from keyword arguments
  first_name, middle_name and last_name

Expected orders are computed in Python from the rows the repository returns:
None sorts lowest and ties are broken by employee key ascending.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, Final, Generic

import pytest
from ulid import ULID

from crudkit.exceptions import InvalidArgumentError
from crudkit.repository.protocols import (
    AsyncSortingRepository,
    E,
    EmployeeModel,
    SortingRepository,
)

# (first_name, middle_name); repeated names exercise the key tie-break
BATCH: Final = (
    ("Charlie", "Quinn"),
    ("Alice", None),
    ("Bob", "Mason"),
    ("Alice", "Mason"),
    ("Dave", None),
    ("Bob", "Zane"),
    ("Alice", "Mason"),
)


def _nulls_low(value: str | None) -> tuple[bool, str]:
    return (value is not None, value or "")


def expected_by_first_name(rows: Sequence[EmployeeModel]) -> list[int]:
    return [e.employee_key for e in sorted(rows, key=lambda e: (e.first_name, e.employee_key))]


def expected_by_middle_name_first_name(rows: Sequence[EmployeeModel]) -> list[int]:
    ordered = sorted(
        rows, key=lambda e: (_nulls_low(e.middle_name), e.first_name, e.employee_key)
    )
    return [e.employee_key for e in ordered]


def expected_by_middle_name_desc_first_name(rows: Sequence[EmployeeModel]) -> list[int]:
    ordered = sorted(rows, key=lambda e: (e.first_name, e.employee_key))
    ordered.sort(key=lambda e: _nulls_low(e.middle_name), reverse=True)
    return [e.employee_key for e in ordered]


def names_of(rows: Sequence[EmployeeModel]) -> list[tuple[str, str | None]]:
    return sorted(((e.first_name, e.middle_name) for e in rows), key=repr)


def assert_order(step: str, rows: Sequence[EmployeeModel], expected: list[int]) -> None:
    actual = [e.employee_key for e in rows]
    assert actual == expected, f"{step}: expected keys {expected}, got {actual}"


class _SortingFixtures(Generic[E]):
    @pytest.fixture
    def last_name(self) -> str:
        """A last name no other test run shares."""
        return f"Sort{ULID()}"

    @pytest.fixture
    def batch(self, employee_factory: Callable[..., E], last_name: str) -> list[E]:
        return [
            employee_factory(first_name=first, middle_name=middle, last_name=last_name)
            for first, middle in BATCH
        ]


class SortingContractTests(_SortingFixtures[E], ABC):
    """
    Abstract base class defining the sorting contract tests.

    Subclasses must implement:
    - repository: a SortingRepository
    - employee_factory: builds employees from first_name, middle_name, last_name
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> SortingRepository[E]:
        """Return the repository to test."""

    @pytest.fixture
    @abstractmethod
    def employee_factory(self) -> Callable[..., E]:
        """Return a factory building employees from keyword arguments."""

    # ==================== Contract Tests: sort orders ====================

    def test_sort_by_first_name(
        self, repository: SortingRepository[E], batch: list[E], last_name: str
    ) -> None:
        repository.insert_batch(batch)

        rows = repository.sort_by_first_name(last_name)

        assert names_of(rows) == names_of(batch), "sort_by_first_name: rows differ from batch"
        assert_order("sort_by_first_name", rows, expected_by_first_name(rows))

    def test_sort_by_middle_name_first_name(
        self, repository: SortingRepository[E], batch: list[E], last_name: str
    ) -> None:
        """None middle names come first."""
        repository.insert_batch(batch)

        rows = repository.sort_by_middle_name_first_name(last_name)

        assert names_of(rows) == names_of(batch)
        assert_order(
            "sort_by_middle_name_first_name", rows, expected_by_middle_name_first_name(rows)
        )
        assert rows[0].middle_name is None

    def test_sort_by_middle_name_desc_first_name(
        self, repository: SortingRepository[E], batch: list[E], last_name: str
    ) -> None:
        """None middle names come last."""
        repository.insert_batch(batch)

        rows = repository.sort_by_middle_name_desc_first_name(last_name)

        assert names_of(rows) == names_of(batch)
        assert_order(
            "sort_by_middle_name_desc_first_name",
            rows,
            expected_by_middle_name_desc_first_name(rows),
        )
        assert rows[-1].middle_name is None

    def test_ties_are_broken_by_key(
        self,
        repository: SortingRepository[E],
        employee_factory: Callable[..., E],
        last_name: str,
    ) -> None:
        """Rows equal on every sort column come back in key order."""
        repository.insert_batch(
            [employee_factory(first_name="Alice", middle_name=None, last_name=last_name)] * 4
        )

        for sort in (
            repository.sort_by_first_name,
            repository.sort_by_middle_name_first_name,
            repository.sort_by_middle_name_desc_first_name,
        ):
            keys = [e.employee_key for e in sort(last_name)]
            assert len(keys) == 4
            assert keys == sorted(keys), f"{sort.__name__}: ties not in key order: {keys}"

    def test_sorts_filter_by_last_name(
        self,
        repository: SortingRepository[E],
        employee_factory: Callable[..., E],
        batch: list[E],
        last_name: str,
    ) -> None:
        other = f"Other{ULID()}"
        repository.insert_batch(batch)
        repository.insert_batch(
            [employee_factory(first_name="Eve", middle_name=None, last_name=other)]
        )

        rows = repository.sort_by_first_name(last_name)

        assert len(rows) == len(BATCH)
        assert {e.last_name for e in rows} == {last_name}
        assert [e.first_name for e in repository.sort_by_first_name(other)] == ["Eve"]

    # ==================== Contract Tests: insert_batch ====================

    def test_empty_batch_is_a_no_op(self, repository: SortingRepository[E], last_name: str) -> None:
        repository.insert_batch([])

        assert repository.sort_by_first_name(last_name) == []

    def test_none_batch_is_rejected(self, repository: SortingRepository[E]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.insert_batch(None)  # type: ignore[arg-type]


class AsyncSortingContractTests(_SortingFixtures[E], ABC):
    """
    Abstract base class defining the asynchronous sorting contract tests.

    Subclasses must implement:
    - repository: an AsyncSortingRepository
    - employee_factory: builds employees from first_name, middle_name, last_name
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> AsyncSortingRepository[E]:
        """Return the repository to test."""

    @pytest.fixture
    @abstractmethod
    def employee_factory(self) -> Callable[..., E]:
        """Return a factory building employees from keyword arguments."""

    # ==================== Contract Tests: sort orders ====================

    @pytest.mark.asyncio
    async def test_sort_by_first_name(
        self, repository: AsyncSortingRepository[E], batch: list[E], last_name: str
    ) -> None:
        await repository.insert_batch(batch)

        rows = await repository.sort_by_first_name(last_name)

        assert names_of(rows) == names_of(batch), "sort_by_first_name: rows differ from batch"
        assert_order("sort_by_first_name", rows, expected_by_first_name(rows))

    @pytest.mark.asyncio
    async def test_sort_by_middle_name_first_name(
        self, repository: AsyncSortingRepository[E], batch: list[E], last_name: str
    ) -> None:
        await repository.insert_batch(batch)

        rows = await repository.sort_by_middle_name_first_name(last_name)

        assert names_of(rows) == names_of(batch)
        assert_order(
            "sort_by_middle_name_first_name", rows, expected_by_middle_name_first_name(rows)
        )
        assert rows[0].middle_name is None

    @pytest.mark.asyncio
    async def test_sort_by_middle_name_desc_first_name(
        self, repository: AsyncSortingRepository[E], batch: list[E], last_name: str
    ) -> None:
        await repository.insert_batch(batch)

        rows = await repository.sort_by_middle_name_desc_first_name(last_name)

        assert names_of(rows) == names_of(batch)
        assert_order(
            "sort_by_middle_name_desc_first_name",
            rows,
            expected_by_middle_name_desc_first_name(rows),
        )
        assert rows[-1].middle_name is None

    @pytest.mark.asyncio
    async def test_ties_are_broken_by_key(
        self,
        repository: AsyncSortingRepository[E],
        employee_factory: Callable[..., E],
        last_name: str,
    ) -> None:
        await repository.insert_batch(
            [employee_factory(first_name="Alice", middle_name=None, last_name=last_name)] * 4
        )

        for sort in (
            repository.sort_by_first_name,
            repository.sort_by_middle_name_first_name,
            repository.sort_by_middle_name_desc_first_name,
        ):
            rows: list[Any] = await sort(last_name)
            keys = [e.employee_key for e in rows]
            assert len(keys) == 4
            assert keys == sorted(keys), f"{sort.__name__}: ties not in key order: {keys}"

    @pytest.mark.asyncio
    async def test_sorts_filter_by_last_name(
        self,
        repository: AsyncSortingRepository[E],
        employee_factory: Callable[..., E],
        batch: list[E],
        last_name: str,
    ) -> None:
        other = f"Other{ULID()}"
        await repository.insert_batch(batch)
        await repository.insert_batch(
            [employee_factory(first_name="Eve", middle_name=None, last_name=other)]
        )

        rows = await repository.sort_by_first_name(last_name)

        assert len(rows) == len(BATCH)
        assert {e.last_name for e in rows} == {last_name}
        assert [e.first_name for e in await repository.sort_by_first_name(other)] == ["Eve"]

    # ==================== Contract Tests: insert_batch ====================

    @pytest.mark.asyncio
    async def test_empty_batch_is_a_no_op(
        self, repository: AsyncSortingRepository[E], last_name: str
    ) -> None:
        await repository.insert_batch([])

        assert await repository.sort_by_first_name(last_name) == []

    @pytest.mark.asyncio
    async def test_none_batch_is_rejected(self, repository: AsyncSortingRepository[E]) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.insert_batch(None)  # type: ignore[arg-type]
