"""
Conformance suite for the scalar-value contracts.

A concrete test class inherits from ScalarValueContractTests (or
AsyncScalarValueContractTests) and provides a repository fixture over a store
holding exactly the seed classifications.
"""

from abc import ABC, abstractmethod
from typing import Final

import pytest

from crudkit.exceptions import InvalidArgumentError
from crudkit.repository.protocols import AsyncScalarValueRepository, ScalarValueRepository

SEED_NAMES: Final = {1: "Exempt", 2: "Non-Exempt", 3: "Contractor"}

# (is_exempt, is_employee) -> highest seed key carrying both flags
SEED_MAX_KEYS: Final = {
    (True, True): 1,
    (False, True): 2,
    (False, False): 3,
    (True, False): None,
}

# seed keys stop at 3 and generated keys start at 1000
MISSING_KEY: Final = 999


class ScalarValueContractTests(ABC):
    """
    Abstract base class defining the scalar-value contract tests.

    Subclasses must implement:
    - repository: a ScalarValueRepository over a seeded store
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> ScalarValueRepository:
        """Return a repository over a store holding only the seed classifications."""

    # ==================== Contract Tests: single column ====================

    @pytest.mark.parametrize(("key", "name"), list(SEED_NAMES.items()))
    def test_get_name(self, repository: ScalarValueRepository, key: int, name: str) -> None:
        assert repository.get_name(key) == name

    def test_get_name_of_missing_key_is_none(self, repository: ScalarValueRepository) -> None:
        assert repository.get_name(MISSING_KEY) is None

    @pytest.mark.parametrize(("key", "name"), list(SEED_NAMES.items()))
    def test_get_key(self, repository: ScalarValueRepository, key: int, name: str) -> None:
        assert repository.get_key(name) == key

    def test_get_key_of_unknown_name_is_none(self, repository: ScalarValueRepository) -> None:
        """Names match exactly, so another case is unknown too."""
        assert repository.get_key("Nobody") is None
        assert repository.get_key("contractor") is None

    # ==================== Contract Tests: aggregates ====================

    def test_count(self, repository: ScalarValueRepository) -> None:
        assert repository.count(True) == 2
        assert repository.count(False) == 1

    @pytest.mark.parametrize(("flags", "expected"), list(SEED_MAX_KEYS.items()))
    def test_get_max_key(
        self,
        repository: ScalarValueRepository,
        flags: tuple[bool, bool],
        expected: int | None,
    ) -> None:
        """An aggregate over no rows is None."""
        assert repository.get_max_key(*flags) == expected

    # ==================== Argument checks ====================

    def test_none_arguments_are_rejected(self, repository: ScalarValueRepository) -> None:
        with pytest.raises(InvalidArgumentError, match="key is None"):
            repository.get_name(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="name is None"):
            repository.get_key(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="is_employee is None"):
            repository.count(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="is_exempt is None"):
            repository.get_max_key(None, True)  # type: ignore[arg-type]


class AsyncScalarValueContractTests(ABC):
    """
    Abstract base class defining the asynchronous scalar-value contract tests.

    Subclasses must implement:
    - repository: an AsyncScalarValueRepository over a seeded store
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> AsyncScalarValueRepository:
        """Return a repository over a store holding only the seed classifications."""

    # ==================== Contract Tests: single column ====================

    @pytest.mark.asyncio
    async def test_get_name(self, repository: AsyncScalarValueRepository) -> None:
        for key, name in SEED_NAMES.items():
            assert await repository.get_name(key) == name
        assert await repository.get_name(MISSING_KEY) is None

    @pytest.mark.asyncio
    async def test_get_key(self, repository: AsyncScalarValueRepository) -> None:
        for key, name in SEED_NAMES.items():
            assert await repository.get_key(name) == key
        assert await repository.get_key("contractor") is None

    # ==================== Contract Tests: aggregates ====================

    @pytest.mark.asyncio
    async def test_count(self, repository: AsyncScalarValueRepository) -> None:
        assert await repository.count(True) == 2
        assert await repository.count(False) == 1

    @pytest.mark.asyncio
    async def test_get_max_key(self, repository: AsyncScalarValueRepository) -> None:
        for flags, expected in SEED_MAX_KEYS.items():
            actual = await repository.get_max_key(*flags)
            assert actual == expected, f"get_max_key{flags}: expected {expected}, got {actual}"

    # ==================== Argument checks ====================

    @pytest.mark.asyncio
    async def test_none_arguments_are_rejected(
        self, repository: AsyncScalarValueRepository
    ) -> None:
        with pytest.raises(InvalidArgumentError, match="key is None"):
            await repository.get_name(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="name is None"):
            await repository.get_key(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="is_employee is None"):
            await repository.count(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError, match="is_employee is None"):
            await repository.get_max_key(True, None)  # type: ignore[arg-type]
