"""
Conformance suite for the partial-update contracts.

A concrete test class inherits from PartialUpdateContractTests (or
AsyncPartialUpdateContractTests) and provides a repository fixture. The
classification fixture builds the rows to patch; override it when the
repository was built for another model type.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic

import pytest

from crudkit.conformance.crud import unique_name
from crudkit.exceptions import EntityNotFoundError, InvalidArgumentError
from crudkit.models import (
    EmployeeClassification,
    EmployeeClassificationFlagsUpdater,
    EmployeeClassificationNameUpdater,
    PartialUpdateMessage,
)
from crudkit.repository.protocols import (
    AsyncPartialUpdateRepository,
    M,
    MissingKeyPolicy,
    PartialUpdateRepository,
)

ClassificationFactory = Callable[[str, bool, bool], M]


class _ClassificationFixture(Generic[M]):
    @pytest.fixture
    def classification(self) -> ClassificationFactory[M]:
        """Return a callable building a classification from (name, is_exempt, is_employee)."""

        def _build(name: str, is_exempt: bool, is_employee: bool) -> M:
            return EmployeeClassification(
                employee_classification_name=name, is_exempt=is_exempt, is_employee=is_employee
            )  # type: ignore[return-value]

        return _build


class PartialUpdateContractTests(_ClassificationFixture[M], ABC):
    """
    Abstract base class defining the partial-update contract tests.

    Subclasses must implement:
    - repository: a PartialUpdateRepository over a seeded store
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> PartialUpdateRepository[M]:
        """Return a repository over a store holding the seed classifications."""

    # ==================== Contract Tests: update ====================

    def test_name_update_leaves_flags(
        self, repository: PartialUpdateRepository[M], classification: ClassificationFactory[M]
    ) -> None:
        """A name-only message changes the name and nothing else."""
        key = repository.create(classification(unique_name(), True, False))
        new_name = unique_name("Updated")

        repository.update(
            EmployeeClassificationNameUpdater(
                employee_classification_key=key, employee_classification_name=new_name
            )
        )

        updated = repository.get_by_key(key)
        assert updated is not None, "get_by_key: patched row not found"
        assert updated.employee_classification_name == new_name
        assert updated.is_exempt is True, "name update changed is_exempt"
        assert updated.is_employee is False, "name update changed is_employee"

    def test_flags_update_leaves_name(
        self, repository: PartialUpdateRepository[M], classification: ClassificationFactory[M]
    ) -> None:
        """A flags-only message changes both flags and leaves the name."""
        name = unique_name()
        key = repository.create(classification(name, True, False))

        repository.update(
            EmployeeClassificationFlagsUpdater(
                employee_classification_key=key, is_exempt=False, is_employee=True
            )
        )

        updated = repository.get_by_key(key)
        assert updated is not None, "get_by_key: patched row not found"
        assert updated.employee_classification_name == name, "flags update changed the name"
        assert updated.is_exempt is False
        assert updated.is_employee is True

    def test_update_flags_leaves_name(
        self, repository: PartialUpdateRepository[M], classification: ClassificationFactory[M]
    ) -> None:
        name = unique_name()
        key = repository.create(classification(name, False, False))

        repository.update_flags(key, True, True)

        updated = repository.get_by_key(key)
        assert updated is not None, "get_by_key: patched row not found"
        assert updated.employee_classification_name == name, "update_flags changed the name"
        assert (updated.is_exempt, updated.is_employee) == (True, True)

    def test_update_missing_key_follows_policy(
        self, repository: PartialUpdateRepository[M]
    ) -> None:
        """Patching a key that does not exist is a no-op or raises, as the adapter declares."""
        # seed keys stop at 3 and generated keys start at 1000
        message = EmployeeClassificationFlagsUpdater(
            employee_classification_key=999, is_exempt=True, is_employee=True
        )

        if repository.missing_key_policy is MissingKeyPolicy.RAISE:
            with pytest.raises(EntityNotFoundError):
                repository.update(message)
        else:
            repository.update(message)
            assert repository.get_by_key(999) is None, "update created a row"

    def test_empty_message_writes_nothing(
        self, repository: PartialUpdateRepository[M], classification: ClassificationFactory[M]
    ) -> None:
        """A message naming no fields is a no-op on every backend, even for a missing key."""
        name = unique_name()
        key = repository.create(classification(name, True, False))

        repository.update(PartialUpdateMessage(employee_classification_key=key))
        repository.update(PartialUpdateMessage(employee_classification_key=999))

        unchanged = repository.get_by_key(key)
        assert unchanged is not None, "get_by_key: row not found"
        assert unchanged.employee_classification_name == name
        assert (unchanged.is_exempt, unchanged.is_employee) == (True, False)
        assert repository.get_by_key(999) is None, "empty message created a row"

    # ==================== Argument checks ====================

    def test_create_none_is_rejected(self, repository: PartialUpdateRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.create(None)  # type: ignore[arg-type]

    def test_update_none_is_rejected(self, repository: PartialUpdateRepository[M]) -> None:
        with pytest.raises(InvalidArgumentError):
            repository.update(None)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "arguments", [(None, True, True), (1, None, True), (1, True, None)]
    )
    def test_update_flags_none_is_rejected(
        self, repository: PartialUpdateRepository[M], arguments: tuple
    ) -> None:
        with pytest.raises(InvalidArgumentError, match="is None"):
            repository.update_flags(*arguments)


class AsyncPartialUpdateContractTests(_ClassificationFixture[M], ABC):
    """
    Abstract base class defining the asynchronous partial-update contract tests.

    Subclasses must implement:
    - repository: an AsyncPartialUpdateRepository over a seeded store
    """

    # ==================== Abstract Fixtures ====================

    @pytest.fixture
    @abstractmethod
    def repository(self) -> AsyncPartialUpdateRepository[M]:
        """Return a repository over a store holding the seed classifications."""

    # ==================== Contract Tests: update ====================

    @pytest.mark.asyncio
    async def test_name_update_leaves_flags(
        self,
        repository: AsyncPartialUpdateRepository[M],
        classification: ClassificationFactory[M],
    ) -> None:
        key = await repository.create(classification(unique_name(), True, False))
        new_name = unique_name("Updated")

        await repository.update(
            EmployeeClassificationNameUpdater(
                employee_classification_key=key, employee_classification_name=new_name
            )
        )

        updated = await repository.get_by_key(key)
        assert updated is not None, "get_by_key: patched row not found"
        assert updated.employee_classification_name == new_name
        assert (updated.is_exempt, updated.is_employee) == (True, False), (
            "name update changed the flags"
        )

    @pytest.mark.asyncio
    async def test_flags_update_leaves_name(
        self,
        repository: AsyncPartialUpdateRepository[M],
        classification: ClassificationFactory[M],
    ) -> None:
        name = unique_name()
        key = await repository.create(classification(name, True, False))

        await repository.update(
            EmployeeClassificationFlagsUpdater(
                employee_classification_key=key, is_exempt=False, is_employee=True
            )
        )

        updated = await repository.get_by_key(key)
        assert updated is not None, "get_by_key: patched row not found"
        assert updated.employee_classification_name == name, "flags update changed the name"
        assert (updated.is_exempt, updated.is_employee) == (False, True)

    @pytest.mark.asyncio
    async def test_update_flags_leaves_name(
        self,
        repository: AsyncPartialUpdateRepository[M],
        classification: ClassificationFactory[M],
    ) -> None:
        name = unique_name()
        key = await repository.create(classification(name, False, False))

        await repository.update_flags(key, True, True)

        updated = await repository.get_by_key(key)
        assert updated is not None, "get_by_key: patched row not found"
        assert updated.employee_classification_name == name, "update_flags changed the name"
        assert (updated.is_exempt, updated.is_employee) == (True, True)

    @pytest.mark.asyncio
    async def test_update_missing_key_follows_policy(
        self, repository: AsyncPartialUpdateRepository[M]
    ) -> None:
        message = EmployeeClassificationFlagsUpdater(
            employee_classification_key=999, is_exempt=True, is_employee=True
        )

        if repository.missing_key_policy is MissingKeyPolicy.RAISE:
            with pytest.raises(EntityNotFoundError):
                await repository.update(message)
        else:
            await repository.update(message)
            assert await repository.get_by_key(999) is None, "update created a row"

    @pytest.mark.asyncio
    async def test_empty_message_writes_nothing(
        self,
        repository: AsyncPartialUpdateRepository[M],
        classification: ClassificationFactory[M],
    ) -> None:
        name = unique_name()
        key = await repository.create(classification(name, True, False))

        await repository.update(PartialUpdateMessage(employee_classification_key=key))
        await repository.update(PartialUpdateMessage(employee_classification_key=999))

        unchanged = await repository.get_by_key(key)
        assert unchanged is not None, "get_by_key: row not found"
        assert unchanged.employee_classification_name == name
        assert (unchanged.is_exempt, unchanged.is_employee) == (True, False)
        assert await repository.get_by_key(999) is None, "empty message created a row"

    # ==================== Argument checks ====================

    @pytest.mark.asyncio
    async def test_create_none_is_rejected(
        self, repository: AsyncPartialUpdateRepository[M]
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.create(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_update_none_is_rejected(
        self, repository: AsyncPartialUpdateRepository[M]
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await repository.update(None)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "arguments", [(None, True, True), (1, None, True), (1, True, None)]
    )
    async def test_update_flags_none_is_rejected(
        self, repository: AsyncPartialUpdateRepository[M], arguments: tuple
    ) -> None:
        with pytest.raises(InvalidArgumentError, match="is None"):
            await repository.update_flags(*arguments)
