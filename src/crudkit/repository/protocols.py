"""Repository contract definitions.

Every contract comes in a synchronous and an asynchronous form with identical
semantics. Implementations must reject a None model, message, key or batch with
InvalidArgumentError before reaching the backing store.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import Generic, Protocol, TypeVar

from crudkit.models.messages import PartialUpdateMessage


class ClassificationModel(Protocol):
    """Capabilities a model needs to take part in the classification contracts.

    Declared as read-only properties so that both mutable models and frozen
    value objects satisfy it.
    """

    @property
    def employee_classification_key(self) -> int: ...

    @property
    def employee_classification_name(self) -> str: ...

    @property
    def is_exempt(self) -> bool: ...

    @property
    def is_employee(self) -> bool: ...


class EmployeeModel(Protocol):
    """Capabilities a model needs to take part in the sorting contract."""

    @property
    def employee_key(self) -> int: ...

    @property
    def first_name(self) -> str: ...

    @property
    def middle_name(self) -> str | None: ...

    @property
    def last_name(self) -> str: ...

    @property
    def title(self) -> str | None: ...

    @property
    def office_phone(self) -> str | None: ...

    @property
    def cell_phone(self) -> str | None: ...

    @property
    def employee_classification_key(self) -> int: ...


M = TypeVar("M", bound=ClassificationModel)
E = TypeVar("E", bound=EmployeeModel)


class MissingKeyPolicy(Enum):
    """What a write does when its target key does not exist.

    Each adapter declares its policy; the conformance suites assert the declared
    behaviour rather than a fixed one.
    """

    IGNORE = "ignore"
    """Deleting or updating a missing key is a no-op."""

    RAISE = "raise"
    """Deleting or updating a missing key raises EntityNotFoundError."""


class CrudRepository(ABC, Generic[M]):
    """Abstract base class for CRUD operations on a single classification model.

    The same contract serves mutable and immutable models: only the way callers
    build the model passed to ``update`` differs.

    Type Parameters:
        M: The classification model type returned by reads.
    """

    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE

    @abstractmethod
    def create(self, model: M) -> int:
        """Insert a new row and return its store-generated key.

        Args:
            model: The model to insert. Its key is ignored.

        Returns:
            The newly generated key.

        Raises:
            InvalidArgumentError: If model is None.
            EntityAlreadyExistsError: If the classification name is already taken.
        """

    @abstractmethod
    def get_by_key(self, key: int) -> M | None:
        """Retrieve a row by key.

        Args:
            key: The key to look up.

        Returns:
            The model, or None if no row has this key.

        Raises:
            InvalidArgumentError: If key is None.
        """

    @abstractmethod
    def get_all(self) -> list[M]:
        """Retrieve every row, in no particular order."""

    @abstractmethod
    def find_by_name(self, name: str) -> M | None:
        """Retrieve a row by exact, case-sensitive classification name.

        Returns:
            The model, or None if no row has this name.
        """

    @abstractmethod
    def update(self, model: M) -> None:
        """Replace every field of the row identified by the model's key.

        Raises:
            InvalidArgumentError: If model is None.
            EntityNotFoundError: If the key does not exist and the policy is RAISE.
        """

    @abstractmethod
    def delete(self, model: M) -> None:
        """Delete the row identified by the model's key.

        Raises:
            InvalidArgumentError: If model is None.
            EntityNotFoundError: If the key does not exist and the policy is RAISE.
        """

    @abstractmethod
    def delete_by_key(self, key: int) -> None:
        """Delete the row identified by key.

        Raises:
            InvalidArgumentError: If key is None.
            EntityNotFoundError: If the key does not exist and the policy is RAISE.
        """


class AsyncCrudRepository(ABC, Generic[M]):
    """Asynchronous form of CrudRepository."""

    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE

    @abstractmethod
    async def create(self, model: M) -> int:
        """See CrudRepository.create."""

    @abstractmethod
    async def get_by_key(self, key: int) -> M | None:
        """See CrudRepository.get_by_key."""

    @abstractmethod
    async def get_all(self) -> list[M]:
        """See CrudRepository.get_all."""

    @abstractmethod
    async def find_by_name(self, name: str) -> M | None:
        """See CrudRepository.find_by_name."""

    @abstractmethod
    async def update(self, model: M) -> None:
        """See CrudRepository.update."""

    @abstractmethod
    async def delete(self, model: M) -> None:
        """See CrudRepository.delete."""

    @abstractmethod
    async def delete_by_key(self, key: int) -> None:
        """See CrudRepository.delete_by_key."""


class PartialUpdateRepository(ABC, Generic[M]):
    """Abstract base class for field-scoped updates on classifications.

    Type Parameters:
        M: The classification model type returned by reads.
    """

    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE

    @abstractmethod
    def create(self, model: M) -> int:
        """Insert a new row and return its store-generated key."""

    @abstractmethod
    def get_by_key(self, key: int) -> M | None:
        """Retrieve a row by key, or None."""

    @abstractmethod
    def update(self, message: PartialUpdateMessage) -> None:
        """Apply the fields named by the message, leaving every other field as is.

        A message naming no fields writes nothing and does not look up its key.

        Args:
            message: Any partial-update message shape.

        Raises:
            InvalidArgumentError: If message is None.
            EntityNotFoundError: If the key does not exist and the policy is RAISE.
        """

    @abstractmethod
    def update_flags(self, key: int, is_exempt: bool, is_employee: bool) -> None:
        """Set both flags of the row identified by key, leaving its name as is.

        Raises:
            InvalidArgumentError: If key or either flag is None.
            EntityNotFoundError: If the key does not exist and the policy is RAISE.
        """


class AsyncPartialUpdateRepository(ABC, Generic[M]):
    """Asynchronous form of PartialUpdateRepository."""

    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE

    @abstractmethod
    async def create(self, model: M) -> int:
        """See PartialUpdateRepository.create."""

    @abstractmethod
    async def get_by_key(self, key: int) -> M | None:
        """See PartialUpdateRepository.get_by_key."""

    @abstractmethod
    async def update(self, message: PartialUpdateMessage) -> None:
        """See PartialUpdateRepository.update."""

    @abstractmethod
    async def update_flags(self, key: int, is_exempt: bool, is_employee: bool) -> None:
        """See PartialUpdateRepository.update_flags."""


class SortingRepository(ABC, Generic[E]):
    """Abstract base class for sorted reads on employees.

    All sorts filter on an exact last name, treat None as the lowest value and
    break ties by employee key ascending.

    Type Parameters:
        E: The employee model type.
    """

    @abstractmethod
    def insert_batch(self, employees: Sequence[E]) -> None:
        """Insert every employee of the batch.

        Raises:
            InvalidArgumentError: If employees is None.
        """

    @abstractmethod
    def sort_by_first_name(self, last_name: str) -> list[E]:
        """Employees with this last name, ordered by first name."""

    @abstractmethod
    def sort_by_middle_name_first_name(self, last_name: str) -> list[E]:
        """Employees with this last name, ordered by middle name then first name."""

    @abstractmethod
    def sort_by_middle_name_desc_first_name(self, last_name: str) -> list[E]:
        """Employees with this last name, ordered by middle name descending then first name."""


class AsyncSortingRepository(ABC, Generic[E]):
    """Asynchronous form of SortingRepository."""

    @abstractmethod
    async def insert_batch(self, employees: Sequence[E]) -> None:
        """See SortingRepository.insert_batch."""

    @abstractmethod
    async def sort_by_first_name(self, last_name: str) -> list[E]:
        """See SortingRepository.sort_by_first_name."""

    @abstractmethod
    async def sort_by_middle_name_first_name(self, last_name: str) -> list[E]:
        """See SortingRepository.sort_by_middle_name_first_name."""

    @abstractmethod
    async def sort_by_middle_name_desc_first_name(self, last_name: str) -> list[E]:
        """See SortingRepository.sort_by_middle_name_desc_first_name."""


class ScalarValueRepository(ABC):
    """Abstract base class for reads returning a single value instead of a model.

    Every read targets the employee classification table. A lookup that matches
    no row, and an aggregate over no rows, returns None rather than raising.
    """

    @abstractmethod
    def get_name(self, key: int) -> str | None:
        """Return the classification name stored under key.

        Raises:
            InvalidArgumentError: If key is None.
        """

    @abstractmethod
    def get_key(self, name: str) -> int | None:
        """Return the key of the classification with this exact name.

        Raises:
            InvalidArgumentError: If name is None.
        """

    @abstractmethod
    def count(self, is_employee: bool) -> int:
        """Count classifications by their employee flag. Zero when none match.

        Raises:
            InvalidArgumentError: If is_employee is None.
        """

    @abstractmethod
    def get_max_key(self, is_exempt: bool, is_employee: bool) -> int | None:
        """Return the highest key among classifications carrying both flags.

        Raises:
            InvalidArgumentError: If either flag is None.
        """


class AsyncScalarValueRepository(ABC):
    """Asynchronous form of ScalarValueRepository."""

    @abstractmethod
    async def get_name(self, key: int) -> str | None:
        """See ScalarValueRepository.get_name."""

    @abstractmethod
    async def get_key(self, name: str) -> int | None:
        """See ScalarValueRepository.get_key."""

    @abstractmethod
    async def count(self, is_employee: bool) -> int:
        """See ScalarValueRepository.count."""

    @abstractmethod
    async def get_max_key(self, is_exempt: bool, is_employee: bool) -> int | None:
        """See ScalarValueRepository.get_max_key."""
