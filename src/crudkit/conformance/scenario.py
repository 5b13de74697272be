"""Scenario factories: how a suite builds the models it hands to a repository.

Mutable models are default-constructed and populated field by field; immutable
models are built with every value at once. The CRUD suite runs unchanged
against either discipline by going through a factory.
"""

from abc import ABC, abstractmethod
from typing import Generic

from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.repository.protocols import M


class ScenarioFactory(ABC, Generic[M]):
    """Builds classification models for the conformance suites.

    Type Parameters:
        M: The classification model type under test.
    """

    #: True when update_with_values returns a new instance instead of mutating.
    immutable: bool = False

    def __init__(self, model_type: type[M]) -> None:
        self.model_type = model_type

    @abstractmethod
    def create_with_values(self, name: str, is_exempt: bool, is_employee: bool) -> M:
        """Build a model ready to be passed to ``create``. Its key is left at 0."""

    @abstractmethod
    def update_with_values(self, original: M, name: str, is_exempt: bool, is_employee: bool) -> M:
        """Build the model to pass to ``update`` so that it carries the given values.

        Args:
            original: The model as read back from the repository.
            name: The new classification name.
            is_exempt: The new exempt flag.
            is_employee: The new employee flag.

        Returns:
            A model with the original key and the new values.

        Raises:
            InvalidArgumentError: If original is None.
        """


class MutableScenario(ScenarioFactory[M]):
    """Default-constructs models and assigns their fields one by one."""

    @override
    def create_with_values(self, name: str, is_exempt: bool, is_employee: bool) -> M:
        model = self.model_type()
        model.employee_classification_name = name
        model.is_exempt = is_exempt
        model.is_employee = is_employee
        return model

    @override
    def update_with_values(self, original: M, name: str, is_exempt: bool, is_employee: bool) -> M:
        original = ensure_argument(original, "original")
        original.employee_classification_name = name
        original.is_exempt = is_exempt
        original.is_employee = is_employee
        return original


class ImmutableScenario(ScenarioFactory[M]):
    """Builds every model in one constructor call and never touches the original."""

    immutable = True

    @override
    def create_with_values(self, name: str, is_exempt: bool, is_employee: bool) -> M:
        return self.model_type(
            employee_classification_key=0,
            employee_classification_name=name,
            is_exempt=is_exempt,
            is_employee=is_employee,
        )

    @override
    def update_with_values(self, original: M, name: str, is_exempt: bool, is_employee: bool) -> M:
        original = ensure_argument(original, "original")
        return self.model_type(
            employee_classification_key=original.employee_classification_key,
            employee_classification_name=name,
            is_exempt=is_exempt,
            is_employee=is_employee,
        )
