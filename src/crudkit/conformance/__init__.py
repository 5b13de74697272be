"""Conformance suites certifying repository implementations.

Each suite is an abstract pytest class: subclass it in a test module, name the
subclass ``Test...`` and provide the fixtures it declares.

The suites report failures through plain asserts. For pytest to explain them,
register the package for assertion rewriting in a ``conftest.py`` that
runs before anything imports it::

    pytest.register_assert_rewrite("crudkit.conformance")
"""

from crudkit.conformance.crud import AsyncCrudContractTests, CrudContractTests
from crudkit.conformance.partial_update import (
    AsyncPartialUpdateContractTests,
    PartialUpdateContractTests,
)
from crudkit.conformance.scalar_value import (
    AsyncScalarValueContractTests,
    ScalarValueContractTests,
)
from crudkit.conformance.scenario import (
    ImmutableScenario,
    MutableScenario,
    ScenarioFactory,
)
from crudkit.conformance.sorting import (
    AsyncSortingContractTests,
    SortingContractTests,
)

__all__ = [
    "AsyncCrudContractTests",
    "AsyncPartialUpdateContractTests",
    "AsyncScalarValueContractTests",
    "AsyncSortingContractTests",
    "CrudContractTests",
    "ImmutableScenario",
    "MutableScenario",
    "PartialUpdateContractTests",
    "ScalarValueContractTests",
    "ScenarioFactory",
    "SortingContractTests",
]
