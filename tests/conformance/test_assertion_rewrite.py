"""
The conformance suites are imported with pytest's assertion rewriting.

Rewritten modules carry the helpers pytest injects at import time; a suite
imported before registration would report bare AssertionErrors instead.
"""

import warnings
from types import ModuleType

import pytest

import crudkit.conformance
from crudkit.conformance import crud, partial_update, scalar_value, sorting


@pytest.mark.parametrize("module", [crud, partial_update, scalar_value, sorting])
def test_suite_module_is_rewritten(module: ModuleType) -> None:
    assert "@pytest_ar" in vars(module), f"{module.__name__} was imported without rewriting"


def test_registering_again_does_not_warn() -> None:
    """Registration happens before import, so pytest has nothing to warn about."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", pytest.PytestAssertRewriteWarning)
        pytest.register_assert_rewrite(crudkit.conformance.__name__)
