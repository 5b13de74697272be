"""Ordered registry of exception mapping strategies."""

import logging

from crudkit._internal.mapper import MappingStrategy
from crudkit.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """Registry of mapping strategies.

    Strategies are tried in registration order until one successfully
    maps the error.
    """

    def __init__(self) -> None:
        self._strategies: list[MappingStrategy] = []

    def register(self, strategy: MappingStrategy) -> None:
        """Register a new mapping strategy.

        Args:
            strategy: The strategy to register
        """
        self._strategies.append(strategy)

    def map(self, error: Exception, entity_type: str | None = None) -> DatabaseError:
        """Try to map the error using the registered strategies.

        Args:
            error: The backend exception
            entity_type: Optional entity type name

        Returns:
            The mapped repository exception. When no strategy can map the error,
            a generic DatabaseError describing it.
        """
        for strategy in self._strategies:
            if not strategy.can_handle(error):
                continue
            try:
                return strategy.map(error, entity_type)
            except Exception:  # noqa: BLE001
                logger.debug(
                    "Strategy %s declined to map %s, trying the next one.",
                    type(strategy).__name__,
                    type(error).__name__,
                    exc_info=True,
                )

        return DatabaseError(
            f"Database error during operation on {entity_type or 'unknown entity'}: {error}"
        )
