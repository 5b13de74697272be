"""Base interfaces for backend exception mapping."""

from abc import ABC, abstractmethod

from crudkit.exceptions import DatabaseError


class MappingStrategy(ABC):
    """Strategy for mapping one kind of backend error.

    Each strategy recognises a single failure family (e.g. unique violation)
    and converts it to the matching repository exception.
    """

    @abstractmethod
    def can_handle(self, error: Exception) -> bool:
        """Check if this strategy can handle the given error.

        Args:
            error: The backend exception to check

        Returns:
            True if this strategy can handle the error, False otherwise
        """

    @abstractmethod
    def map(self, error: Exception, entity_type: str | None) -> DatabaseError:
        """Map the error to a repository exception.

        Args:
            error: The backend exception
            entity_type: Optional entity type name for error messages

        Returns:
            The mapped repository exception

        Raises:
            The original exception if it turns out not to be mappable
        """


class ExceptionMapper(ABC):
    """Base interface for exception mappers.

    Each storage technology provides its own mapper with its own set of
    mapping strategies.
    """

    @abstractmethod
    def map(self, error: Exception, entity_type: str | None = None) -> DatabaseError:
        """Map a backend exception to a repository exception.

        Args:
            error: The backend exception (e.g., SQLAlchemy IntegrityError)
            entity_type: Optional entity type name for better error messages

        Returns:
            A repository exception. Callers raise it ``from`` the original error.
        """
