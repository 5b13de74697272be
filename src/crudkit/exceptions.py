"""Exceptions raised by repositories and adapters."""


class RepositoryError(Exception):
    """Base exception for all repository-related errors."""


class InvalidArgumentError(RepositoryError, ValueError):
    """Raised when a required argument (model, update message, key) is None.

    Always raised before the backing store is touched.
    """

    def __init__(self, argument_name: str) -> None:
        self.argument_name = argument_name
        super().__init__(f"{argument_name} is None.")


class EntityModelError(RepositoryError):
    """Raised when the model of an entity does not match with the one instantiated."""


class DatabaseError(RepositoryError):
    """Base exception for all failures originating from the backing store."""


class EntityNotFoundError(DatabaseError):
    """Raised when a write targets a key that does not exist.

    Reads never raise it; they return None instead. Writes only raise it when the
    adapter declares ``MissingKeyPolicy.RAISE``.
    """

    def __init__(self, entity_type: str, entity_key: int) -> None:
        self.entity_type = entity_type
        self.entity_key = entity_key
        super().__init__(f"{entity_type} with key '{entity_key}' not found")


class EntityAlreadyExistsError(DatabaseError):
    """Raised when a write violates a unique constraint (key or unique column)."""

    def __init__(self, entity_type: str, value: str, column: str = "key") -> None:
        self.entity_type = entity_type
        self.value = value
        self.column = column
        super().__init__(f"{entity_type} with {column} '{value}' already exists")
