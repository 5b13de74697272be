"""SQLAlchemy transaction scopes with error mapping."""

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, sessionmaker

from crudkit._internal.mapper import ExceptionMapper


class SqlAlchemyCommitManager:
    """Runs one repository call inside one transaction, mapping backend errors.

    The session is opened from the injected factory, committed when the block
    exits normally, rolled back otherwise, and always closed. SQLAlchemy errors
    leave as repository exceptions chained to the original; every other
    exception passes through untouched.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        exception_mapper: ExceptionMapper,
        entity_type: str,
    ) -> None:
        """Initialize the commit manager.

        Args:
            session_factory: SQLAlchemy session factory
            exception_mapper: Mapper for converting SQLAlchemy exceptions to repository exceptions
            entity_type: Type of entity for error messages (e.g., "EmployeeClassification")
        """
        self._session_factory = session_factory
        self._exception_mapper = exception_mapper
        self._entity_type = entity_type

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Open a session and a transaction for the duration of the block.

        Raises:
            DatabaseError: If SQLAlchemy fails (mapped from the original exception)
        """
        try:
            with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as e:
            raise self._exception_mapper.map(error=e, entity_type=self._entity_type) from e


class AsyncSqlAlchemyCommitManager:
    """Asynchronous form of SqlAlchemyCommitManager."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        exception_mapper: ExceptionMapper,
        entity_type: str,
    ) -> None:
        self._session_factory = session_factory
        self._exception_mapper = exception_mapper
        self._entity_type = entity_type

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Open an async session and a transaction for the duration of the block.

        Raises:
            DatabaseError: If SQLAlchemy fails (mapped from the original exception)
        """
        try:
            async with self._session_factory.begin() as session:
                yield session
        except SQLAlchemyError as e:
            raise self._exception_mapper.map(error=e, entity_type=self._entity_type) from e
