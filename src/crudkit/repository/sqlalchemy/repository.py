"""SQLAlchemy implementation of the classification CRUD contracts."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic

from sqlalchemy import Delete, Select, Update, delete, select, update
from typing_extensions import override

from crudkit._internal.arguments import ensure_argument
from crudkit.exceptions import EntityNotFoundError
from crudkit.repository.protocols import (
    AsyncCrudRepository,
    CrudRepository,
    M,
    MissingKeyPolicy,
)
from crudkit.repository.rows import classification_to_row, row_to_model
from crudkit.repository.sqlalchemy.commit_manager import (
    AsyncSqlAlchemyCommitManager,
    SqlAlchemyCommitManager,
)
from crudkit.repository.sqlalchemy.mapper import SqlAlchemyExceptionMapper
from crudkit.repository.sqlalchemy.schema import EmployeeClassificationRecord

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
    from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)

Record = EmployeeClassificationRecord


def select_by_name(name: str) -> Select[tuple[EmployeeClassificationRecord]]:
    return select(Record).where(Record.employee_classification_name == name)


def update_by_key(key: int, values: dict[str, Any]) -> Update:
    return (
        update(Record)
        .where(Record.employee_classification_key == key)
        .values(**values)
        .execution_options(synchronize_session=False)
    )


def delete_by_key(key: int) -> Delete:
    return (
        delete(Record)
        .where(Record.employee_classification_key == key)
        .execution_options(synchronize_session=False)
    )


class _ClassificationsBase(Generic[M]):
    """State and helpers shared by the sync and async SQLAlchemy adapters.

    Attributes:
        model_type: The pydantic model class returned by reads.
        missing_key_policy: What writes do when their key does not exist.
    """

    def __init__(self, model_type: type[M], missing_key_policy: MissingKeyPolicy) -> None:
        self.model_type = model_type
        self.missing_key_policy = missing_key_policy
        self._exception_mapper = SqlAlchemyExceptionMapper()

    def _to_model(self, record: EmployeeClassificationRecord | None) -> M | None:
        return None if record is None else row_to_model(self.model_type, record)

    def _check_rowcount(self, rowcount: int, key: int) -> None:
        """Apply the missing-key policy to a write that matched no row."""
        if rowcount:
            logger.debug("Wrote %s with key %s", self.model_type.__name__, key)
            return
        if self.missing_key_policy is MissingKeyPolicy.RAISE:
            raise EntityNotFoundError(entity_type=self.model_type.__name__, entity_key=key)
        logger.debug("No %s with key %s, nothing written", self.model_type.__name__, key)


class SqlAlchemyClassifications(_ClassificationsBase[M]):
    """Synchronous classification access over an injected session factory.

    Each call opens its own session and transaction; nothing is cached between
    calls.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        model_type: type[M],
        *,
        missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE,
    ) -> None:
        """Initialize the repository.

        Args:
            session_factory: Factory for the sessions each call opens.
            model_type: The pydantic model class returned by reads.
            missing_key_policy: What writes do when their key does not exist.
        """
        super().__init__(model_type, missing_key_policy)
        self.session_factory = session_factory
        self._commits = SqlAlchemyCommitManager(
            session_factory, self._exception_mapper, model_type.__name__
        )

    def _create(self, model: M) -> int:
        model = ensure_argument(model, "model")
        record = Record(**classification_to_row(model))
        with self._commits.transaction() as session:
            session.add(record)
            session.flush()
            key = record.employee_classification_key
        logger.debug("Created %s with key %s", self.model_type.__name__, key)
        return key

    def _get_by_key(self, key: int) -> M | None:
        key = ensure_argument(key, "key")
        with self._commits.transaction() as session:
            return self._to_model(session.get(Record, key))

    def _patch(self, key: int, values: dict[str, Any]) -> None:
        with self._commits.transaction() as session:
            result = session.execute(update_by_key(key, values))
            self._check_rowcount(result.rowcount, key)


class SqlAlchemyCrud(SqlAlchemyClassifications[M], CrudRepository[M]):
    """SQLAlchemy implementation of CrudRepository.

    Example:
        engine = create_engine("sqlite:///hr.db")
        create_schema(engine)
        repo = SqlAlchemyCrud(sessionmaker(engine), EmployeeClassification)
    """

    @override
    def create(self, model: M) -> int:
        return self._create(model)

    @override
    def get_by_key(self, key: int) -> M | None:
        return self._get_by_key(key)

    @override
    def get_all(self) -> list[M]:
        with self._commits.transaction() as session:
            records = session.scalars(select(Record))
            return [row_to_model(self.model_type, record) for record in records]

    @override
    def find_by_name(self, name: str) -> M | None:
        name = ensure_argument(name, "name")
        with self._commits.transaction() as session:
            return self._to_model(session.scalars(select_by_name(name)).one_or_none())

    @override
    def update(self, model: M) -> None:
        model = ensure_argument(model, "model")
        self._patch(model.employee_classification_key, classification_to_row(model))

    @override
    def delete(self, model: M) -> None:
        model = ensure_argument(model, "model")
        self.delete_by_key(model.employee_classification_key)

    @override
    def delete_by_key(self, key: int) -> None:
        key = ensure_argument(key, "key")
        with self._commits.transaction() as session:
            result = session.execute(delete_by_key(key))
            self._check_rowcount(result.rowcount, key)


class AsyncSqlAlchemyClassifications(_ClassificationsBase[M]):
    """Asynchronous classification access over an injected async session factory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model_type: type[M],
        *,
        missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.IGNORE,
    ) -> None:
        super().__init__(model_type, missing_key_policy)
        self.session_factory = session_factory
        self._commits = AsyncSqlAlchemyCommitManager(
            session_factory, self._exception_mapper, model_type.__name__
        )

    async def _create(self, model: M) -> int:
        model = ensure_argument(model, "model")
        record = Record(**classification_to_row(model))
        async with self._commits.transaction() as session:
            session.add(record)
            await session.flush()
            key = record.employee_classification_key
        logger.debug("Created %s with key %s", self.model_type.__name__, key)
        return key

    async def _get_by_key(self, key: int) -> M | None:
        key = ensure_argument(key, "key")
        async with self._commits.transaction() as session:
            return self._to_model(await session.get(Record, key))

    async def _patch(self, key: int, values: dict[str, Any]) -> None:
        async with self._commits.transaction() as session:
            result = await session.execute(update_by_key(key, values))
            self._check_rowcount(result.rowcount, key)


class SqlAlchemyAsyncCrud(AsyncSqlAlchemyClassifications[M], AsyncCrudRepository[M]):
    """SQLAlchemy implementation of AsyncCrudRepository."""

    @override
    async def create(self, model: M) -> int:
        return await self._create(model)

    @override
    async def get_by_key(self, key: int) -> M | None:
        return await self._get_by_key(key)

    @override
    async def get_all(self) -> list[M]:
        async with self._commits.transaction() as session:
            records = await session.scalars(select(Record))
            return [row_to_model(self.model_type, record) for record in records]

    @override
    async def find_by_name(self, name: str) -> M | None:
        name = ensure_argument(name, "name")
        async with self._commits.transaction() as session:
            records = await session.scalars(select_by_name(name))
            return self._to_model(records.one_or_none())

    @override
    async def update(self, model: M) -> None:
        model = ensure_argument(model, "model")
        await self._patch(model.employee_classification_key, classification_to_row(model))

    @override
    async def delete(self, model: M) -> None:
        model = ensure_argument(model, "model")
        await self.delete_by_key(model.employee_classification_key)

    @override
    async def delete_by_key(self, key: int) -> None:
        key = ensure_argument(key, "key")
        async with self._commits.transaction() as session:
            result = await session.execute(delete_by_key(key))
            self._check_rowcount(result.rowcount, key)
