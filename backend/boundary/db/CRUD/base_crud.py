"""
Base CRUD operations for SQLAlchemy models.

Provides generic Create, Read and guarded Update operations that can be
inherited and extended by model-specific CRUD classes. There is no delete:
marketplace records are retained.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Provides standard database operations that work with any SQLAlchemy model.
    Subclasses should specify the model class and can override or extend
    these methods for model-specific behavior.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and timestamps
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: UUID primary key

        Returns:
            Model instance if found, None otherwise
        """
        stmt = (
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_where(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """
        Retrieve records matching all conditions, sorted and paginated.

        Args:
            session: Async database session
            *conditions: SQLAlchemy boolean expressions combined with AND
            order_by: Sort expressions, applied in order
            limit: Maximum number of records to return (None for all)
            offset: Number of records to skip

        Returns:
            Sequence of model instances
        """
        stmt = select(self.model).where(*conditions).order_by(*order_by).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_where(
        self,
        session: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> int:
        """
        Count records matching all conditions.

        Args:
            session: Async database session
            *conditions: SQLAlchemy boolean expressions combined with AND

        Returns:
            Number of matching rows
        """
        stmt = select(func.count()).select_from(self.model).where(*conditions)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def update_where(
        self,
        session: AsyncSession,
        id: UUID,
        *conditions: ColumnElement[bool],
        **values,
    ) -> ModelT | None:
        """
        Conditionally update a record in a single statement.

        Emits UPDATE ... WHERE id = :id AND <conditions> RETURNING *, so the
        guard and the write are atomic. Concurrent callers racing on the
        same guard see exactly one winner; the rest get None.

        Args:
            session: Async database session
            id: UUID primary key
            *conditions: Guards that must still hold at write time
            **values: Fields to update with new values

        Returns:
            Updated model instance if the row matched, None otherwise
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id, *conditions)
            .values(**values)
            .returning(self.model)
            .execution_options(populate_existing=True, synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
