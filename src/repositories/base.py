"""
Repository base class

Shared plumbing for repositories: the session, the root relation, and
translation of driver errors into the persistence error taxonomy.
Repositories are the only layer the rest of the app talks to.
"""

from abc import ABC
from contextlib import asynccontextmanager
from typing import TypeVar, Generic, Optional, Any, Type, AsyncGenerator

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Base
from db.errors import (
    PersistenceError,
    NotFoundError,
    MultipleResultsError,
    ValidationFailure,
    StoreFailure,
)
from utils.logger import get_logger

logger = get_logger("OrmIntro")


T = TypeVar("T", bound=Base)


class BaseRepository(ABC, Generic[T]):
    """
    Repository base

    Usage:
        class ArticleRepository(BaseRepository[Article]):
            def __init__(self, session: AsyncSession):
                super().__init__(session, Article)
    """

    def __init__(self, session: AsyncSession, model_class: Type[T]):
        """
        Args:
            session: async session, one per unit of work
            model_class: root relation of this repository
        """
        self._session = session
        self._model_class = model_class

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def model_class(self) -> Type[T]:
        return self._model_class

    # ========================================
    # Row access
    # ========================================

    async def get_row(self, id: Any) -> Optional[T]:
        """
        Raw row by primary key

        Returns:
            the mapped row, None when missing
        """
        async with self._store_errors(f"get {self._model_class.__tablename__}"):
            return await self._session.get(self._model_class, id)

    async def count(self) -> int:
        async with self._store_errors(f"count {self._model_class.__tablename__}"):
            result = await self._session.execute(
                select(func.count()).select_from(self._model_class)
            )
            return result.scalar_one()

    async def exists(self, id: Any) -> bool:
        return await self.get_row(id) is not None

    async def _insert(self, row: T) -> T:
        """Insert, commit and reload a row (server defaults included)"""
        operation = f"insert into {self._model_class.__tablename__}"
        async with self._store_errors(operation):
            self._session.add(row)
            await self._session.flush()
            await self._session.refresh(row)
            await self._session.commit()
        return row

    # ========================================
    # Helpers
    # ========================================

    @asynccontextmanager
    async def _store_errors(self, operation: str) -> AsyncGenerator[None, None]:
        """
        Turn driver errors into StoreFailure, rolling the session back

        Raises:
            StoreFailure: wrapping the SQLAlchemyError
        """
        try:
            yield
        except SQLAlchemyError as e:
            logger.exception(f"{operation} failed: {e}")
            await self._session.rollback()
            raise StoreFailure(operation, e) from e


__all__ = [
    "BaseRepository",
    "PersistenceError",
    "NotFoundError",
    "MultipleResultsError",
    "ValidationFailure",
    "StoreFailure",
]
