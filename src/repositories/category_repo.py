"""
Category Repository

Plain create / read access to categories.
"""

from typing import Any, List, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import models
from entities import Category, CategoryAttributes, build
from repositories.base import BaseRepository, NotFoundError, MultipleResultsError
from utils.logger import get_logger

logger = get_logger("OrmIntro")


class CategoryRepository(BaseRepository[models.Category]):
    """Category Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, models.Category)

    async def find_by_id(self, id: int) -> Category:
        """
        Raises:
            NotFoundError: no category has this id
            MultipleResultsError: more than one category matched
        """
        async with self._store_errors("select categories"):
            result = await self._session.execute(
                select(models.Category).where(models.Category.id == id)
            )
            rows = list(result.scalars().all())

        if not rows:
            raise NotFoundError("Category", id)
        if len(rows) > 1:
            raise MultipleResultsError("Category", id, len(rows))
        return self._to_struct(rows[0])

    async def list_all(self) -> List[Category]:
        async with self._store_errors("select categories"):
            result = await self._session.execute(
                select(models.Category).order_by(models.Category.id)
            )
            return [self._to_struct(row) for row in result.scalars().all()]

    async def create(self, attributes: Mapping[str, Any]) -> Category:
        """
        Insert a new category

        Raises:
            ValidationFailure: name missing, empty or not a string
        """
        values = build(CategoryAttributes, attributes).unwrap()

        row = await self._insert(models.Category(**values.model_dump()))
        logger.info(f"Created category {row.id}: {row.name!r}")

        return self._to_struct(row)

    def _to_struct(self, row: models.Category) -> Category:
        return build(Category, {"id": row.id, "name": row.name}).unwrap()
