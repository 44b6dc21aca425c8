"""
Article Repository

Queries return Article structs with their categories aggregated in;
mutations validate attributes before writing a single row.
"""

from typing import Any, Dict, List, Mapping, Sequence, Tuple

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db import models
from db.relations import get_relation, resolve_join
from entities import Article, ArticleAttributes, ArticleChanges, build
from repositories.base import (
    BaseRepository,
    NotFoundError,
    MultipleResultsError,
)
from utils.logger import get_logger

logger = get_logger("OrmIntro")


class ArticleRepository(BaseRepository[models.Article]):
    """
    Article Repository

    - find_by_id / list_published / list_all: aggregated reads
    - create / update_by_id: validated single-row writes
    - add_category: membership edge writes for the article aggregate
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, models.Article)

    # ========================================
    # Queries
    # ========================================

    async def find_by_id(self, id: int) -> Article:
        """
        Article with its categories

        Raises:
            NotFoundError: no article has this id
            MultipleResultsError: more than one article matched
        """
        logger.debug(f"find article {id}")
        articles = await self._aggregate(models.Article.by_id(id, self._aggregate_query()))

        if not articles:
            raise NotFoundError("Article", id)
        if len(articles) > 1:
            raise MultipleResultsError("Article", id, len(articles))
        return articles[0]

    async def list_published(self) -> List[Article]:
        """Published articles, each with its categories"""
        logger.debug("list published articles")
        return await self._aggregate(models.Article.published_only(self._aggregate_query()))

    async def list_all(self) -> List[Article]:
        return await self._aggregate(self._aggregate_query())

    # ========================================
    # Commands
    # ========================================

    async def create(self, attributes: Mapping[str, Any]) -> Article:
        """
        Insert a new article

        Args:
            attributes: title (required) and published (default False)

        Returns:
            the created article, with no categories yet

        Raises:
            ValidationFailure: unknown, missing or mistyped attributes
        """
        values = build(ArticleAttributes, attributes).unwrap()

        row = await self._insert(models.Article(**values.model_dump()))
        logger.info(f"Created article {row.id}: {row.title!r}")

        return self._to_struct(row, ())

    async def update_by_id(self, id: int, attributes: Mapping[str, Any]) -> Article:
        """
        Update the one article with this id

        Args:
            id: article id
            attributes: any of title / published

        Returns:
            the updated article with its categories

        Raises:
            ValidationFailure: unknown or mistyped attributes, or none given
            NotFoundError: no article has this id; nothing is written
        """
        changes = build(ArticleChanges, attributes).unwrap()

        async with self._store_errors("update articles"):
            result = await self._session.execute(
                update(models.Article)
                .where(models.Article.id == id)
                .values(**changes.values())
            )
            if result.rowcount == 0:
                await self._session.rollback()
                raise NotFoundError("Article", id)
            await self._session.commit()

        logger.info(f"Updated article {id}: {sorted(changes.values())}")
        return await self.find_by_id(id)

    async def add_category(self, article_id: int, category_id: int) -> Article:
        """
        Link an existing category to an existing article

        Returns:
            the article with its categories after the link

        Raises:
            NotFoundError: article or category missing
        """
        path = resolve_join("articles", "categories")
        target = get_relation(path.target).model
        through = get_relation(path.through).model

        async with self._store_errors(f"insert into {path.through}"):
            if await self._session.get(models.Article, article_id) is None:
                raise NotFoundError("Article", article_id)
            if await self._session.get(target, category_id) is None:
                raise NotFoundError("Category", category_id)

            self._session.add(through(**{
                path.source_key: article_id,
                path.target_key: category_id,
            }))
            await self._session.flush()
            await self._session.commit()

        logger.info(f"Linked article {article_id} to category {category_id}")
        return await self.find_by_id(article_id)

    # ========================================
    # Aggregation
    # ========================================

    def _aggregate_query(self) -> Select:
        """Articles left-joined through the join relation to their categories"""
        path = resolve_join("articles", "categories")
        through = get_relation(path.through).model
        target = get_relation(path.target).model

        return (
            select(models.Article, target)
            .outerjoin(through, getattr(through, path.source_key) == models.Article.id)
            .outerjoin(target, target.id == getattr(through, path.target_key))
            .order_by(models.Article.id, through.id)
            .execution_options(populate_existing=True)
        )

    async def _aggregate(self, query: Select) -> List[Article]:
        """
        Run an aggregate query and group rows by article

        A joined read yields one row per (article, category) pair; each
        article is built once with all of its categories collected.
        """
        async with self._store_errors("select articles"):
            result = await self._session.execute(query)
            rows = result.all()

        grouped: Dict[int, Tuple[models.Article, List[Any]]] = {}
        for article_row, category_row in rows:
            if article_row.id not in grouped:
                grouped[article_row.id] = (article_row, [])
            if category_row is not None:
                grouped[article_row.id][1].append(category_row)

        return [
            self._to_struct(article_row, category_rows)
            for article_row, category_rows in grouped.values()
        ]

    def _to_struct(self, row: models.Article, category_rows: Sequence[Any]) -> Article:
        return build(Article, {
            "id": row.id,
            "title": row.title,
            "published": row.published,
            "categories": tuple(
                {"id": category.id, "name": category.name}
                for category in category_rows
            ),
        }).unwrap()
