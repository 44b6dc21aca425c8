"""
Relation layer tests: static registry validation and filter methods.
"""

import pytest
from sqlalchemy import MetaData, select

from db import relations
from db.models import Base, Article, Category, ArticleCategory
from db.relations import (
    JoinPath,
    RelationConfig,
    RelationConfigError,
    resolve_join,
    validate_relations,
)


class TestRegistry:

    def test_registry_matches_models(self):
        validate_relations(Base.metadata)

    def test_every_table_registered(self):
        assert set(relations.RELATIONS) == set(Base.metadata.tables)

    def test_resolve_join(self):
        path = resolve_join("articles", "categories")
        assert path.through == "articles_categories"
        assert path.source_key == "article_id"
        assert path.target_key == "category_id"

    def test_resolve_join_undeclared(self):
        with pytest.raises(RelationConfigError):
            resolve_join("categories", "articles")

    def test_missing_table(self):
        with pytest.raises(RelationConfigError, match="has no table"):
            validate_relations(MetaData())

    def test_column_mismatch(self, monkeypatch):
        monkeypatch.setitem(
            relations.RELATIONS,
            "categories",
            RelationConfig(name="categories", model=Category, columns=("id", "name", "slug")),
        )
        with pytest.raises(RelationConfigError, match="columns mismatch"):
            validate_relations(Base.metadata)

    def test_wrong_foreign_key_target(self, monkeypatch):
        monkeypatch.setitem(
            relations.RELATIONS,
            "articles_categories",
            RelationConfig(
                name="articles_categories",
                model=ArticleCategory,
                columns=("id", "article_id", "category_id"),
                foreign_keys={"article_id": "categories", "category_id": "categories"},
            ),
        )
        with pytest.raises(RelationConfigError, match="does not reference"):
            validate_relations(Base.metadata)

    def test_association_with_swapped_keys(self, monkeypatch):
        monkeypatch.setitem(
            relations.ASSOCIATIONS,
            ("articles", "categories"),
            JoinPath(
                source="articles",
                target="categories",
                through="articles_categories",
                source_key="category_id",
                target_key="article_id",
            ),
        )
        with pytest.raises(RelationConfigError, match="is not a foreign key"):
            validate_relations(Base.metadata)


class TestFilters:

    async def _seed(self, db_session):
        db_session.add_all([
            Article(title="draft"),
            Article(title="post", published=True),
        ])
        await db_session.flush()

    async def test_published_only(self, db_session):
        await self._seed(db_session)
        result = await db_session.execute(Article.published_only())
        assert [a.title for a in result.scalars()] == ["post"]

    async def test_by_id(self, db_session):
        await self._seed(db_session)
        result = await db_session.execute(Article.by_id(1))
        assert [a.title for a in result.scalars()] == ["draft"]

    async def test_filters_compose(self, db_session):
        await self._seed(db_session)
        result = await db_session.execute(Article.published_only(Article.by_id(1)))
        assert result.scalars().all() == []

    async def test_filter_on_existing_query(self, db_session):
        await self._seed(db_session)
        query = select(Article).order_by(Article.id.desc())
        result = await db_session.execute(Article.published_only(query))
        assert [a.id for a in result.scalars()] == [2]

    async def test_published_defaults_false(self, db_session):
        await self._seed(db_session)
        draft = await db_session.get(Article, 1)
        assert draft.published is False
