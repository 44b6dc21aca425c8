"""
Shared pytest fixtures.

Each test gets its own in-memory SQLite database, so ids always start at 1
and no cleanup between tests is needed.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import create_test_database_manager, DatabaseManager
from entities import Article, Category
from repositories.article_repo import ArticleRepository
from repositories.category_repo import CategoryRepository


# ============================================================
# Database fixtures
# ============================================================


@pytest.fixture
async def db_manager() -> DatabaseManager:
    """Initialized in-memory database, closed on teardown."""
    manager = create_test_database_manager()
    await manager.initialize()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(db_manager: DatabaseManager) -> AsyncSession:
    async with db_manager.session() as session:
        yield session


# ============================================================
# Repository fixtures
# ============================================================


@pytest.fixture
def article_repo(db_session: AsyncSession) -> ArticleRepository:
    return ArticleRepository(db_session)


@pytest.fixture
def category_repo(db_session: AsyncSession) -> CategoryRepository:
    return CategoryRepository(db_session)


# ============================================================
# Pre-created rows
# ============================================================


@pytest.fixture
async def draft_article(article_repo: ArticleRepository) -> Article:
    """An unpublished article."""
    return await article_repo.create({"title": "Hello rom-rb", "published": False})


@pytest.fixture
async def published_article(article_repo: ArticleRepository) -> Article:
    return await article_repo.create({"title": "An alien or sutin", "published": True})


@pytest.fixture
async def categories(category_repo: CategoryRepository) -> list[Category]:
    """Two categories: dry-rb and rom-rb."""
    return [
        await category_repo.create({"name": "dry-rb"}),
        await category_repo.create({"name": "rom-rb"}),
    ]
