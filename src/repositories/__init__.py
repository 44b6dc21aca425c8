"""
Repository layer

The only interface the rest of the app uses for persisted data.
Every query returns entity structs, never ORM rows.
"""

from repositories.base import (
    BaseRepository,
    PersistenceError,
    NotFoundError,
    MultipleResultsError,
    ValidationFailure,
    StoreFailure,
)
from repositories.article_repo import ArticleRepository
from repositories.category_repo import CategoryRepository

__all__ = [
    "BaseRepository",
    "PersistenceError",
    "NotFoundError",
    "MultipleResultsError",
    "ValidationFailure",
    "StoreFailure",
    "ArticleRepository",
    "CategoryRepository",
]
