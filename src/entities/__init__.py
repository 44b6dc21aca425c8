"""
Entity layer

Domain structs returned by repositories, and the write payloads they accept.
"""

from entities.structs import (
    Struct,
    Article,
    Category,
    ArticleAttributes,
    ArticleChanges,
    CategoryAttributes,
    BuildResult,
    build,
)

__all__ = [
    "Struct",
    "Article",
    "Category",
    "ArticleAttributes",
    "ArticleChanges",
    "CategoryAttributes",
    "BuildResult",
    "build",
]
