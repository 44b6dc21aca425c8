"""
Database layer
Connection management, relations, the static relation registry and errors
"""

from db.database import DatabaseManager, create_test_database_manager
from db.errors import (
    PersistenceError,
    NotFoundError,
    MultipleResultsError,
    ValidationFailure,
    StoreFailure,
)
from db.models import (
    Base,
    Article,
    Category,
    ArticleCategory,
)
from db.relations import (
    RelationConfig,
    RelationConfigError,
    JoinPath,
    RELATIONS,
    ASSOCIATIONS,
    get_relation,
    resolve_join,
    validate_relations,
)

__all__ = [
    # Database Manager
    "DatabaseManager",
    "create_test_database_manager",
    # Errors
    "PersistenceError",
    "NotFoundError",
    "MultipleResultsError",
    "ValidationFailure",
    "StoreFailure",
    # ORM Models
    "Base",
    "Article",
    "Category",
    "ArticleCategory",
    # Relation registry
    "RelationConfig",
    "RelationConfigError",
    "JoinPath",
    "RELATIONS",
    "ASSOCIATIONS",
    "get_relation",
    "resolve_join",
    "validate_relations",
]
