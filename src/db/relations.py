"""
Static relation registry

Each relation is described once by a RelationConfig: its model, its
columns and which relation every foreign key column references.
Associations resolve through the ASSOCIATIONS lookup table instead of
runtime introspection. `validate_relations` checks the registry against
the mapped tables once, at startup.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, Type

from sqlalchemy import MetaData

from db.models import Base, Article, Category, ArticleCategory


class RelationConfigError(Exception):
    """Registry and mapped tables disagree"""
    pass


@dataclass(frozen=True)
class RelationConfig:
    """Static description of one relation"""
    name: str
    model: Type[Base]
    columns: Tuple[str, ...]
    # column name -> referenced relation name
    foreign_keys: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class JoinPath:
    """
    has-many-through join keys

    source.id == through.source_key and through.target_key == target.id
    """
    source: str
    target: str
    through: str
    source_key: str
    target_key: str


RELATIONS: Dict[str, RelationConfig] = {
    "articles": RelationConfig(
        name="articles",
        model=Article,
        columns=("id", "title", "published"),
    ),
    "categories": RelationConfig(
        name="categories",
        model=Category,
        columns=("id", "name"),
    ),
    "articles_categories": RelationConfig(
        name="articles_categories",
        model=ArticleCategory,
        columns=("id", "article_id", "category_id"),
        foreign_keys={
            "article_id": "articles",
            "category_id": "categories",
        },
    ),
}


ASSOCIATIONS: Dict[Tuple[str, str], JoinPath] = {
    ("articles", "categories"): JoinPath(
        source="articles",
        target="categories",
        through="articles_categories",
        source_key="article_id",
        target_key="category_id",
    ),
}


def get_relation(name: str) -> RelationConfig:
    try:
        return RELATIONS[name]
    except KeyError:
        raise RelationConfigError(f"Unknown relation '{name}'") from None


def resolve_join(source: str, target: str) -> JoinPath:
    """
    Look up how to join source to target

    Raises:
        RelationConfigError: no association is declared
    """
    path = ASSOCIATIONS.get((source, target))
    if path is None:
        raise RelationConfigError(f"No association declared from '{source}' to '{target}'")
    return path


def validate_relations(metadata: MetaData = Base.metadata) -> None:
    """
    Check every registered relation against the mapped tables

    - table exists and its model points at it
    - configured columns match the table columns exactly
    - each foreign key column references the configured relation
    - each association's join keys are foreign keys of the join relation
      pointing at the right relations

    Raises:
        RelationConfigError: on the first mismatch
    """
    for name, config in RELATIONS.items():
        table = metadata.tables.get(name)
        if table is None:
            raise RelationConfigError(f"Relation '{name}' has no table")
        if config.model.__table__ is not table:
            raise RelationConfigError(
                f"Relation '{name}' is mapped by {config.model.__name__}, "
                f"which maps table '{config.model.__tablename__}'"
            )

        actual = set(table.columns.keys())
        declared = set(config.columns)
        if actual != declared:
            raise RelationConfigError(
                f"Relation '{name}' columns mismatch: declared {sorted(declared)}, "
                f"table has {sorted(actual)}"
            )

        for column_name, referenced in config.foreign_keys.items():
            targets = {fk.column.table.name for fk in table.columns[column_name].foreign_keys}
            if referenced not in targets:
                raise RelationConfigError(
                    f"Column '{name}.{column_name}' does not reference '{referenced}'"
                )

    for (source, target), path in ASSOCIATIONS.items():
        through = get_relation(path.through)
        if through.foreign_keys.get(path.source_key) != source:
            raise RelationConfigError(
                f"Association {source}->{target}: '{path.through}.{path.source_key}' "
                f"is not a foreign key to '{source}'"
            )
        if through.foreign_keys.get(path.target_key) != target:
            raise RelationConfigError(
                f"Association {source}->{target}: '{path.through}.{path.target_key}' "
                f"is not a foreign key to '{target}'"
            )
