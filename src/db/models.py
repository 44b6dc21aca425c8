"""
SQLAlchemy ORM models (relations)

Tables:
- articles: articles, optionally published
- categories: category names
- articles_categories: join table, one row per article/category membership

Filter methods live on the model as classmethods returning composable
`Select` statements, so repositories can chain them onto joined queries.
"""

from typing import Optional, List

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Integer,
    Select,
    Text,
    select,
    text,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Declarative base shared by all relations"""
    pass


class Article(Base):
    """
    Articles relation

    An article has many categories through articles_categories.
    """
    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("0")
    )

    # many :categories, through: :articles_categories
    # Edges are written through ArticleCategory, so this side is read-only.
    categories: Mapped[List["Category"]] = relationship(
        "Category",
        secondary="articles_categories",
        viewonly=True,
        lazy="raise"
    )

    # ========================================
    # Filters
    # ========================================

    @classmethod
    def by_id(cls, id: int, query: Optional[Select] = None) -> Select:
        """Restrict to the row with the given id"""
        query = select(cls) if query is None else query
        return query.where(cls.id == id)

    @classmethod
    def published_only(cls, query: Optional[Select] = None) -> Select:
        """Restrict to published rows"""
        query = select(cls) if query is None else query
        return query.where(cls.published == True)

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, title={self.title}, published={self.published})>"


class Category(Base):
    """Categories relation, just an id and a name"""
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


class ArticleCategory(Base):
    """
    Join relation between articles and categories

    Each row belongs to exactly one article and one category. The foreign
    keys are what the association lookup in db.relations resolves joins with.
    """
    __tablename__ = "articles_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    article_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("articles.id"),
        nullable=False,
        index=True
    )

    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True
    )

    # belongs :articles / belongs :categories
    article: Mapped["Article"] = relationship("Article", lazy="raise")
    category: Mapped["Category"] = relationship("Category", lazy="raise")

    def __repr__(self) -> str:
        return f"<ArticleCategory(article={self.article_id}, category={self.category_id})>"
