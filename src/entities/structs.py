"""
Entity structs

Immutable, validated value objects built from relation rows. A struct
cannot exist with missing or mistyped attributes: construction goes
through `build`, which returns either the struct or a ValidationFailure.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    model_validator,
)

from db.errors import ValidationFailure


class Struct(BaseModel):
    """Frozen, closed struct base"""
    model_config = ConfigDict(frozen=True, extra="forbid")


class Category(Struct):
    id: StrictInt
    name: StrictStr = Field(..., min_length=1)

    def __repr__(self) -> str:
        return f"#<Category id={self.id} name={self.name!r}>"


class Article(Struct):
    id: StrictInt
    title: StrictStr = Field(..., min_length=1)
    published: StrictBool
    categories: Tuple[Category, ...] = ()

    def __repr__(self) -> str:
        categories = ", ".join(repr(category) for category in self.categories)
        return (
            f"#<Article id={self.id} title={self.title!r} "
            f"published={self.published} categories=[{categories}]>"
        )


# ============================================================
# Write payloads
# ============================================================

class ArticleAttributes(Struct):
    """Attributes accepted by ArticleRepository.create"""
    title: StrictStr = Field(..., min_length=1)
    published: StrictBool = False


class ArticleChanges(Struct):
    """Attributes accepted by ArticleRepository.update_by_id, all optional"""
    title: Optional[StrictStr] = Field(None, min_length=1)
    published: Optional[StrictBool] = None

    @model_validator(mode="after")
    def _check_given_fields(self) -> "ArticleChanges":
        if not self.model_fields_set:
            raise ValueError("at least one attribute must be given")
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def values(self) -> Dict[str, Any]:
        """Only the attributes the caller actually gave"""
        return self.model_dump(exclude_unset=True)


class CategoryAttributes(Struct):
    """Attributes accepted by CategoryRepository.create"""
    name: StrictStr = Field(..., min_length=1)


# ============================================================
# Factory
# ============================================================

S = TypeVar("S", bound=Struct)


@dataclass(frozen=True)
class BuildResult(Generic[S]):
    """Outcome of `build`: exactly one of value / error is set"""
    value: Optional[S] = None
    error: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> S:
        """
        Returns:
            the struct

        Raises:
            ValidationFailure: the build failed
        """
        if self.error is not None:
            raise self.error
        return self.value


def build(struct_cls: Type[S], data: Mapping[str, Any]) -> BuildResult[S]:
    """
    Validate `data` into `struct_cls`

    Args:
        struct_cls: struct class to build
        data: attribute mapping (row or caller input)

    Returns:
        BuildResult holding the struct or the ValidationFailure
    """
    try:
        return BuildResult(value=struct_cls.model_validate(data))
    except ValidationError as e:
        return BuildResult(
            error=ValidationFailure(struct_cls.__name__, e.errors(include_url=False))
        )
