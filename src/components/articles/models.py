"""
Articles component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.components.listing.models import Condition, FilterSpec, ListingSpec
from src.components.media.models import UploadedFile
from src.core.errors import ValidationError
from src.domain.entities import Article


def parse_published(raw: str) -> bool:
    # Only the literal "true" selects published articles
    return raw == "true"


ARTICLE_SORTABLE = {
    "title": "title",
    "createdAt": "created_at",
}

ARTICLE_LISTING = ListingSpec(
    name="articles",
    search_fields=("title", "excerpt"),
    filters={
        "categoryId": FilterSpec("category_id"),
        "published": FilterSpec("published", coerce=parse_published),
    },
    sortable=ARTICLE_SORTABLE,
)

PUBLIC_ARTICLE_LISTING = ListingSpec(
    name="public_articles",
    search_fields=("title", "excerpt"),
    filters={"categoryId": FilterSpec("category_id")},
    sortable=ARTICLE_SORTABLE,
    base_predicate=(Condition("published", "eq", True),),
)


class ArticleForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    excerpt: str = Field(min_length=1, max_length=500)
    category_id: UUID
    published: bool = False


@dataclass(frozen=True)
class CreateArticleInput:
    fields: dict[str, Any]
    image: UploadedFile | None = None


@dataclass(frozen=True)
class UpdateArticleInput:
    article_id: UUID
    fields: dict[str, Any]
    image: UploadedFile | None = None
    # Drop the current image without replacing it
    remove_image: bool = False


@dataclass(frozen=True)
class DeleteArticleInput:
    article_id: UUID


@dataclass(frozen=True)
class GetArticleInput:
    article_id: UUID | None = None
    slug: str | None = None
    published_only: bool = False


@dataclass(frozen=True)
class ArticleOutput:
    article: Article | None = None
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeleteArticleOutput:
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True
    orphaned_refs: list[str] = field(default_factory=list)
