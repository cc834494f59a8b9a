"""
Taxonomy component models - package types and article categories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.core.errors import ValidationError
from src.domain.entities import ArticleCategory, PackageType

Taxon = PackageType | ArticleCategory


@dataclass(frozen=True)
class TaxonomyKind:
    """Which lookup table an operation targets."""

    label: str
    entity: type[PackageType] | type[ArticleCategory]
    # What references entries of this kind, for "in use" messages
    used_by: str


PACKAGE_TYPES = TaxonomyKind(label="Package type", entity=PackageType, used_by="packages")
ARTICLE_CATEGORIES = TaxonomyKind(
    label="Article category", entity=ArticleCategory, used_by="articles"
)


class TaxonomyForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)


@dataclass(frozen=True)
class CreateTaxonInput:
    kind: TaxonomyKind
    fields: dict[str, Any]


@dataclass(frozen=True)
class UpdateTaxonInput:
    kind: TaxonomyKind
    item_id: UUID
    fields: dict[str, Any]


@dataclass(frozen=True)
class DeleteTaxonInput:
    kind: TaxonomyKind
    item_id: UUID


@dataclass(frozen=True)
class ListTaxaInput:
    kind: TaxonomyKind


@dataclass(frozen=True)
class TaxonOutput:
    item: Taxon | None = None
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class TaxonUsage:
    item: Taxon
    usage_count: int


@dataclass(frozen=True)
class ListTaxaOutput:
    items: list[TaxonUsage] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True
