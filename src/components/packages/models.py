"""
Packages component input/output models.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.components.listing.models import Condition, FilterSpec, ListingSpec
from src.components.media.models import UploadedFile
from src.core.errors import ValidationError
from src.domain.entities import PackageStatus, TravelPackage

# --- Listing configuration ---


def finite_price(raw: str) -> float:
    """Parse a price filter; "nan" and "inf" are not prices."""
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"Price must be finite: {raw!r}")
    return value


PACKAGE_SORTABLE = {
    "code": "code",
    "title": "title",
    "location": "location",
    "price": "price",
    "startDate": "start_date",
    "createdAt": "created_at",
}

PACKAGE_LISTING = ListingSpec(
    name="packages",
    search_fields=("title", "location", "code"),
    filters={
        "typeId": FilterSpec("type_id"),
        "status": FilterSpec("status"),
    },
    sortable=PACKAGE_SORTABLE,
)

PUBLIC_PACKAGE_LISTING = ListingSpec(
    name="public_packages",
    search_fields=("title", "location", "code"),
    filters={
        "typeId": FilterSpec("type_id"),
        "maxPrice": FilterSpec("price", op="lte", coerce=finite_price),
    },
    sortable=PACKAGE_SORTABLE,
    base_predicate=(Condition("status", "eq", "ACTIVE"),),
)


# --- Form ---


class PackageForm(BaseModel):
    """Editable package fields, validated."""

    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=200)
    price: float = Field(ge=0, allow_inf_nan=False)
    start_date: date
    end_date: date
    max_guests: int = Field(ge=1)
    dormitories: int = Field(default=0, ge=0)
    suites: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    number_of_days: int = Field(default=0, ge=0)
    status: PackageStatus = "DRAFT"
    type_id: UUID


# --- Inputs ---


@dataclass(frozen=True)
class NewImage:
    upload: UploadedFile
    is_main: bool = False


@dataclass(frozen=True)
class KeptImage:
    """An already stored image the client wants to keep."""

    url: str
    is_main: bool = False


@dataclass(frozen=True)
class CreatePackageInput:
    fields: dict[str, Any]
    new_images: list[NewImage] = field(default_factory=list)


@dataclass(frozen=True)
class UpdatePackageInput:
    package_id: UUID
    fields: dict[str, Any]
    new_images: list[NewImage] = field(default_factory=list)
    kept_images: list[KeptImage] = field(default_factory=list)


@dataclass(frozen=True)
class DeletePackageInput:
    package_id: UUID


@dataclass(frozen=True)
class GetPackageInput:
    package_id: UUID | None = None
    slug: str | None = None
    active_only: bool = False


# --- Outputs ---


@dataclass(frozen=True)
class PackageOutput:
    package: TravelPackage | None = None
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeletePackageOutput:
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True
    # Files still on disk after a failed or timed-out removal
    orphaned_refs: list[str] = field(default_factory=list)
