from datetime import date, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.components.listing.models import ListResultPage

ItemT = TypeVar("ItemT")


# --- Errors ---
class FieldErrorModel(BaseModel):
    field: str | None = None
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    errors: list[FieldErrorModel] | None = None
    retryable: bool | None = None


class SuccessResponse(BaseModel):
    success: bool = True


# --- Pagination ---
class PageResponse(BaseModel, Generic[ItemT]):
    items: list[ItemT]
    total_count: int
    page: int
    per_page: int
    total_pages: int

    @classmethod
    def from_page(cls, page: ListResultPage[Any], items: list[ItemT]) -> "PageResponse[ItemT]":
        return cls(
            items=items,
            total_count=page.total_count,
            page=page.page_number,
            per_page=page.page_size,
            total_pages=page.total_pages,
        )


# --- Packages ---
class PackageImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    url: str
    is_main: bool


class PackageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    title: str
    slug: str
    description: str
    location: str
    price: float
    start_date: date
    end_date: date
    max_guests: int
    dormitories: int
    suites: int
    bathrooms: int
    number_of_days: int
    status: str
    type_id: UUID
    image_url: str
    contact_count: int
    images: list[PackageImageResponse]
    created_at: datetime
    updated_at: datetime


# --- Articles ---
class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str
    image_url: str
    published: bool
    category_id: UUID
    created_at: datetime
    updated_at: datetime


# --- Taxonomies ---
class TaxonomyRequest(BaseModel):
    name: str
    description: str = ""


class PackageTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    package_count: int = 0
    created_at: datetime
    updated_at: datetime


class ArticleCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    article_count: int = 0
    created_at: datetime
    updated_at: datetime


# --- Settings ---
class PublicConfigResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    logo: str | None = None
    status: bool
    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    youtube_url: str | None = None


class SettingsResponse(PublicConfigResponse):
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from: str | None = None
    updated_at: datetime


# --- Users ---
class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: str
    created_at: datetime


class RoleUpdateRequest(BaseModel):
    role: str


# --- Dashboard ---
class TypeStatResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type_id: UUID
    name: str
    package_count: int


class DashboardTotalsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    packages: int
    articles: int
    contacts: int


class DashboardResponse(BaseModel):
    totals: DashboardTotalsResponse
    recent_packages: list[PackageResponse]
    recent_articles: list[ArticleResponse]
    trending_packages: list[PackageResponse]
    packages_by_type: list[TypeStatResponse]


# --- Storefront ---
class HomeResponse(BaseModel):
    config: PublicConfigResponse
    featured_packages: list[PackageResponse]
    package_types: list[PackageTypeResponse]
