from datetime import UTC, date, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
RoleType = Literal["ADMIN", "EDITOR", "USER"]
PackageStatus = Literal["DRAFT", "ACTIVE", "INACTIVE", "UNAVAILABLE"]

ROLES: tuple[RoleType, ...] = ("ADMIN", "EDITOR", "USER")
PACKAGE_STATUSES: tuple[PackageStatus, ...] = ("DRAFT", "ACTIVE", "INACTIVE", "UNAVAILABLE")


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- User & Auth ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    name: str = ""
    password_hash: str
    role: RoleType = "USER"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

# --- Taxonomies ---

class PackageType(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

class ArticleCategory(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

# --- Packages ---

class PackageImage(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    url: str
    is_main: bool = False
    created_at: datetime = Field(default_factory=utcnow)

class TravelPackage(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    code: str
    title: str
    slug: str
    description: str
    location: str
    price: float
    start_date: date
    end_date: date
    max_guests: int
    dormitories: int = 0
    suites: int = 0
    bathrooms: int = 0
    number_of_days: int = 0
    status: PackageStatus = "DRAFT"
    type_id: UUID
    image_url: str = ""
    contact_count: int = 0

    # Ordered; at most one is_main
    images: list[PackageImage] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def image_refs(self) -> list[str]:
        """Every stored file reference held by this package, deduplicated."""
        refs = [img.url for img in self.images]
        if self.image_url:
            refs.append(self.image_url)
        return list(dict.fromkeys(r for r in refs if r))

# --- Articles ---

class Article(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    slug: str
    content: str
    excerpt: str
    image_url: str = ""
    published: bool = False
    category_id: UUID
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

# --- Site ---

SITE_SETTINGS_ID = "default"


class SiteSettings(BaseModel):
    id: str = SITE_SETTINGS_ID
    name: str
    description: str
    logo: str | None = None
    status: bool = True
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from: str | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    twitter_url: str | None = None
    linkedin_url: str | None = None
    youtube_url: str | None = None
    updated_at: datetime = Field(default_factory=utcnow)
