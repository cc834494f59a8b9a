from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class RbacRules(BaseModel):
    roles: dict[str, list[str]]
    public_permissions: list[str] = Field(default_factory=list)


class CookieRules(BaseModel):
    secure: bool = False
    same_site: str = "lax"


class AuthRules(BaseModel):
    password_min_length: int = 8
    session_ttl_minutes: int = 1440
    cookie: CookieRules = Field(default_factory=CookieRules)


class UploadsRules(BaseModel):
    max_upload_bytes: int
    allowlist_extensions: list[str]
    allowlist_mime_types: list[str]
    folders: dict[str, str] = Field(
        default_factory=lambda: {
            "packages": "packages",
            "articles": "articles",
            "logos": "logos",
        }
    )


class ListingRules(BaseModel):
    default_per_page: int = Field(default=5, ge=1)
    max_per_page: int | None = Field(default=None, ge=1)
    featured_count: int = Field(default=3, ge=1)
    dashboard_count: int = Field(default=5, ge=1)


class TimeoutRules(BaseModel):
    query_seconds: float = Field(default=10, gt=0)
    storage_seconds: float = Field(default=10, gt=0)
    db_lock_seconds: float = Field(default=5, gt=0)


class Rules(BaseModel):
    project: ProjectRules
    rbac: RbacRules
    auth: AuthRules = Field(default_factory=AuthRules)
    uploads: UploadsRules
    listing: ListingRules = Field(default_factory=ListingRules)
    timeouts: TimeoutRules = Field(default_factory=TimeoutRules)
