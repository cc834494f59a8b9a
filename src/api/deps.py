import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemImageStore
from src.adapters.sqlite.repos import (
    SQLiteArticleCategoryRepo,
    SQLiteArticleRepo,
    SQLitePackageRepo,
    SQLitePackageTypeRepo,
    SQLiteSiteSettingsRepo,
    SQLiteUserRepo,
)
from src.api.auth_utils import COOKIE_NAME, decode_access_token
from src.components.media.models import UploadPolicy
from src.components.settings import GetSettingsInput, run_get
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("TRAVEL_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "travel.db")
        # Uploads live under <public_dir>/uploads and are served at /uploads
        self.public_dir = Path(os.environ.get("TRAVEL_PUBLIC_DIR", "./public"))
        self.rules_path = Path(
            os.environ.get("TRAVEL_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_package_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLitePackageRepo:
    return SQLitePackageRepo(settings.db_path, timeout=rules.timeouts.db_lock_seconds)


def get_article_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteArticleRepo:
    return SQLiteArticleRepo(settings.db_path, timeout=rules.timeouts.db_lock_seconds)


def get_package_type_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLitePackageTypeRepo:
    return SQLitePackageTypeRepo(settings.db_path, timeout=rules.timeouts.db_lock_seconds)


def get_article_category_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteArticleCategoryRepo:
    return SQLiteArticleCategoryRepo(settings.db_path, timeout=rules.timeouts.db_lock_seconds)


def get_site_settings_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteSiteSettingsRepo:
    return SQLiteSiteSettingsRepo(settings.db_path, timeout=rules.timeouts.db_lock_seconds)


def get_user_repo(
    settings: Settings = Depends(get_settings), rules: Rules = Depends(get_rules)
) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path, timeout=rules.timeouts.db_lock_seconds)


# --- Storage ---
def get_image_store(settings: Settings = Depends(get_settings)) -> FileSystemImageStore:
    return FileSystemImageStore(str(settings.public_dir))


def get_upload_policy(rules: Rules = Depends(get_rules)) -> UploadPolicy:
    return UploadPolicy.from_rules(rules.uploads)


# --- Services ---
def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules)


# Adapters needed for component injection
def get_auth_adapter() -> JWTAuthAdapter:
    return JWTAuthAdapter()


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User:
    # 1. Try Cookie first (HttpOnly)
    cookie_token = request.cookies.get(COOKIE_NAME)
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    # 2. Header (OAuth2 bearer) is already in `token` when no cookie was sent
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 3. Decode
    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        uid = UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        ) from None

    # 4. Fetch User
    user = user_repo.get_by_id(uid)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def require_permission(user: User, policy: PolicyEngine, action: str) -> None:
    """Raise 403 unless the user's role grants the action."""
    if not policy.check_permission(user, action):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


# --- Maintenance mode ---
def ensure_site_online(
    repo: SQLiteSiteSettingsRepo = Depends(get_site_settings_repo),
) -> None:
    """Storefront guard: answer 503 while the site is switched off."""
    if not run_get(GetSettingsInput(), repo=repo).settings.status:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Site under maintenance",
        )
