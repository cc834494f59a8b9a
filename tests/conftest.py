from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.fs.filestore import FileSystemImageStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import (
    SQLiteArticleCategoryRepo,
    SQLiteArticleRepo,
    SQLitePackageRepo,
    SQLitePackageTypeRepo,
    SQLiteSiteSettingsRepo,
    SQLiteUserRepo,
)
from src.components.media.models import UploadPolicy
from src.domain.entities import ArticleCategory, PackageType
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]
RULES_PATH = PROJECT_ROOT / "rules.yaml"
MIGRATIONS_DIR = PROJECT_ROOT / "migrations"


@pytest.fixture
def rules() -> Rules:
    return load_rules(RULES_PATH)


@pytest.fixture
def upload_policy(rules: Rules) -> UploadPolicy:
    return UploadPolicy.from_rules(rules.uploads)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 1, 9, 0, tzinfo=UTC))


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """A migrated, empty database."""
    path = str(tmp_path / "travel.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture
def image_store(public_dir: Path) -> FileSystemImageStore:
    return FileSystemImageStore(str(public_dir))


@pytest.fixture
def package_repo(db_path: str) -> SQLitePackageRepo:
    return SQLitePackageRepo(db_path)


@pytest.fixture
def article_repo(db_path: str) -> SQLiteArticleRepo:
    return SQLiteArticleRepo(db_path)


@pytest.fixture
def package_type_repo(db_path: str) -> SQLitePackageTypeRepo:
    return SQLitePackageTypeRepo(db_path)


@pytest.fixture
def category_repo(db_path: str) -> SQLiteArticleCategoryRepo:
    return SQLiteArticleCategoryRepo(db_path)


@pytest.fixture
def settings_repo(db_path: str) -> SQLiteSiteSettingsRepo:
    return SQLiteSiteSettingsRepo(db_path)


@pytest.fixture
def user_repo(db_path: str) -> SQLiteUserRepo:
    return SQLiteUserRepo(db_path)


@pytest.fixture
def package_type(package_type_repo: SQLitePackageTypeRepo) -> PackageType:
    return package_type_repo.save(PackageType(name="City Breaks", description="Short stays"))


@pytest.fixture
def category(category_repo: SQLiteArticleCategoryRepo) -> ArticleCategory:
    return category_repo.save(ArticleCategory(name="Guides"))
