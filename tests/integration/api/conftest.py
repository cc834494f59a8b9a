from collections.abc import Iterator
from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.auth_utils import create_access_token, get_password_hash
from src.api.deps import Settings, get_settings
from src.api.main import app
from src.domain.entities import RoleType, User

PASSWORD = "correct-horse"
RULES_PATH = Path(__file__).resolve().parents[3] / "rules.yaml"


@pytest.fixture
def api_settings(tmp_path: Path) -> Iterator[Settings]:
    s = Settings()
    s.data_dir = tmp_path / "data"
    s.db_path = str(s.data_dir / "travel.db")
    s.public_dir = tmp_path / "public"
    s.rules_path = RULES_PATH
    SQLiteMigrator(s.db_path).run_migrations()

    app.dependency_overrides[get_settings] = lambda: s
    yield s
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_settings: Settings) -> TestClient:
    return TestClient(app)


def _add_user(settings: Settings, role: RoleType) -> User:
    user = User(
        email=f"{role.lower()}@example.com",
        name=role.title(),
        password_hash=get_password_hash(PASSWORD),
        role=role,
    )
    SQLiteUserRepo(settings.db_path).save(user)
    return user


def _headers(user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(user.id)}, timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(api_settings: Settings) -> User:
    return _add_user(api_settings, "ADMIN")


@pytest.fixture
def editor_user(api_settings: Settings) -> User:
    return _add_user(api_settings, "EDITOR")


@pytest.fixture
def plain_user(api_settings: Settings) -> User:
    return _add_user(api_settings, "USER")


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return _headers(admin_user)


@pytest.fixture
def editor_headers(editor_user: User) -> dict[str, str]:
    return _headers(editor_user)


@pytest.fixture
def user_headers(plain_user: User) -> dict[str, str]:
    return _headers(plain_user)


@pytest.fixture
def package_type_id(client: TestClient, admin_headers: dict[str, str]) -> str:
    response = client.post(
        "/api/package-types", json={"name": "City Breaks"}, headers=admin_headers
    )
    assert response.status_code == 201
    return str(response.json()["id"])
