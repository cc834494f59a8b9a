"""Taxonomies, users, settings and the dashboard over HTTP."""

from fastapi.testclient import TestClient

from src.api.deps import Settings
from src.domain.entities import User
from tests.factories import PNG_BYTES


def _add_package(client: TestClient, headers: dict[str, str], type_id: str) -> None:
    response = client.post(
        "/api/packages",
        data={
            "code": "PKG-001",
            "title": "Paris Getaway",
            "description": "Five days in Paris.",
            "location": "Paris",
            "price": "1000",
            "startDate": "2025-06-01",
            "endDate": "2025-06-05",
            "maxGuests": "2",
            "status": "ACTIVE",
            "typeId": type_id,
        },
        headers=headers,
    )
    assert response.status_code == 201


class TestTaxonomies:
    def test_crud_and_counts(
        self, client: TestClient, admin_headers: dict[str, str], package_type_id: str
    ) -> None:
        _add_package(client, admin_headers, package_type_id)

        listed = client.get("/api/package-types", headers=admin_headers).json()
        assert [(t["name"], t["package_count"]) for t in listed] == [("City Breaks", 1)]

        renamed = client.put(
            f"/api/package-types/{package_type_id}",
            json={"name": "Cities", "description": "Short stays"},
            headers=admin_headers,
        )
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Cities"
        assert renamed.json()["package_count"] == 1

    def test_in_use_type_cannot_be_deleted(
        self, client: TestClient, admin_headers: dict[str, str], package_type_id: str
    ) -> None:
        _add_package(client, admin_headers, package_type_id)

        response = client.delete(f"/api/package-types/{package_type_id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "in_use"

    def test_unused_category_is_deleted(
        self, client: TestClient, editor_headers: dict[str, str]
    ) -> None:
        created = client.post(
            "/api/article-categories", json={"name": "Guides"}, headers=editor_headers
        ).json()

        response = client.delete(
            f"/api/article-categories/{created['id']}", headers=editor_headers
        )

        assert response.status_code == 200
        assert client.get("/api/article-categories", headers=editor_headers).json() == []

    def test_blank_name_rejected(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        response = client.post("/api/package-types", json={"name": "  "}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_plain_user_forbidden(self, client: TestClient, user_headers: dict[str, str]) -> None:
        assert client.get("/api/package-types", headers=user_headers).status_code == 403


class TestUsers:
    def test_list_and_change_role(
        self,
        client: TestClient,
        admin_headers: dict[str, str],
        plain_user: User,
    ) -> None:
        emails = {u["email"] for u in client.get("/api/users", headers=admin_headers).json()}
        assert emails == {"admin@example.com", "user@example.com"}

        response = client.patch(
            f"/api/users/{plain_user.id}", json={"role": "EDITOR"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["role"] == "EDITOR"

    def test_admin_cannot_delete_self(
        self, client: TestClient, admin_headers: dict[str, str], admin_user: User
    ) -> None:
        response = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "self_delete"

    def test_delete_other_user(
        self, client: TestClient, admin_headers: dict[str, str], plain_user: User
    ) -> None:
        assert client.delete(f"/api/users/{plain_user.id}", headers=admin_headers).json() == {
            "success": True
        }
        assert (
            client.delete(f"/api/users/{plain_user.id}", headers=admin_headers).status_code == 404
        )

    def test_editor_cannot_manage_users(
        self, client: TestClient, editor_headers: dict[str, str], plain_user: User
    ) -> None:
        assert client.get("/api/users", headers=editor_headers).status_code == 403
        assert (
            client.patch(
                f"/api/users/{plain_user.id}", json={"role": "ADMIN"}, headers=editor_headers
            ).status_code
            == 403
        )


class TestSettings:
    def test_defaults_then_update_with_logo(
        self, client: TestClient, admin_headers: dict[str, str], api_settings: Settings
    ) -> None:
        assert client.get("/api/settings", headers=admin_headers).json()["name"] == "Travel Agency"

        response = client.post(
            "/api/settings",
            data={"name": "Sunny Trips", "description": "Since 1999", "smtpPort": "587"},
            files={"logo": ("logo.png", PNG_BYTES, "image/png")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Sunny Trips"
        assert body["smtp_port"] == 587
        assert body["logo"].startswith("/uploads/logos/")
        assert (api_settings.public_dir / body["logo"].lstrip("/")).is_file()

        removed = client.post(
            "/api/settings", data={"removeLogo": "true"}, headers=admin_headers
        ).json()
        assert removed["logo"] is None
        assert removed["name"] == "Sunny Trips"

    def test_invalid_url(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        response = client.post(
            "/api/settings", data={"facebookUrl": "not a url"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "facebook_url"

    def test_editor_forbidden(self, client: TestClient, editor_headers: dict[str, str]) -> None:
        assert client.get("/api/settings", headers=editor_headers).status_code == 403
        assert (
            client.post("/api/settings", data={"name": "X"}, headers=editor_headers).status_code
            == 403
        )


def test_dashboard(
    client: TestClient, editor_headers: dict[str, str], package_type_id: str
) -> None:
    _add_package(client, editor_headers, package_type_id)

    response = client.get("/api/admin/dashboard", headers=editor_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["totals"] == {"packages": 1, "articles": 0, "contacts": 0}
    assert [p["slug"] for p in body["recent_packages"]] == ["paris-getaway"]
    assert body["packages_by_type"][0]["package_count"] == 1
