import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def catalogue(client: TestClient, admin_headers: dict[str, str], package_type_id: str) -> None:
    """Three active packages, one draft, one published and one draft article."""
    for n, (title, status) in enumerate(
        [
            ("Paris Getaway", "ACTIVE"),
            ("Porto Alegre Escape", "ACTIVE"),
            ("Rome Classic", "ACTIVE"),
            ("Secret Draft", "DRAFT"),
        ]
    ):
        response = client.post(
            "/api/packages",
            data={
                "code": f"PKG-{n}",
                "title": title,
                "description": "d",
                "location": title.split()[0],
                "price": str(500 * (n + 1)),
                "startDate": "2025-06-01",
                "endDate": "2025-06-05",
                "maxGuests": "2",
                "status": status,
                "typeId": package_type_id,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201

    category = client.post(
        "/api/article-categories", json={"name": "Guides"}, headers=admin_headers
    ).json()
    for title, published in [("Packing Tips", "true"), ("Unfinished", "false")]:
        response = client.post(
            "/api/articles",
            data={
                "title": title,
                "content": "c",
                "excerpt": "e",
                "categoryId": category["id"],
                "published": published,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201


@pytest.mark.usefixtures("catalogue")
class TestCatalogue:
    def test_only_active_packages_listed(self, client: TestClient) -> None:
        body = client.get("/api/public/packages").json()

        assert body["total_count"] == 3
        assert "Secret Draft" not in {p["title"] for p in body["items"]}

    def test_search_and_price_filter(self, client: TestClient) -> None:
        porto = client.get("/api/public/packages?search=porto").json()
        cheap = client.get("/api/public/packages?maxPrice=1000").json()
        ignored = client.get("/api/public/packages?maxPrice=lots").json()
        not_a_number = client.get("/api/public/packages?maxPrice=nan").json()

        assert [p["title"] for p in porto["items"]] == ["Porto Alegre Escape"]
        assert {p["title"] for p in cheap["items"]} == {"Paris Getaway", "Porto Alegre Escape"}
        assert ignored["total_count"] == 3
        assert not_a_number["total_count"] == 3

    def test_package_by_slug(self, client: TestClient) -> None:
        assert client.get("/api/public/packages/rome-classic").status_code == 200
        assert client.get("/api/public/packages/secret-draft").status_code == 404
        assert client.get("/api/public/packages/nowhere").status_code == 404

    def test_articles(self, client: TestClient) -> None:
        listed = client.get("/api/public/articles").json()

        assert [a["slug"] for a in listed["items"]] == ["packing-tips"]
        assert client.get("/api/public/articles/packing-tips").status_code == 200
        assert client.get("/api/public/articles/unfinished").status_code == 404

    def test_home(self, client: TestClient) -> None:
        body = client.get("/api/public/home").json()

        assert body["config"]["name"] == "Travel Agency"
        assert "smtp_host" not in body["config"]
        assert len(body["featured_packages"]) == 3
        assert body["package_types"][0]["package_count"] == 4


class TestMaintenance:
    def _switch_off(self, client: TestClient, headers: dict[str, str]) -> None:
        response = client.post("/api/settings", data={"status": "false"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["status"] is False

    def test_storefront_answers_503(
        self, client: TestClient, admin_headers: dict[str, str]
    ) -> None:
        self._switch_off(client, admin_headers)

        for path in ("/api/public/home", "/api/public/packages", "/api/public/articles"):
            response = client.get(path)
            assert response.status_code == 503, path
            assert response.json() == {"error": "Site under maintenance"}

    def test_config_and_back_office_stay_up(
        self, client: TestClient, admin_headers: dict[str, str]
    ) -> None:
        self._switch_off(client, admin_headers)

        config = client.get("/api/config")
        assert config.status_code == 200
        assert config.json()["status"] is False
        assert client.get("/api/packages", headers=admin_headers).status_code == 200


def test_empty_storefront(client: TestClient) -> None:
    body = client.get("/api/public/packages").json()

    assert body["items"] == []
    assert body["total_count"] == 0
    assert body["total_pages"] == 0
