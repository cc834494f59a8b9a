from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.api.deps import Settings
from tests.factories import JPEG_BYTES, PNG_BYTES


def _form(type_id: str, **overrides: str) -> dict[str, str]:
    form = {
        "code": "PKG-001",
        "title": "Paris Getaway",
        "description": "Five days in Paris.",
        "location": "Paris, France",
        "price": "1299.50",
        "startDate": "2025-06-01",
        "endDate": "2025-06-05",
        "maxGuests": "4",
        "status": "ACTIVE",
        "typeId": type_id,
    }
    form.update(overrides)
    return form


def _create(client: TestClient, headers: dict[str, str], type_id: str, **overrides: str):
    return client.post("/api/packages", data=_form(type_id, **overrides), headers=headers)


def _uploads(settings: Settings) -> list[Path]:
    folder = settings.public_dir / "uploads" / "packages"
    return sorted(folder.iterdir()) if folder.exists() else []


def test_create_with_images(
    client: TestClient,
    admin_headers: dict[str, str],
    package_type_id: str,
    api_settings: Settings,
) -> None:
    response = client.post(
        "/api/packages",
        data={**_form(package_type_id), "imageIsMain1": "true"},
        files=[
            ("images", ("front.jpg", JPEG_BYTES, "image/jpeg")),
            ("images", ("pool.png", PNG_BYTES, "image/png")),
        ],
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "paris-getaway"
    assert body["max_guests"] == 4
    assert [img["is_main"] for img in body["images"]] == [False, True]
    assert body["image_url"] == body["images"][1]["url"]
    assert len(_uploads(api_settings)) == 2


def test_invalid_form_lists_field_errors(
    client: TestClient, admin_headers: dict[str, str], package_type_id: str
) -> None:
    form = _form(package_type_id, price="cheap")
    del form["title"]

    response = client.post("/api/packages", data=form, headers=admin_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid package data"
    assert {e["field"] for e in body["errors"]} == {"title", "price"}


def test_disallowed_upload_is_rejected(
    client: TestClient,
    admin_headers: dict[str, str],
    package_type_id: str,
    api_settings: Settings,
) -> None:
    response = client.post(
        "/api/packages",
        data=_form(package_type_id),
        files=[("images", ("logo.svg", b"<svg/>", "image/svg+xml"))],
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "images"
    assert _uploads(api_settings) == []


def test_duplicate_title(
    client: TestClient, admin_headers: dict[str, str], package_type_id: str
) -> None:
    _create(client, admin_headers, package_type_id)

    response = _create(client, admin_headers, package_type_id, code="PKG-002")

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "slug_exists"


def test_list_paginates_and_filters(
    client: TestClient, admin_headers: dict[str, str], package_type_id: str
) -> None:
    for n in range(7):
        status = "DRAFT" if n == 0 else "ACTIVE"
        _create(
            client,
            admin_headers,
            package_type_id,
            code=f"PKG-{n}",
            title=f"Trip {n}",
            status=status,
        )

    first = client.get("/api/packages", headers=admin_headers).json()
    second = client.get("/api/packages?page=2", headers=admin_headers).json()
    drafts = client.get("/api/packages?status=DRAFT", headers=admin_headers).json()
    everything = client.get("/api/packages?status=ALL&perPage=50", headers=admin_headers).json()

    assert (first["total_count"], first["per_page"], first["total_pages"]) == (7, 5, 2)
    assert len(first["items"]) == 5
    assert len(second["items"]) == 2
    assert [p["code"] for p in drafts["items"]] == ["PKG-0"]
    assert len(everything["items"]) == 7


def test_get_update_delete(
    client: TestClient,
    admin_headers: dict[str, str],
    package_type_id: str,
    api_settings: Settings,
) -> None:
    created = client.post(
        "/api/packages",
        data=_form(package_type_id),
        files=[("images", ("front.jpg", JPEG_BYTES, "image/jpeg"))],
        headers=admin_headers,
    ).json()
    url = f"/api/packages/{created['id']}"
    old_image = created["image_url"]

    assert client.get(url, headers=admin_headers).json()["title"] == "Paris Getaway"

    updated = client.put(
        url,
        data=_form(package_type_id, title="Paris in Spring"),
        files=[("images", ("new.png", PNG_BYTES, "image/png"))],
        headers=admin_headers,
    )
    assert updated.status_code == 200
    body = updated.json()
    assert body["slug"] == "paris-in-spring"
    assert [img["url"] for img in body["images"]] != [old_image]
    assert len(_uploads(api_settings)) == 1

    assert client.delete(url, headers=admin_headers).json() == {"success": True}
    assert client.get(url, headers=admin_headers).status_code == 404
    assert _uploads(api_settings) == []


def test_update_keeps_listed_images(
    client: TestClient, admin_headers: dict[str, str], package_type_id: str
) -> None:
    created = client.post(
        "/api/packages",
        data=_form(package_type_id),
        files=[
            ("images", ("a.jpg", JPEG_BYTES, "image/jpeg")),
            ("images", ("b.jpg", JPEG_BYTES, "image/jpeg")),
        ],
        headers=admin_headers,
    ).json()
    keep = created["images"][1]["url"]

    response = client.put(
        f"/api/packages/{created['id']}",
        data={
            **_form(package_type_id),
            "existingImages": keep,
            f"existingImageIsMain{keep}": "true",
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    images = response.json()["images"]
    assert [(img["url"], img["is_main"]) for img in images] == [(keep, True)]


def test_unknown_package_is_404(client: TestClient, admin_headers: dict[str, str]) -> None:
    response = client.get(
        "/api/packages/00000000-0000-0000-0000-000000000000", headers=admin_headers
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Package not found"}


@pytest.mark.parametrize(
    ("headers_fixture", "expected"),
    [("editor_headers", 201), ("user_headers", 403)],
)
def test_role_access(
    request: pytest.FixtureRequest,
    client: TestClient,
    package_type_id: str,
    headers_fixture: str,
    expected: int,
) -> None:
    headers = request.getfixturevalue(headers_fixture)

    assert _create(client, headers, package_type_id).status_code == expected
