"""Builders for test inputs shared across the suite."""

from typing import Any
from uuid import UUID

from src.components.media.models import UploadedFile

# Smallest byte strings that start like the real formats
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def jpeg(name: str = "photo.jpg") -> UploadedFile:
    return UploadedFile(filename=name, content_type="image/jpeg", data=JPEG_BYTES)


def png(name: str = "photo.png") -> UploadedFile:
    return UploadedFile(filename=name, content_type="image/png", data=PNG_BYTES)


def package_fields(type_id: UUID, **overrides: Any) -> dict[str, Any]:
    """A valid package form, as the routes hand it to the component."""
    fields: dict[str, Any] = {
        "code": "PKG-001",
        "title": "Paris Getaway",
        "description": "Five days in Paris.",
        "location": "Paris, France",
        "price": "1299.50",
        "start_date": "2025-06-01",
        "end_date": "2025-06-05",
        "max_guests": "4",
        "status": "ACTIVE",
        "type_id": str(type_id),
    }
    fields.update(overrides)
    return fields


def article_fields(category_id: UUID, **overrides: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "title": "Packing for Patagonia",
        "content": "Layers, layers, layers.",
        "excerpt": "What to bring south.",
        "category_id": str(category_id),
        "published": True,
    }
    fields.update(overrides)
    return fields
