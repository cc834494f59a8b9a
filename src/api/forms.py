"""
Multipart form helpers.

The admin forms send camelCase keys plus dynamic ones such as
`imageIsMain0` or `existingImageIsMain/uploads/...`, so routes read the raw
form instead of declaring every field.
"""

from collections.abc import Mapping
from typing import Any

from fastapi import Request
from starlette.datastructures import FormData, UploadFile

from src.components.media.models import UploadedFile


async def read_form(request: Request) -> FormData:
    return await request.form()


def is_checked(value: Any) -> bool:
    """HTML checkbox / JS boolean as posted in a form."""
    return isinstance(value, str) and value.strip().lower() in ("true", "on", "1")


def form_fields(form: FormData, mapping: Mapping[str, str]) -> dict[str, str]:
    """
    Pick text fields from a form, renaming wire keys to model fields.

    Empty values are left out so that required fields report as missing
    and optional ones keep their defaults.
    """
    fields: dict[str, str] = {}
    for wire_key, field_name in mapping.items():
        value = form.get(wire_key)
        if isinstance(value, str) and value.strip() != "":
            fields[field_name] = value
    return fields


def read_upload(value: Any) -> UploadedFile | None:
    """Read a posted file; None for a missing or empty file input."""
    if not isinstance(value, UploadFile) or not value.filename:
        return None
    data = value.file.read()
    return UploadedFile(
        filename=value.filename,
        content_type=value.content_type or "",
        data=data,
    )


def read_uploads(form: FormData, key: str) -> list[tuple[int, UploadedFile]]:
    """Every non-empty file posted under `key`, with its position in the form."""
    uploads = []
    for index, value in enumerate(form.getlist(key)):
        upload = read_upload(value)
        if upload is not None:
            uploads.append((index, upload))
    return uploads
