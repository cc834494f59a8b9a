"""
Media component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.core.errors import ValidationError
from src.rules.models import UploadsRules


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded file as received from the client, fully read."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class UploadPolicy:
    """Which uploads are accepted."""

    max_bytes: int
    allowed_extensions: frozenset[str]
    allowed_mime_types: frozenset[str]

    @classmethod
    def from_rules(cls, uploads: UploadsRules) -> UploadPolicy:
        return cls(
            max_bytes=uploads.max_upload_bytes,
            allowed_extensions=frozenset(e.lower() for e in uploads.allowlist_extensions),
            allowed_mime_types=frozenset(m.lower() for m in uploads.allowlist_mime_types),
        )


@dataclass(frozen=True)
class StoreUploadsOutput:
    """References of stored files, in upload order."""

    refs: list[str] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class RemoveRefsOutput:
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return not self.failed and not self.timed_out
