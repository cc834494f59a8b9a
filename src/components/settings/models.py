"""
Settings component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.components.media.models import UploadedFile
from src.core.errors import ValidationError
from src.domain.entities import SiteSettings


@dataclass(frozen=True)
class GetSettingsInput:
    """Input for getting settings."""

    pass


@dataclass(frozen=True)
class GetSettingsOutput:
    settings: SiteSettings


@dataclass(frozen=True)
class UpdateSettingsInput:
    """Field updates plus the logo change, if any."""

    updates: dict[str, Any]
    logo: UploadedFile | None = None
    remove_logo: bool = False


@dataclass(frozen=True)
class UpdateSettingsOutput:
    settings: SiteSettings
    errors: list[ValidationError] = field(default_factory=list)
    success: bool = True


@dataclass
class ValidationRule:
    """How one settings field is validated."""

    field_name: str
    min_length: int | None = None
    max_length: int | None = None
    required: bool = False
    is_url: bool = False
    is_email: bool = False
