"""
Settings component - Site settings management.

Provides singleton settings read/write with validation and fallback defaults.

Key behaviors:
- GET always returns settings (fallback to defaults if missing)
- Updates are validated before persisting
- A replaced or removed logo file is deleted only after the new row commits
"""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import urlparse

from pydantic import ValidationError as PydanticValidationError

from src.components.media.component import remove_refs, store_uploads, validate_upload
from src.components.media.models import UploadPolicy
from src.core.errors import STORE_ERROR, ValidationError, errors_from_pydantic
from src.domain.entities import SiteSettings

from .models import (
    GetSettingsInput,
    GetSettingsOutput,
    UpdateSettingsInput,
    UpdateSettingsOutput,
    ValidationRule,
)
from .ports import ImageStoragePort, SettingsRepoPort, TimePort

logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "logos"

SOCIAL_FIELDS = (
    "facebook_url",
    "instagram_url",
    "twitter_url",
    "linkedin_url",
    "youtube_url",
)

# Fields safe to show to anonymous visitors
PUBLIC_FIELDS = ("name", "description", "logo", "status", *SOCIAL_FIELDS)

EDITABLE_FIELDS = (
    "name",
    "description",
    "status",
    "smtp_host",
    "smtp_port",
    "smtp_user",
    "smtp_pass",
    "smtp_from",
    *SOCIAL_FIELDS,
)

# --- Default Validation Rules ---

DEFAULT_RULES = [
    ValidationRule(field_name="name", min_length=1, max_length=100, required=True),
    ValidationRule(field_name="description", max_length=500),
    ValidationRule(field_name="smtp_host", max_length=255),
    ValidationRule(field_name="smtp_from", is_email=True),
    *(ValidationRule(field_name=f, is_url=True) for f in SOCIAL_FIELDS),
]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# --- Default Settings ---


def get_default_settings() -> SiteSettings:
    """Fallback settings used while no row exists."""
    return SiteSettings(name="Travel Agency", description="", status=True)


def public_config(settings: SiteSettings) -> dict[str, Any]:
    """The subset of settings visitors may see (no SMTP credentials)."""
    return {f: getattr(settings, f) for f in PUBLIC_FIELDS}


# --- Validation Functions ---


def _validate_url(value: str) -> bool:
    if not value:
        return True
    result = urlparse(value)
    return result.scheme in ("http", "https") and bool(result.netloc)


def _validate_settings(
    settings: SiteSettings,
    rules: list[ValidationRule],
) -> list[ValidationError]:
    """Validate settings against rules."""
    errors: list[ValidationError] = []

    for rule in rules:
        value = getattr(settings, rule.field_name, None)

        if rule.required and (value is None or value == ""):
            errors.append(
                ValidationError(
                    field=rule.field_name,
                    code="required",
                    message=f"Field '{rule.field_name}' is required",
                )
            )
            continue

        if value is None or value == "" or not isinstance(value, str):
            continue

        if rule.min_length is not None and len(value) < rule.min_length:
            errors.append(
                ValidationError(
                    field=rule.field_name,
                    code="min_length",
                    message=(
                        f"Field '{rule.field_name}' must be at least "
                        f"{rule.min_length} characters"
                    ),
                )
            )

        if rule.max_length is not None and len(value) > rule.max_length:
            errors.append(
                ValidationError(
                    field=rule.field_name,
                    code="max_length",
                    message=(
                        f"Field '{rule.field_name}' must not exceed "
                        f"{rule.max_length} characters"
                    ),
                )
            )

        if rule.is_url and not _validate_url(value):
            errors.append(
                ValidationError(
                    field=rule.field_name,
                    code="invalid_url",
                    message=f"Field '{rule.field_name}' must be a valid http or https URL",
                )
            )

        if rule.is_email and not _EMAIL_RE.match(value):
            errors.append(
                ValidationError(
                    field=rule.field_name,
                    code="invalid_email",
                    message=f"Field '{rule.field_name}' must be a valid email address",
                )
            )

    return errors


def _normalise(updates: dict[str, Any]) -> dict[str, Any]:
    """Keep editable keys only; blank optional strings become None."""
    clean: dict[str, Any] = {}
    for key, value in updates.items():
        if key not in EDITABLE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
            if value == "" and key not in ("name", "description"):
                value = None
        clean[key] = value
    return clean


# --- Component Entry Points ---


def run_get(
    inp: GetSettingsInput,
    *,
    repo: SettingsRepoPort,
) -> GetSettingsOutput:
    """Get current settings; defaults when the row is missing."""
    settings = repo.get()
    if settings is None:
        settings = get_default_settings()
    return GetSettingsOutput(settings=settings)


def run_update(
    inp: UpdateSettingsInput,
    *,
    repo: SettingsRepoPort,
    storage: ImageStoragePort,
    time: TimePort,
    upload_policy: UploadPolicy,
    rules: list[ValidationRule] | None = None,
    storage_timeout: float | None = None,
) -> UpdateSettingsOutput:
    """
    Update settings.

    Args:
        inp: Field updates and logo change.
        repo: Settings repository port.
        storage: Image store for the logo.
        time: Clock for updated_at.
        upload_policy: Accepted logo uploads.
        rules: Optional custom validation rules.
        storage_timeout: Bound on logo file removal.

    Returns:
        UpdateSettingsOutput with updated settings or validation errors.
    """
    if rules is None:
        rules = DEFAULT_RULES

    current = repo.get()
    if current is None:
        current = get_default_settings()

    updated_dict = current.model_dump()
    updated_dict.update(_normalise(inp.updates))
    updated_dict["updated_at"] = time.now_utc()

    try:
        new_settings = SiteSettings(**updated_dict)
    except PydanticValidationError as e:
        return UpdateSettingsOutput(settings=current, errors=errors_from_pydantic(e), success=False)

    errors = _validate_settings(new_settings, rules)
    if inp.logo is not None:
        errors.extend(validate_upload(inp.logo, upload_policy, field="logo"))
    if errors:
        return UpdateSettingsOutput(settings=current, errors=errors, success=False)

    stored = store_uploads(
        [inp.logo] if inp.logo else [],
        UPLOAD_FOLDER,
        storage=storage,
        timeout_seconds=storage_timeout,
    )
    if not stored.success:
        return UpdateSettingsOutput(settings=current, errors=stored.errors, success=False)

    if stored.refs:
        new_settings.logo = stored.refs[0]
    elif inp.remove_logo:
        new_settings.logo = None

    try:
        saved = repo.save(new_settings)
    except Exception:
        logger.exception("Saving site settings failed; discarding new logo")
        remove_refs(stored.refs, storage=storage, timeout_seconds=storage_timeout)
        return UpdateSettingsOutput(
            settings=current,
            errors=[ValidationError(code=STORE_ERROR, message="Failed to save settings")],
            success=False,
        )

    if current.logo and current.logo != saved.logo:
        remove_refs([current.logo], storage=storage, timeout_seconds=storage_timeout)

    logger.info("Site settings updated (online=%s)", saved.status)
    return UpdateSettingsOutput(settings=saved)
