"""
Admin Settings API.

GET returns the stored settings (defaults while no row exists); POST takes
the settings form as multipart so the logo can be replaced or removed in
the same request.
"""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.datastructures import FormData

from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemImageStore
from src.adapters.sqlite.repos import SQLiteSiteSettingsRepo
from src.api.deps import (
    get_clock,
    get_current_user,
    get_image_store,
    get_policy,
    get_rules,
    get_site_settings_repo,
    get_upload_policy,
    require_permission,
)
from src.api.errors import raise_for_errors
from src.api.forms import is_checked, read_form, read_upload
from src.api.schemas import SettingsResponse
from src.components.media.models import UploadPolicy
from src.components.settings import (
    GetSettingsInput,
    UpdateSettingsInput,
    run_get,
    run_update,
)
from src.domain.entities import User
from src.domain.policy import PolicyEngine
from src.rules.models import Rules

router = APIRouter()

SETTINGS_FORM_FIELDS = {
    "name": "name",
    "description": "description",
    "smtpHost": "smtp_host",
    "smtpPort": "smtp_port",
    "smtpUser": "smtp_user",
    "smtpPass": "smtp_pass",
    "smtpFrom": "smtp_from",
    "facebookUrl": "facebook_url",
    "instagramUrl": "instagram_url",
    "twitterUrl": "twitter_url",
    "linkedinUrl": "linkedin_url",
    "youtubeUrl": "youtube_url",
}


def _settings_updates(form: FormData) -> dict[str, Any]:
    # Blank values are kept: an emptied field clears the stored value
    updates: dict[str, Any] = {}
    for wire_key, field_name in SETTINGS_FORM_FIELDS.items():
        value = form.get(wire_key)
        if isinstance(value, str):
            updates[field_name] = value
    if "status" in form:
        updates["status"] = is_checked(form.get("status"))
    return updates


@router.get("", response_model=SettingsResponse)
def get_settings(
    current_user: User = Depends(get_current_user),
    repo: SQLiteSiteSettingsRepo = Depends(get_site_settings_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> SettingsResponse:
    """Current site settings (admin only)."""
    require_permission(current_user, policy, "settings:manage")

    result = run_get(GetSettingsInput(), repo=repo)
    return SettingsResponse.model_validate(result.settings)


@router.post("", response_model=SettingsResponse)
def update_settings(
    form: FormData = Depends(read_form),
    current_user: User = Depends(get_current_user),
    repo: SQLiteSiteSettingsRepo = Depends(get_site_settings_repo),
    storage: FileSystemImageStore = Depends(get_image_store),
    clock: SystemClock = Depends(get_clock),
    upload_policy: UploadPolicy = Depends(get_upload_policy),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
) -> SettingsResponse:
    """
    Update site settings (admin only).

    A new `logo` file replaces the current one; `removeLogo` clears it.
    Otherwise the current logo is kept.
    """
    require_permission(current_user, policy, "settings:manage")

    inp = UpdateSettingsInput(
        updates=_settings_updates(form),
        logo=read_upload(form.get("logo")),
        remove_logo=is_checked(form.get("removeLogo")),
    )
    result = run_update(
        inp,
        repo=repo,
        storage=storage,
        time=clock,
        upload_policy=upload_policy,
        storage_timeout=rules.timeouts.storage_seconds,
    )
    if not result.success:
        raise_for_errors(result.errors, fallback="Invalid settings")

    return SettingsResponse.model_validate(result.settings)
