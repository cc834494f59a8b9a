"""Public settings endpoint for exposing site configuration to visitors."""

from fastapi import APIRouter, Depends

from src.adapters.sqlite.repos import SQLiteSiteSettingsRepo
from src.api.deps import get_site_settings_repo
from src.api.schemas import PublicConfigResponse
from src.components.settings import GetSettingsInput, public_config, run_get

router = APIRouter()


@router.get("/config", response_model=PublicConfigResponse)
def get_public_config(
    repo: SQLiteSiteSettingsRepo = Depends(get_site_settings_repo),
) -> PublicConfigResponse:
    """
    Site configuration that is safe to expose without authentication.

    Answers during maintenance too, so the storefront can render its
    maintenance page. SMTP settings are never included.
    """
    result = run_get(GetSettingsInput(), repo=repo)
    return PublicConfigResponse(**public_config(result.settings))
