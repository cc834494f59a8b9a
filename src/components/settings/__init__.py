"""
Settings component - Site settings management.
"""

from .component import (
    DEFAULT_RULES,
    PUBLIC_FIELDS,
    get_default_settings,
    public_config,
    run_get,
    run_update,
)
from .models import (
    GetSettingsInput,
    GetSettingsOutput,
    UpdateSettingsInput,
    UpdateSettingsOutput,
    ValidationRule,
)
from .ports import SettingsRepoPort

__all__ = [
    # Component entry points
    "run_get",
    "run_update",
    # Models
    "GetSettingsInput",
    "GetSettingsOutput",
    "UpdateSettingsInput",
    "UpdateSettingsOutput",
    "ValidationRule",
    # Ports
    "SettingsRepoPort",
    # Functions
    "get_default_settings",
    "public_config",
    # Constants
    "DEFAULT_RULES",
    "PUBLIC_FIELDS",
]
