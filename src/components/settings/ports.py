"""
Settings component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.core.ports.storage import ImageStoragePort
from src.core.ports.time import TimePort
from src.domain.entities import SiteSettings


class SettingsRepoPort(Protocol):
    """Repository interface for settings."""

    def get(self) -> SiteSettings | None:
        """Get current settings, or None if not configured."""
        ...

    def save(self, settings: SiteSettings) -> SiteSettings:
        """Save or update settings (upsert)."""
        ...


__all__ = ["ImageStoragePort", "SettingsRepoPort", "TimePort"]
