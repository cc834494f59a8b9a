"""
Packages component port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.components.listing.ports import ListQueryPort
from src.core.ports.storage import ImageStoragePort
from src.core.ports.time import TimePort
from src.domain.entities import PackageType, TravelPackage


class PackageRepoPort(ListQueryPort[TravelPackage], Protocol):
    def get_by_id(self, package_id: UUID) -> TravelPackage | None: ...
    def get_by_slug(self, slug: str) -> TravelPackage | None: ...

    def save(self, package: TravelPackage) -> TravelPackage:
        """Persist the package row and its image rows in one transaction."""
        ...

    def delete(self, package_id: UUID) -> None:
        """Remove the package row and its image rows in one transaction."""
        ...


class PackageTypeLookupPort(Protocol):
    def get_by_id(self, item_id: UUID) -> PackageType | None: ...


__all__ = [
    "ImageStoragePort",
    "PackageRepoPort",
    "PackageTypeLookupPort",
    "TimePort",
]
