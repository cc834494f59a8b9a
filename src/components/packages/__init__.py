"""
Packages component - Travel package management.
"""

from .component import assign_primary, run_create, run_delete, run_get, run_update
from .models import (
    PACKAGE_LISTING,
    PUBLIC_PACKAGE_LISTING,
    CreatePackageInput,
    DeletePackageInput,
    DeletePackageOutput,
    GetPackageInput,
    KeptImage,
    NewImage,
    PackageForm,
    PackageOutput,
    UpdatePackageInput,
)
from .ports import PackageRepoPort, PackageTypeLookupPort

__all__ = [
    # Entry points
    "run_create",
    "run_update",
    "run_delete",
    "run_get",
    "assign_primary",
    # Listing
    "PACKAGE_LISTING",
    "PUBLIC_PACKAGE_LISTING",
    # Models
    "CreatePackageInput",
    "DeletePackageInput",
    "DeletePackageOutput",
    "GetPackageInput",
    "KeptImage",
    "NewImage",
    "PackageForm",
    "PackageOutput",
    "UpdatePackageInput",
    # Ports
    "PackageRepoPort",
    "PackageTypeLookupPort",
]
