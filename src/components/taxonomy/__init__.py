"""
Taxonomy component - Package types and article categories.
"""

from .component import run_create, run_delete, run_list, run_update
from .models import (
    ARTICLE_CATEGORIES,
    PACKAGE_TYPES,
    CreateTaxonInput,
    DeleteTaxonInput,
    ListTaxaInput,
    ListTaxaOutput,
    TaxonomyForm,
    TaxonomyKind,
    TaxonOutput,
    TaxonUsage,
    UpdateTaxonInput,
)
from .ports import TaxonomyRepoPort

__all__ = [
    "run_create",
    "run_update",
    "run_delete",
    "run_list",
    "ARTICLE_CATEGORIES",
    "PACKAGE_TYPES",
    "CreateTaxonInput",
    "DeleteTaxonInput",
    "ListTaxaInput",
    "ListTaxaOutput",
    "TaxonomyForm",
    "TaxonomyKind",
    "TaxonOutput",
    "TaxonUsage",
    "UpdateTaxonInput",
    "TaxonomyRepoPort",
]
