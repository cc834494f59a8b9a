"""
Taxonomy component - CRUD for package types and article categories.

Entries still referenced by packages or articles cannot be deleted.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from src.core.errors import STORE_ERROR, ValidationError, errors_from_pydantic, not_found

from .models import (
    CreateTaxonInput,
    DeleteTaxonInput,
    ListTaxaInput,
    ListTaxaOutput,
    TaxonomyForm,
    TaxonOutput,
    TaxonUsage,
    UpdateTaxonInput,
)
from .ports import TaxonomyRepoPort, TimePort

logger = logging.getLogger(__name__)


def run_list(inp: ListTaxaInput, *, repo: TaxonomyRepoPort) -> ListTaxaOutput:
    return ListTaxaOutput(
        items=[TaxonUsage(item=item, usage_count=n) for item, n in repo.list_with_counts()]
    )


def run_create(inp: CreateTaxonInput, *, repo: TaxonomyRepoPort, time: TimePort) -> TaxonOutput:
    try:
        form = TaxonomyForm(**inp.fields)
    except PydanticValidationError as e:
        return TaxonOutput(errors=errors_from_pydantic(e), success=False)

    now = time.now_utc()
    item = inp.kind.entity(**form.model_dump(), created_at=now, updated_at=now)
    try:
        saved = repo.save(item)
    except Exception:
        logger.exception("Saving %s '%s' failed", inp.kind.label.lower(), form.name)
        return TaxonOutput(
            errors=[ValidationError(code=STORE_ERROR, message=f"Failed to save {inp.kind.label}")],
            success=False,
        )
    return TaxonOutput(item=saved)


def run_update(inp: UpdateTaxonInput, *, repo: TaxonomyRepoPort, time: TimePort) -> TaxonOutput:
    existing = repo.get_by_id(inp.item_id)
    if existing is None:
        return TaxonOutput(errors=[not_found(inp.kind.label)], success=False)

    try:
        form = TaxonomyForm(**inp.fields)
    except PydanticValidationError as e:
        return TaxonOutput(errors=errors_from_pydantic(e), success=False)

    updated = existing.model_copy(update={**form.model_dump(), "updated_at": time.now_utc()})
    try:
        saved = repo.save(updated)
    except Exception:
        logger.exception("Updating %s %s failed", inp.kind.label.lower(), inp.item_id)
        return TaxonOutput(
            errors=[ValidationError(code=STORE_ERROR, message=f"Failed to save {inp.kind.label}")],
            success=False,
        )
    return TaxonOutput(item=saved)


def run_delete(inp: DeleteTaxonInput, *, repo: TaxonomyRepoPort) -> TaxonOutput:
    existing = repo.get_by_id(inp.item_id)
    if existing is None:
        return TaxonOutput(errors=[not_found(inp.kind.label)], success=False)

    in_use = repo.count_usage(inp.item_id)
    if in_use:
        return TaxonOutput(
            errors=[
                ValidationError(
                    code="in_use",
                    message=(
                        f"{inp.kind.label} '{existing.name}' is used by "
                        f"{in_use} {inp.kind.used_by} and cannot be deleted"
                    ),
                )
            ],
            success=False,
        )

    try:
        repo.delete(inp.item_id)
    except Exception:
        logger.exception("Deleting %s %s failed", inp.kind.label.lower(), inp.item_id)
        return TaxonOutput(
            errors=[
                ValidationError(code=STORE_ERROR, message=f"Failed to delete {inp.kind.label}")
            ],
            success=False,
        )
    return TaxonOutput(item=existing)
