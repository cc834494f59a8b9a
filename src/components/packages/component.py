"""
Packages component - travel package create/update/delete/get.

Write ordering:
- create: store uploads, then one transaction for package + image rows;
  if the transaction fails the uploads are removed again
- update: store new uploads, one transaction, then remove the files whose
  references were dropped (only after commit)
- delete: one transaction for package + image rows, then remove its files
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from src.components.media.component import remove_refs, store_uploads, validate_uploads
from src.components.media.models import UploadPolicy
from src.core.errors import STORE_ERROR, ValidationError, errors_from_pydantic, not_found
from src.domain.entities import PackageImage, TravelPackage
from src.domain.slug import slugify

from .models import (
    CreatePackageInput,
    DeletePackageInput,
    DeletePackageOutput,
    GetPackageInput,
    NewImage,
    PackageForm,
    PackageOutput,
    UpdatePackageInput,
)
from .ports import ImageStoragePort, PackageRepoPort, PackageTypeLookupPort, TimePort

logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "packages"
IMAGES_FIELD = "images"


def assign_primary(images: list[PackageImage]) -> list[PackageImage]:
    """
    Leave exactly one image flagged as primary.

    The first flagged image wins; with none flagged, the first image is
    promoted.
    """
    if not images:
        return []
    main_index = next((i for i, img in enumerate(images) if img.is_main), 0)
    return [img.model_copy(update={"is_main": i == main_index}) for i, img in enumerate(images)]


def primary_url(images: list[PackageImage]) -> str:
    return next((img.url for img in images if img.is_main), "")


def _parse_form(fields: dict[str, Any]) -> tuple[PackageForm | None, list[ValidationError]]:
    try:
        form = PackageForm(**fields)
    except PydanticValidationError as e:
        return None, errors_from_pydantic(e)

    if form.end_date < form.start_date:
        return None, [
            ValidationError(
                code="invalid_value",
                message="End date must not be before the start date",
                field="end_date",
            )
        ]
    return form, []


def _check_form(
    form: PackageForm,
    slug: str,
    *,
    repo: PackageRepoPort,
    type_repo: PackageTypeLookupPort,
    current_id: UUID | None = None,
) -> list[ValidationError]:
    errors: list[ValidationError] = []

    if not slug:
        errors.append(
            ValidationError(
                code="invalid_value",
                message="Title must contain at least one letter or digit",
                field="title",
            )
        )
    else:
        clash = repo.get_by_slug(slug)
        if clash is not None and clash.id != current_id:
            errors.append(
                ValidationError(
                    code="slug_exists",
                    message=f"A package with the slug '{slug}' already exists",
                    field="title",
                )
            )

    if type_repo.get_by_id(form.type_id) is None:
        errors.append(
            ValidationError(
                code="invalid_reference",
                message="Package type does not exist",
                field="type_id",
            )
        )

    return errors


def _new_image_rows(
    new_images: list[NewImage], refs: list[str], time: TimePort
) -> list[PackageImage]:
    now = time.now_utc()
    return [
        PackageImage(url=ref, is_main=img.is_main, created_at=now)
        for img, ref in zip(new_images, refs, strict=True)
    ]


def _store_error() -> list[ValidationError]:
    return [ValidationError(code=STORE_ERROR, message="Failed to save package")]


def run_get(inp: GetPackageInput, *, repo: PackageRepoPort) -> PackageOutput:
    if inp.package_id is not None:
        package = repo.get_by_id(inp.package_id)
    elif inp.slug:
        package = repo.get_by_slug(inp.slug)
    else:
        package = None

    if package is None or (inp.active_only and package.status != "ACTIVE"):
        return PackageOutput(errors=[not_found("Package")], success=False)
    return PackageOutput(package=package)


def run_create(
    inp: CreatePackageInput,
    *,
    repo: PackageRepoPort,
    type_repo: PackageTypeLookupPort,
    storage: ImageStoragePort,
    time: TimePort,
    upload_policy: UploadPolicy,
    storage_timeout: float | None = None,
) -> PackageOutput:
    """
    Create a package with its images.

    The slug is derived from the title. Uploaded files are stored before
    the database write and removed again if that write fails.
    """
    form, errors = _parse_form(inp.fields)
    if form is None:
        return PackageOutput(errors=errors, success=False)

    slug = slugify(form.title)
    errors = _check_form(form, slug, repo=repo, type_repo=type_repo)
    errors.extend(
        validate_uploads([img.upload for img in inp.new_images], upload_policy, field=IMAGES_FIELD)
    )
    if errors:
        return PackageOutput(errors=errors, success=False)

    stored = store_uploads(
        [img.upload for img in inp.new_images],
        UPLOAD_FOLDER,
        storage=storage,
        timeout_seconds=storage_timeout,
    )
    if not stored.success:
        return PackageOutput(errors=stored.errors, success=False)

    images = assign_primary(_new_image_rows(inp.new_images, stored.refs, time))
    now = time.now_utc()
    package = TravelPackage(
        **form.model_dump(),
        slug=slug,
        images=images,
        image_url=primary_url(images),
        created_at=now,
        updated_at=now,
    )

    try:
        saved = repo.save(package)
    except Exception:
        logger.exception("Saving new package '%s' failed; discarding its uploads", slug)
        remove_refs(stored.refs, storage=storage, timeout_seconds=storage_timeout)
        return PackageOutput(errors=_store_error(), success=False)

    logger.info("Created package %s (%s) with %d image(s)", saved.id, slug, len(images))
    return PackageOutput(package=saved)


def run_update(
    inp: UpdatePackageInput,
    *,
    repo: PackageRepoPort,
    type_repo: PackageTypeLookupPort,
    storage: ImageStoragePort,
    time: TimePort,
    upload_policy: UploadPolicy,
    storage_timeout: float | None = None,
) -> PackageOutput:
    """
    Update a package's fields and image set.

    Kept images are matched by URL against the stored ones; URLs that do not
    belong to this package are ignored. Files for dropped images are removed
    only after the new state is committed.
    """
    existing = repo.get_by_id(inp.package_id)
    if existing is None:
        return PackageOutput(errors=[not_found("Package")], success=False)

    form, errors = _parse_form(inp.fields)
    if form is None:
        return PackageOutput(errors=errors, success=False)

    slug = slugify(form.title)
    errors = _check_form(form, slug, repo=repo, type_repo=type_repo, current_id=existing.id)
    errors.extend(
        validate_uploads([img.upload for img in inp.new_images], upload_policy, field=IMAGES_FIELD)
    )
    if errors:
        return PackageOutput(errors=errors, success=False)

    owned = {img.url: img for img in existing.images}
    kept: list[PackageImage] = []
    for keep in inp.kept_images:
        current = owned.get(keep.url)
        if current is None:
            logger.warning("Ignoring image %s: not attached to package %s", keep.url, existing.id)
            continue
        if any(k.url == keep.url for k in kept):
            continue
        kept.append(current.model_copy(update={"is_main": keep.is_main}))

    stored = store_uploads(
        [img.upload for img in inp.new_images],
        UPLOAD_FOLDER,
        storage=storage,
        timeout_seconds=storage_timeout,
    )
    if not stored.success:
        return PackageOutput(errors=stored.errors, success=False)

    images = assign_primary(kept + _new_image_rows(inp.new_images, stored.refs, time))
    updated = existing.model_copy(
        update={
            **form.model_dump(),
            "slug": slug,
            "images": images,
            "image_url": primary_url(images),
            "updated_at": time.now_utc(),
        }
    )

    try:
        saved = repo.save(updated)
    except Exception:
        logger.exception("Updating package %s failed; discarding new uploads", existing.id)
        remove_refs(stored.refs, storage=storage, timeout_seconds=storage_timeout)
        return PackageOutput(errors=_store_error(), success=False)

    still_used = set(saved.image_refs())
    dropped = [ref for ref in existing.image_refs() if ref not in still_used]
    if dropped:
        removal = remove_refs(dropped, storage=storage, timeout_seconds=storage_timeout)
        if not removal.success:
            logger.warning("Package %s: orphaned files left behind: %s", saved.id, removal.failed)

    return PackageOutput(package=saved)


def run_delete(
    inp: DeletePackageInput,
    *,
    repo: PackageRepoPort,
    storage: ImageStoragePort,
    storage_timeout: float | None = None,
) -> DeletePackageOutput:
    existing = repo.get_by_id(inp.package_id)
    if existing is None:
        return DeletePackageOutput(errors=[not_found("Package")], success=False)

    try:
        repo.delete(existing.id)
    except Exception:
        logger.exception("Deleting package %s failed", existing.id)
        return DeletePackageOutput(
            errors=[ValidationError(code=STORE_ERROR, message="Failed to delete package")],
            success=False,
        )

    removal = remove_refs(existing.image_refs(), storage=storage, timeout_seconds=storage_timeout)
    if not removal.success:
        logger.warning("Package %s: orphaned files left behind: %s", existing.id, removal.failed)

    logger.info("Deleted package %s and %d file(s)", existing.id, len(removal.removed))
    return DeletePackageOutput(orphaned_refs=removal.failed)
