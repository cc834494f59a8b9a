"""
Articles component - article create/update/delete/get.

Same write ordering as packages, with a single optional cover image.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from src.components.media.component import remove_refs, store_uploads, validate_upload
from src.components.media.models import UploadPolicy
from src.core.errors import STORE_ERROR, ValidationError, errors_from_pydantic, not_found
from src.domain.entities import Article
from src.domain.slug import slugify

from .models import (
    ArticleForm,
    ArticleOutput,
    CreateArticleInput,
    DeleteArticleInput,
    DeleteArticleOutput,
    GetArticleInput,
    UpdateArticleInput,
)
from .ports import ArticleRepoPort, CategoryLookupPort, ImageStoragePort, TimePort

logger = logging.getLogger(__name__)

UPLOAD_FOLDER = "articles"


def _parse_form(fields: dict[str, Any]) -> tuple[ArticleForm | None, list[ValidationError]]:
    try:
        return ArticleForm(**fields), []
    except PydanticValidationError as e:
        return None, errors_from_pydantic(e)


def _check(
    form: ArticleForm,
    slug: str,
    *,
    repo: ArticleRepoPort,
    category_repo: CategoryLookupPort,
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
                    message=f"An article with the slug '{slug}' already exists",
                    field="title",
                )
            )

    if category_repo.get_by_id(form.category_id) is None:
        errors.append(
            ValidationError(
                code="invalid_reference",
                message="Article category does not exist",
                field="category_id",
            )
        )
    return errors


def run_get(inp: GetArticleInput, *, repo: ArticleRepoPort) -> ArticleOutput:
    if inp.article_id is not None:
        article = repo.get_by_id(inp.article_id)
    elif inp.slug:
        article = repo.get_by_slug(inp.slug)
    else:
        article = None

    if article is None or (inp.published_only and not article.published):
        return ArticleOutput(errors=[not_found("Article")], success=False)
    return ArticleOutput(article=article)


def run_create(
    inp: CreateArticleInput,
    *,
    repo: ArticleRepoPort,
    category_repo: CategoryLookupPort,
    storage: ImageStoragePort,
    time: TimePort,
    upload_policy: UploadPolicy,
    storage_timeout: float | None = None,
) -> ArticleOutput:
    form, errors = _parse_form(inp.fields)
    if form is None:
        return ArticleOutput(errors=errors, success=False)

    slug = slugify(form.title)
    errors = _check(form, slug, repo=repo, category_repo=category_repo)
    if inp.image is not None:
        errors.extend(validate_upload(inp.image, upload_policy, field="image"))
    if errors:
        return ArticleOutput(errors=errors, success=False)

    stored = store_uploads(
        [inp.image] if inp.image else [],
        UPLOAD_FOLDER,
        storage=storage,
        timeout_seconds=storage_timeout,
    )
    if not stored.success:
        return ArticleOutput(errors=stored.errors, success=False)

    now = time.now_utc()
    article = Article(
        **form.model_dump(),
        slug=slug,
        image_url=stored.refs[0] if stored.refs else "",
        created_at=now,
        updated_at=now,
    )

    try:
        saved = repo.save(article)
    except Exception:
        logger.exception("Saving new article '%s' failed; discarding its upload", slug)
        remove_refs(stored.refs, storage=storage, timeout_seconds=storage_timeout)
        return ArticleOutput(
            errors=[ValidationError(code=STORE_ERROR, message="Failed to save article")],
            success=False,
        )

    logger.info("Created article %s (%s)", saved.id, slug)
    return ArticleOutput(article=saved)


def run_update(
    inp: UpdateArticleInput,
    *,
    repo: ArticleRepoPort,
    category_repo: CategoryLookupPort,
    storage: ImageStoragePort,
    time: TimePort,
    upload_policy: UploadPolicy,
    storage_timeout: float | None = None,
) -> ArticleOutput:
    """
    Update an article. A new image replaces the current one; `remove_image`
    clears it. The replaced file is removed after the write commits.
    """
    existing = repo.get_by_id(inp.article_id)
    if existing is None:
        return ArticleOutput(errors=[not_found("Article")], success=False)

    form, errors = _parse_form(inp.fields)
    if form is None:
        return ArticleOutput(errors=errors, success=False)

    slug = slugify(form.title)
    errors = _check(form, slug, repo=repo, category_repo=category_repo, current_id=existing.id)
    if inp.image is not None:
        errors.extend(validate_upload(inp.image, upload_policy, field="image"))
    if errors:
        return ArticleOutput(errors=errors, success=False)

    stored = store_uploads(
        [inp.image] if inp.image else [],
        UPLOAD_FOLDER,
        storage=storage,
        timeout_seconds=storage_timeout,
    )
    if not stored.success:
        return ArticleOutput(errors=stored.errors, success=False)

    if stored.refs:
        image_url = stored.refs[0]
    elif inp.remove_image:
        image_url = ""
    else:
        image_url = existing.image_url

    updated = existing.model_copy(
        update={
            **form.model_dump(),
            "slug": slug,
            "image_url": image_url,
            "updated_at": time.now_utc(),
        }
    )

    try:
        saved = repo.save(updated)
    except Exception:
        logger.exception("Updating article %s failed; discarding new upload", existing.id)
        remove_refs(stored.refs, storage=storage, timeout_seconds=storage_timeout)
        return ArticleOutput(
            errors=[ValidationError(code=STORE_ERROR, message="Failed to save article")],
            success=False,
        )

    if existing.image_url and existing.image_url != saved.image_url:
        removal = remove_refs(
            [existing.image_url], storage=storage, timeout_seconds=storage_timeout
        )
        if not removal.success:
            logger.warning("Article %s: orphaned file left behind: %s", saved.id, removal.failed)

    return ArticleOutput(article=saved)


def run_delete(
    inp: DeleteArticleInput,
    *,
    repo: ArticleRepoPort,
    storage: ImageStoragePort,
    storage_timeout: float | None = None,
) -> DeleteArticleOutput:
    existing = repo.get_by_id(inp.article_id)
    if existing is None:
        return DeleteArticleOutput(errors=[not_found("Article")], success=False)

    try:
        repo.delete(existing.id)
    except Exception:
        logger.exception("Deleting article %s failed", existing.id)
        return DeleteArticleOutput(
            errors=[ValidationError(code=STORE_ERROR, message="Failed to delete article")],
            success=False,
        )

    removal = remove_refs([existing.image_url], storage=storage, timeout_seconds=storage_timeout)
    return DeleteArticleOutput(orphaned_refs=removal.failed)
