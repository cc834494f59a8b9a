"""
Media component - upload checks, storing, and concurrent removal of files.

Entity components call these helpers around their database writes:
store first, write, then either remove what was dropped (after commit) or
remove what was just stored (when the write failed).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait

from src.core.errors import STORAGE_ERROR, TIMEOUT, ValidationError

from .models import RemoveRefsOutput, StoreUploadsOutput, UploadedFile, UploadPolicy
from .ports import ImageStoragePort, StorageError

logger = logging.getLogger(__name__)

MAX_REMOVE_WORKERS = 4


def validate_upload(
    upload: UploadedFile,
    policy: UploadPolicy,
    *,
    field: str,
) -> list[ValidationError]:
    """Check one upload against size, extension and MIME type limits."""
    errors: list[ValidationError] = []

    ext = os.path.splitext(upload.filename)[1].lower()
    if ext not in policy.allowed_extensions:
        errors.append(
            ValidationError(
                code="invalid_extension",
                message=(
                    f"File '{upload.filename}' has an unsupported extension. "
                    f"Allowed: {', '.join(sorted(policy.allowed_extensions))}"
                ),
                field=field,
            )
        )

    mime_type = (upload.content_type or "").split(";")[0].strip().lower()
    if mime_type not in policy.allowed_mime_types:
        errors.append(
            ValidationError(
                code="invalid_mime_type",
                message=f"MIME type '{mime_type or 'unknown'}' is not allowed",
                field=field,
            )
        )

    if upload.size == 0:
        errors.append(
            ValidationError(
                code="empty_file", message=f"File '{upload.filename}' is empty", field=field
            )
        )
    elif upload.size > policy.max_bytes:
        errors.append(
            ValidationError(
                code="file_too_large",
                message=(
                    f"File '{upload.filename}' is {upload.size} bytes; "
                    f"the maximum is {policy.max_bytes} bytes"
                ),
                field=field,
            )
        )

    return errors


def validate_uploads(
    uploads: Iterable[UploadedFile],
    policy: UploadPolicy,
    *,
    field: str,
) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for upload in uploads:
        errors.extend(validate_upload(upload, policy, field=field))
    return errors


def _discard_late_write(storage: ImageStoragePort) -> Callable[[Future[str]], None]:
    """Remove a file whose write finished after the caller gave up on it."""

    def discard(future: Future[str]) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        ref = future.result()
        try:
            storage.remove(ref)
        except StorageError:
            logger.exception("Removing late write '%s' failed", ref)

    return discard


def store_uploads(
    uploads: Sequence[UploadedFile],
    folder: str,
    *,
    storage: ImageStoragePort,
    timeout_seconds: float | None = None,
) -> StoreUploadsOutput:
    """
    Store every upload, all or nothing.

    Each write is bounded by `timeout_seconds`. If one write fails or runs
    over, the files already written for this call are removed again before
    the failure is reported; an overrun write is removed when it lands.
    """
    if not uploads:
        return StoreUploadsOutput()

    refs: list[str] = []
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="file-store")
    try:
        for upload in uploads:
            future = pool.submit(storage.store, upload.data, upload.filename, folder)
            done, _ = wait([future], timeout=timeout_seconds)
            if not done:
                logger.error(
                    "Storing upload '%s' in '%s' timed out after %ss",
                    upload.filename,
                    folder,
                    timeout_seconds,
                )
                future.add_done_callback(_discard_late_write(storage))
                return _abort(
                    refs,
                    ValidationError(
                        code=TIMEOUT, message="Storing the upload took too long. Please retry."
                    ),
                    storage=storage,
                    timeout_seconds=timeout_seconds,
                )
            try:
                refs.append(future.result())
            except StorageError:
                logger.exception("Storing upload '%s' in '%s' failed", upload.filename, folder)
                return _abort(
                    refs,
                    ValidationError(code=STORAGE_ERROR, message="Failed to store uploaded file"),
                    storage=storage,
                    timeout_seconds=timeout_seconds,
                )
    finally:
        pool.shutdown(wait=False, cancel_futures=True)
    return StoreUploadsOutput(refs=refs)


def _abort(
    refs: list[str],
    error: ValidationError,
    *,
    storage: ImageStoragePort,
    timeout_seconds: float | None,
) -> StoreUploadsOutput:
    if refs:
        remove_refs(refs, storage=storage, timeout_seconds=timeout_seconds)
    return StoreUploadsOutput(errors=[error], success=False)


def remove_refs(
    refs: Iterable[str],
    *,
    storage: ImageStoragePort,
    timeout_seconds: float | None = None,
) -> RemoveRefsOutput:
    """
    Remove files concurrently and wait for all of them.

    Never raises: failures are logged and reported on the output. A missing
    file is not a failure.
    """
    unique = list(dict.fromkeys(r for r in refs if r))
    if not unique:
        return RemoveRefsOutput()

    pool = ThreadPoolExecutor(
        max_workers=min(MAX_REMOVE_WORKERS, len(unique)), thread_name_prefix="file-remove"
    )
    try:
        futures = {pool.submit(storage.remove, ref): ref for ref in unique}
        done, not_done = wait(futures, timeout=timeout_seconds)

        removed: list[str] = []
        failed: list[str] = []
        for future in done:
            ref = futures[future]
            try:
                if future.result():
                    removed.append(ref)
            except StorageError:
                logger.exception("Removing '%s' failed", ref)
                failed.append(ref)

        if not_done:
            pending = sorted(futures[f] for f in not_done)
            logger.error(
                "File removal timed out after %ss; still pending: %s", timeout_seconds, pending
            )
            failed.extend(pending)
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    return RemoveRefsOutput(removed=removed, failed=failed, timed_out=bool(not_done))
