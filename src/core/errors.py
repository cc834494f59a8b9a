"""
Error taxonomy shared by the components.

Components report failures as a list of `ValidationError` values on their
output objects rather than raising; the code tells the HTTP layer which
class of failure it is:

- field-level codes (`required`, `invalid_value`, `slug_exists`, ...) -> 400
- `not_found` -> 404
- `storage_error`, `store_error` -> 500 (logged, generic message to caller)
- `timeout` -> 503, retryable
- `forbidden` -> 403 (user administration only; other routes check the
  policy before calling a component)
"""

from __future__ import annotations

from dataclasses import dataclass

NOT_FOUND = "not_found"
STORAGE_ERROR = "storage_error"
STORE_ERROR = "store_error"
TIMEOUT = "timeout"

SERVER_SIDE_CODES = frozenset({STORAGE_ERROR, STORE_ERROR})


@dataclass(frozen=True)
class ValidationError:
    """A single failure with an actionable message."""

    code: str
    message: str
    field: str | None = None


def not_found(what: str) -> ValidationError:
    return ValidationError(code=NOT_FOUND, message=f"{what} not found")


def is_not_found(errors: list[ValidationError]) -> bool:
    return any(e.code == NOT_FOUND for e in errors)


def errors_from_pydantic(exc: Exception) -> list[ValidationError]:
    """Parse a pydantic ValidationError into field-specific errors."""
    from pydantic import ValidationError as PydanticValidationError

    if not isinstance(exc, PydanticValidationError):
        return []

    errors: list[ValidationError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else "_schema"
        error_type = error.get("type", "unknown")
        code = "invalid_value"
        if "missing" in error_type:
            code = "required"
        elif "parsing" in error_type or "type" in error_type:
            code = "invalid_type"

        msg = error.get("msg", "Invalid value")
        errors.append(
            ValidationError(
                code=code,
                message=f"Field '{field}': {msg}",
                field=field,
            )
        )
    return errors
