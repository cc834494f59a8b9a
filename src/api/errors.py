"""
HTTP error boundary.

Every failure leaves the API as `{"error": "..."}`; validation failures add
a field list and timeouts add `"retryable": true`. Internal details are
logged, never returned.
"""

import logging
from typing import NoReturn

from fastapi import FastAPI, Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.components.auth import FORBIDDEN
from src.core.errors import NOT_FOUND, SERVER_SIDE_CODES, TIMEOUT, ValidationError

logger = logging.getLogger(__name__)


def _field_errors(errors: list[ValidationError]) -> list[dict[str, str | None]]:
    return [{"field": e.field, "code": e.code, "message": e.message} for e in errors]


def raise_for_errors(
    errors: list[ValidationError], *, fallback: str = "Invalid request"
) -> NoReturn:
    """Translate component errors into the matching HTTPException."""
    codes = {e.code for e in errors}

    if TIMEOUT in codes:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error": "Service temporarily unavailable", "retryable": True},
        )
    if codes & SERVER_SIDE_CODES:
        # Details were logged where the failure happened
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=next(e.message for e in errors if e.code in SERVER_SIDE_CODES),
        )
    if NOT_FOUND in codes:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=next(e.message for e in errors if e.code == NOT_FOUND),
        )
    if FORBIDDEN in codes:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    message = errors[0].message if len(errors) == 1 else fallback
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": message, "errors": _field_errors(errors)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append(
            {
                "field": ".".join(loc) or None,
                "code": "required" if err.get("type") == "missing" else "invalid_value",
                "message": err.get("msg", "Invalid value"),
            }
        )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
