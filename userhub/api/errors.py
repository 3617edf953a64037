"""Exception handlers rendering every failure as {error, details?}."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userhub.schemas.errors import ErrorResponse, format_validation_errors

logger = logging.getLogger(__name__)


def _envelope(body: ErrorResponse) -> dict:
    return body.model_dump(exclude_none=True)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed path/body input -> 400 with a field/message list."""
    body = ErrorResponse(
        error="Validation failed",
        details=format_validation_errors(exc.errors()),
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_envelope(body))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException raised by handlers -> {error: detail} with the same status and headers."""
    body = ErrorResponse(error=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(body),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else -> generic 500; the traceback goes to the log only."""
    logger.exception("Unhandled error: %s %s", request.method, request.url.path)
    body = ErrorResponse(error="Internal server error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(body),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on the app."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
