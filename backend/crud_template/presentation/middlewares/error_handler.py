"""Translate unhandled exceptions into the uniform JSON error payload.

Every error response has the shape ``{isCustomException, messages, errorType}``.
Custom kinds carry their own message; every other kind reports the message
chain of the exception and its causes.
"""

import logging
from dataclasses import dataclass

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from crud_template.application.schemas import ErrorResponse
from crud_template.domain.exceptions import (
    EntityNotFoundError,
    InvalidOperationError,
    MalformedArgumentError,
    SchemaMismatchError,
    UnauthorizedError,
    ValidationFailureError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorMapping:
    status_code: int
    is_custom: bool


# First match wins, so subclasses must precede their bases.
# EntityNotFoundError sits before ValidationFailureError so the
# "already active/inactive" RecordStateError answers 404.
_ERROR_MAPPINGS: tuple[tuple[type[Exception], ErrorMapping], ...] = (
    (SchemaMismatchError, ErrorMapping(status.HTTP_403_FORBIDDEN, True)),
    (InvalidOperationError, ErrorMapping(status.HTTP_403_FORBIDDEN, True)),
    (EntityNotFoundError, ErrorMapping(status.HTTP_404_NOT_FOUND, False)),
    (ValidationFailureError, ErrorMapping(status.HTTP_400_BAD_REQUEST, True)),
    (UnauthorizedError, ErrorMapping(status.HTTP_403_FORBIDDEN, False)),
    (MalformedArgumentError, ErrorMapping(status.HTTP_403_FORBIDDEN, False)),
)

_UNEXPECTED = ErrorMapping(status.HTTP_500_INTERNAL_SERVER_ERROR, False)


def resolve_mapping(exc: Exception) -> ErrorMapping:
    for error_cls, mapping in _ERROR_MAPPINGS:
        if isinstance(exc, error_cls):
            return mapping
    return _UNEXPECTED


def message_chain(exc: BaseException) -> str:
    """Messages of the exception and its causes, outermost first, ``" | "``-joined."""
    messages: list[str] = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or type(current).__name__)
        current = current.__cause__ or current.__context__
    return " | ".join(messages)


def build_error_response(exc: Exception) -> JSONResponse:
    mapping = resolve_mapping(exc)
    error_type = getattr(exc, "error_type", None) or type(exc).__name__
    message = str(exc) if mapping.is_custom else message_chain(exc)
    payload = ErrorResponse(
        is_custom_exception=mapping.is_custom,
        messages=[message],
        error_type=error_type,
    )
    return JSONResponse(
        status_code=mapping.status_code,
        content=payload.model_dump(mode="json", by_alias=True),
    )


class HandleErrorMiddleware(BaseHTTPMiddleware):
    """Catch everything the endpoints raise and answer with ``ErrorResponse``."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            mapping = resolve_mapping(exc)
            if mapping is _UNEXPECTED:
                logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            else:
                logger.info(
                    "%s on %s %s: %s",
                    type(exc).__name__,
                    request.method,
                    request.url.path,
                    exc,
                )
            return build_error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies and parameters are validation failures (400)."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    payload = ErrorResponse(
        is_custom_exception=True,
        messages=messages,
        error_type=ValidationFailureError.error_type,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=payload.model_dump(mode="json", by_alias=True),
    )


def register_error_handling(app: FastAPI) -> None:
    app.add_middleware(HandleErrorMiddleware)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
