"""Translate domain errors into JSON HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from snippetbin.core.errors import (
    DuplicateId,
    Forbidden,
    InvalidCredentials,
    InvalidInput,
    NotFound,
    SecondFactorInvalid,
    SecondFactorRequired,
    SnippetBinError,
    StorageFailure,
    UsernameTaken,
    WeakPassword,
)

logger = logging.getLogger(__name__)

_STATUS_MAP: dict[type[SnippetBinError], int] = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    WeakPassword: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    DuplicateId: status.HTTP_409_CONFLICT,
    UsernameTaken: status.HTTP_409_CONFLICT,
    Forbidden: status.HTTP_403_FORBIDDEN,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    SecondFactorRequired: status.HTTP_401_UNAUTHORIZED,
    SecondFactorInvalid: status.HTTP_401_UNAUTHORIZED,
    StorageFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: SnippetBinError) -> int:
    """Return the HTTP status for ``exc``, walking its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def _domain_error_handler(_request: Request, exc: SnippetBinError) -> JSONResponse:
    code = status_for(exc)
    content: dict[str, object] = {"detail": exc.message}
    if isinstance(exc, StorageFailure):
        # Storage details stay in the server log.
        content = {"detail": "Storage is temporarily unavailable"}
    if isinstance(exc, SecondFactorRequired):
        content["second_factor_required"] = True
    return JSONResponse(status_code=code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(SnippetBinError, _domain_error_handler)  # type: ignore[arg-type]
