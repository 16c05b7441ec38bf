"""Translate domain errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from echoboard.errors import (
    CapacityExceeded,
    DuplicateMembership,
    EchoBoardError,
    InvalidStateTransition,
    NotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[EchoBoardError], int] = {
    ValidationError: 422,
    NotFound: 404,
    DuplicateMembership: 409,
    CapacityExceeded: 409,
    InvalidStateTransition: 409,
}


def status_code_for(exc: EchoBoardError) -> int:
    # Duplicate email or project name.
    if isinstance(exc, ValidationError) and exc.constraint == "unique":
        return 409
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return code
    return 400


async def handle_echoboard_error(request: Request, exc: EchoBoardError) -> JSONResponse:
    code = status_code_for(exc)
    logger.info(f"{request.method} {request.url.path} -> {code}: {exc.message}")
    return JSONResponse(
        status_code=code,
        content={"detail": exc.message, "error": exc.kind, **exc.context()},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EchoBoardError, handle_echoboard_error)  # type: ignore[arg-type]
