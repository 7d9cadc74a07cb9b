"""Exception handlers mapping the error taxonomy onto HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from campreg.core.exceptions import CampRegBaseError, ErrorKind

logger = logging.getLogger(__name__)


def error_body(message: str, kind: ErrorKind, **extra: object) -> dict[str, object]:
    return {"detail": message, "error_code": kind.value, **extra}


async def campreg_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, CampRegBaseError)  # noqa: S101
    logger.info(
        "%s %s rejected: %s", request.method, request.url.path, exc
    )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.kind),
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)  # noqa: S101
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", ErrorKind.INVALID_FORMAT, errors=errors),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CampRegBaseError, campreg_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
