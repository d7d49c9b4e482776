import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fleetops.utils.response import error_response

logger = logging.getLogger(__name__)


class AppException(Exception):
    status_code = 400
    default_code = "ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        data: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.data = data


class InvalidInput(AppException):
    status_code = 400
    default_code = "INVALID_INPUT"


class Unauthorized(AppException):
    status_code = 401
    default_code = "UNAUTHORIZED"


class Forbidden(AppException):
    status_code = 403
    default_code = "FORBIDDEN"


class NotFound(AppException):
    status_code = 404
    default_code = "NOT_FOUND"


class Conflict(AppException):
    status_code = 409
    default_code = "CONFLICT"


class StorageError(AppException):
    status_code = 500
    default_code = "STORAGE_ERROR"


def _describe_validation_error(exc: RequestValidationError) -> tuple[str, list[dict]]:
    issues = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        issues.append({"field": ".".join(loc), "reason": err.get("msg", "")})
    first = issues[0]["field"] if issues else ""
    message = f"Données invalides: {first}" if first else "Données invalides"
    return message, issues


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, error_code=exc.error_code, data=exc.data),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message, issues = _describe_validation_error(exc)
        logger.warning("Rejected payload on %s %s: %s", request.method, request.url.path, issues)
        return JSONResponse(
            status_code=400,
            content=error_response(message, error_code="INVALID_INPUT", data={"issues": issues}),
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        error = StorageError("Erreur de stockage")
        return JSONResponse(
            status_code=error.status_code,
            content=error_response(error.message, error_code=error.error_code),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Erreur interne du serveur", error_code="INTERNAL_ERROR"),
        )
