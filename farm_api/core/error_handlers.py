"""
Exception Handlers

Registered on the application by create_app(). Domain errors (AppError)
and plain HTTP errors use the domain envelope; storage-layer errors go
through the normalizer, which maps them to an HTTP status and the
{error, timestamp, path, method} envelope.

SECURITY: details and stack traces are only returned outside production.
Full context is always logged.
"""
import traceback
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

from farm_api.config import Settings
from farm_api.core.exceptions import AppError, MissingField, ValidationError
from farm_api.utils.logging import get_logger
from farm_api.utils.responses import error_response, utc_timestamp

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

# pydantic prepends this to messages of ValueErrors raised in validators
VALUE_ERROR_PREFIX = "Value error, "


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "tenant_id": getattr(request.state, "tenant_id", None),
        "user_id": getattr(request.state, "user_id", None),
    }


def normalize_db_error(exc: Exception) -> Tuple[int, str, Dict[str, Any]]:
    """
    Map a SQLAlchemy error to (status code, message, details).

    Uniqueness violation -> 409, foreign key violation -> 400,
    NoResultFound -> 404, data errors -> 400, connection failures -> 503,
    everything else -> 500.
    """
    if isinstance(exc, sa_exc.IntegrityError):
        pgcode = getattr(exc.orig, "pgcode", None)
        text = str(exc.orig)
        if pgcode == UNIQUE_VIOLATION or "UNIQUE constraint failed" in text:
            return status.HTTP_409_CONFLICT, "Conflicto: el registro ya existe", {"constraint": text}
        if pgcode == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in text:
            return status.HTTP_400_BAD_REQUEST, "Violación de restricción de clave foránea", {}
        return status.HTTP_400_BAD_REQUEST, "Cambio requerido violará una relación existente", {}

    if isinstance(exc, sa_exc.NoResultFound):
        return status.HTTP_404_NOT_FOUND, "Registro no encontrado", {}

    if isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.TimeoutError)):
        return status.HTTP_503_SERVICE_UNAVAILABLE, "Error de conexión a la base de datos", {}

    if isinstance(exc, sa_exc.DataError):
        return status.HTTP_400_BAD_REQUEST, "Error de validación de datos", {}

    if isinstance(exc, sa_exc.DBAPIError):
        return (
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error de base de datos",
            {"code": getattr(exc.orig, "pgcode", None)},
        )

    if isinstance(exc, sa_exc.StatementError):
        return status.HTTP_400_BAD_REQUEST, "Error de validación de datos", {}

    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor", {}


def missing_fields(errors: List[Dict[str, Any]]) -> List[str]:
    """
    Names of body fields that were absent, null or empty strings.

    Other errors in the same request are ignored; missing fields are
    always reported first.
    """
    fields: List[str] = []
    for error in errors:
        loc = error.get("loc", ())
        is_missing = (
            error.get("type") == "missing"
            or error.get("input") is None
            or error.get("input") == ""
        )
        if not is_missing or len(loc) < 2 or loc[0] != "body":
            continue
        name = ".".join(str(part) for part in loc[1:])
        if name not in fields:
            fields.append(name)
    return fields


def validator_message(errors: List[Dict[str, Any]]) -> Optional[str]:
    """Message of the first error raised by a schema validator, if any."""
    for error in errors:
        if error.get("type") == "value_error":
            message = str(error.get("msg", ""))
            return message.removeprefix(VALUE_ERROR_PREFIX) or None
    return None


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach all exception handlers to the application."""

    def normalized_response(request: Request, status_code: int, message: str,
                            details: Dict[str, Any], exc: Exception) -> JSONResponse:
        body: Dict[str, Any] = {
            "error": message,
            "timestamp": utc_timestamp(),
            "path": request.url.path,
            "method": request.method,
        }
        if not settings.is_production:
            body["details"] = details
            body["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        level = logger.warning if exc.status_code < 500 else logger.error
        level(
            f"{type(exc).__name__}: {exc.detail}",
            extra=_request_context(request),
        )
        return error_response(exc.detail, exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        fields = missing_fields(errors)
        if fields:
            error = MissingField(fields)
        else:
            error = ValidationError(validator_message(errors))

        logger.info(
            f"Request validation failed: {error.detail}",
            extra=_request_context(request),
        )
        return error_response(error.detail, error.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and detail == "Not Found":
            detail = "Endpoint no encontrado"
        return error_response(str(detail), exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(sa_exc.SQLAlchemyError)
    async def database_error_handler(request: Request, exc: sa_exc.SQLAlchemyError):
        status_code, message, details = normalize_db_error(exc)
        logger.error(
            f"Database error: {type(exc).__name__}: {exc}",
            exc_info=status_code >= 500,
            extra={**_request_context(request), "query": str(request.query_params)},
        )
        return normalized_response(request, status_code, message, details, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Log full details but return a generic error to the client.
        """
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra=_request_context(request),
        )
        return normalized_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error interno del servidor",
            {"type": type(exc).__name__},
            exc,
        )
