"""Exception handlers that render every failure as {success: false, message, errors?}."""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.core.errors import AppError

logger = logging.getLogger(__name__)

# Request sections that carry no meaning for the client's field name.
_LOC_PREFIXES = ("body", "query", "path", "header")


def error_response(
    status_code: int,
    message: str,
    errors: list[Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc if p not in _LOC_PREFIXES]
    return ".".join(parts) if parts else "body"


def validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten FastAPI/pydantic errors into [{field, message}]."""
    return [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]


def duplicate_field(exc: IntegrityError) -> str | None:
    """Client-facing name of the column behind a unique-constraint violation, else None."""
    text = str(exc.orig).lower()
    if "unique" not in text:
        return None
    if "email" in text:
        return "email"
    if "sr_no" in text:
        return "srNo"
    return None


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_response(exc.status_code, exc.message, exc.errors, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Validation failed", validation_errors(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    field = duplicate_field(exc)
    if field is None:
        return await unhandled_exception_handler(request, exc)
    logger.warning("Duplicate %s on %s %s", field, request.method, request.url.path)
    return error_response(409, f"{field} already exists")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if get_settings().is_production:
        return error_response(500, "Something went wrong")
    return error_response(
        500,
        str(exc) or exc.__class__.__name__,
        traceback.format_exception(type(exc), exc, exc.__traceback__),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
