"""Uniform JSON error responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from damage_inspector.errors import (
    ConfigurationError,
    DamageInspectorError,
    InternalError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def error_response(
    status_code: int, message: str, error: str | None = None
) -> JSONResponse:
    """Build the JSON body shared by every failure path."""
    content: dict[str, object] = {"success": False, "message": message}
    if error:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def internal_error_response(exc: Exception, debug: bool) -> JSONResponse:
    """Response for anything no handler claimed; details only in debug."""
    internal = InternalError()
    detail = f"{type(exc).__name__}: {exc}" if debug else None
    return error_response(internal.status_code, internal.message, detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Map application and framework errors to JSON responses."""

    @app.exception_handler(UpstreamError)
    async def handle_upstream(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error(
            "Upstream dependency failed",
            extra={"dependency": exc.dependency, "path": request.url.path},
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration(
        _: Request, exc: ConfigurationError
    ) -> JSONResponse:
        return error_response(exc.status_code, exc.message, exc.detail)

    @app.exception_handler(DamageInspectorError)
    async def handle_app_error(_: Request, exc: DamageInspectorError) -> JSONResponse:
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return error_response(400, "Invalid request", _summarize(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return error_response(404, "Route not found")
        return error_response(exc.status_code, str(exc.detail))


def _summarize(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(
            str(item) for item in error.get("loc", ()) if item != "body"
        )
        message = str(error.get("msg"))
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
