"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from damage_inspector.api.errors import (
    CORS_HEADERS,
    error_response,
    internal_error_response,
    register_exception_handlers,
)
from damage_inspector.api.images import router as images_router
from damage_inspector.api.sessions import router as sessions_router
from damage_inspector.api.share import router as share_router
from damage_inspector.api.surveys import router as surveys_router
from damage_inspector.app_logging import configure_logging
from damage_inspector.config import is_debug_environment, parse_base_paths
from damage_inspector.containers import AppContainer
from damage_inspector.errors import ConfigurationError

SERVICE_NAME = "damage-inspector-api"
_ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def _install_middleware(app: FastAPI, debug: bool) -> None:
    logger = logging.getLogger(__name__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def cors_and_errors(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "Unhandled error",
                extra={"method": request.method, "path": request.url.path},
            )
            return internal_error_response(exc, debug)
        response.headers.update(CORS_HEADERS)
        return response


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.state.base_paths = parse_base_paths(container.settings.api_base_paths)

    _install_middleware(app, is_debug_environment(container.settings.environment))
    register_exception_handlers(app)

    app.include_router(sessions_router)
    app.include_router(images_router)
    app.include_router(share_router)
    app.include_router(surveys_router)

    @app.get("/")
    async def root() -> dict[str, object]:
        """Service banner."""
        return {
            "success": True,
            "service": SERVICE_NAME,
            "environment": container.settings.environment,
        }

    @app.get("/health")
    async def health() -> dict[str, object]:
        """Simple health check endpoint."""
        return {
            "success": True,
            "status": "healthy",
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    @app.get("/health/inference")
    async def inference_health(request: Request) -> dict[str, object]:
        """Report whether the inference service answers its health probe."""
        current: AppContainer = request.app.state.container
        healthy = await current.detector.health()
        return {
            "success": True,
            "inference": "ok" if healthy else "unreachable",
        }

    return app


def create_configuration_error_app(error: ConfigurationError) -> FastAPI:
    """Create an app that answers every request with the configuration error."""
    configure_logging()
    app = FastAPI()
    app.state.base_paths = []

    @app.api_route("/{path:path}", methods=_ALL_METHODS, include_in_schema=False)
    async def configuration_error(path: str) -> Response:  # noqa: ARG001
        return error_response(error.status_code, error.message, error.detail)

    return app
