"""AWS Lambda entrypoint behind API Gateway."""

import copy
import logging
from typing import Any

from mangum import Mangum

from damage_inspector.runtime import ensure_app

logger = logging.getLogger(__name__)


def _strip_base(path: str, base: str) -> str:
    if path == base:
        return "/"
    if path.startswith(f"{base}/"):
        return path[len(base) :]
    return path


def _matching_base(path: str, base_paths: list[str]) -> str | None:
    for base in base_paths:
        if path == base or path.startswith(f"{base}/"):
            return base
    return None


def normalize_event(event: dict[str, Any], base_paths: list[str]) -> dict[str, Any]:
    """Return a copy of a gateway event with the deployment base path removed.

    Handles both v1 (``path``, ``requestContext.path``) and v2 (``rawPath``,
    ``requestContext.http.path``) payloads. The input event is not modified.
    """
    normalized = copy.deepcopy(event)
    context = normalized.get("requestContext")
    if not isinstance(context, dict):
        context = {}
    http = context.get("http")
    if not isinstance(http, dict):
        http = {}

    candidates = [
        normalized.get("rawPath"),
        normalized.get("path"),
        http.get("path"),
        context.get("path"),
    ]
    original = next((value for value in candidates if isinstance(value, str)), None)
    if original is None:
        return normalized
    base = _matching_base(original, base_paths)
    if base is None:
        return normalized

    for container, key in (
        (normalized, "rawPath"),
        (normalized, "path"),
        (http, "path"),
        (context, "path"),
    ):
        value = container.get(key)
        if isinstance(value, str):
            container[key] = _strip_base(value, base)
    logger.info("Stripped base path", extra={"base": base, "path": original})
    return normalized


def _event_route(event: dict[str, Any]) -> tuple[str | None, str | None]:
    http = (event.get("requestContext") or {}).get("http") or {}
    method = event.get("httpMethod") or http.get("method")
    path = event.get("rawPath") or event.get("path") or http.get("path")
    return method, path


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Route a gateway event into the ASGI app."""
    method, path = _event_route(event)
    logger.info(
        "Lambda invoked",
        extra={
            "method": method,
            "path": path,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )
    app = ensure_app()
    normalized = normalize_event(event, getattr(app.state, "base_paths", []))
    return Mangum(app, lifespan="off")(normalized, context)
