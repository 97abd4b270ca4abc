"""ASGI entrypoint for the damage inspector API."""

from damage_inspector.runtime import ensure_app

app = ensure_app()
