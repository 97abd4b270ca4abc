"""Tests for container wiring."""

import asyncio

from damage_inspector.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.session_service is not None
    assert container.image_service.max_upload_bytes == settings.max_upload_bytes
    asyncio.run(container.close_resources())
