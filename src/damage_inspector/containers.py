"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from damage_inspector.adapters.detector_client import HttpxDamageDetector
from damage_inspector.adapters.supabase_image_repository import (
    SupabaseImageRepository,
)
from damage_inspector.adapters.supabase_object_storage import SupabaseObjectStorage
from damage_inspector.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from damage_inspector.adapters.supabase_survey_repository import (
    SupabaseSurveyRepository,
)
from damage_inspector.config import Settings
from damage_inspector.services.detection import DamageDetector
from damage_inspector.services.images import ImageService
from damage_inspector.services.reports import ReportRenderer
from damage_inspector.services.sessions import SessionService
from damage_inspector.services.share import ShareService
from damage_inspector.services.surveys import SurveyService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    detector: DamageDetector
    session_service: SessionService
    image_service: ImageService
    survey_service: SurveyService
    share_service: ShareService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    prefix = resolved_settings.table_prefix
    session_repository = SupabaseSessionRepository(supabase_client, prefix)
    image_repository = SupabaseImageRepository(supabase_client, prefix)
    survey_repository = SupabaseSurveyRepository(supabase_client, prefix)
    storage = SupabaseObjectStorage(
        client=supabase_client,
        bucket=resolved_settings.storage_bucket,
        public=resolved_settings.storage_public,
        signed_url_ttl_seconds=resolved_settings.signed_url_ttl_seconds,
    )
    detector = HttpxDamageDetector.create(
        base_url=resolved_settings.inference_base_url,
        timeout=resolved_settings.inference_timeout_seconds,
    )
    image_service = ImageService(
        repository=image_repository,
        storage=storage,
        detector=detector,
        max_upload_bytes=resolved_settings.max_upload_bytes,
    )
    share_service = ShareService(
        image_service=image_service,
        renderer=ReportRenderer(),
        web_url=resolved_settings.share_web_url,
    )

    async def close_resources() -> None:
        await detector.close()

    return AppContainer(
        settings=resolved_settings,
        detector=detector,
        session_service=SessionService(session_repository),
        image_service=image_service,
        survey_service=SurveyService(survey_repository),
        share_service=share_service,
        close_resources=close_resources,
    )
