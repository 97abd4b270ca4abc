"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from damage_inspector.config import Settings
from damage_inspector.containers import AppContainer
from damage_inspector.domain.detection import DetectedBox, DetectionResult
from damage_inspector.domain.images import AnalysisStatus, DamageAnalysis, Image
from damage_inspector.domain.sessions import Session
from damage_inspector.domain.surveys import SurveyResponse
from damage_inspector.errors import StorageError
from damage_inspector.services.detection import DamageDetector
from damage_inspector.services.images import ImageRepository, ImageService
from damage_inspector.services.reports import ReportRenderer
from damage_inspector.services.sessions import SessionRepository, SessionService
from damage_inspector.services.share import ShareService
from damage_inspector.services.storage import ObjectStorage, SignedUpload
from damage_inspector.services.surveys import SurveyRepository, SurveyService

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body"


@dataclass
class FixedClock:
    """Clock returning a controllable instant."""

    now: datetime = field(default_factory=lambda: datetime(2026, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[str, Session] = field(default_factory=dict)

    def create_session(self, session: Session) -> Session:
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self.sessions.get(session_id)

    def touch_session(
        self, session_id: str, last_activity: datetime, expires_at: datetime
    ) -> Session | None:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        touched = replace(session, last_activity=last_activity, expires_at=expires_at)
        self.sessions[session_id] = touched
        return touched

    def delete_session(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


@dataclass
class InMemoryImageRepository(ImageRepository):
    """In-memory image repository with conditional status updates."""

    images: dict[str, Image] = field(default_factory=dict)
    transitions: list[tuple[AnalysisStatus, AnalysisStatus]] = field(
        default_factory=list
    )

    def create_image(self, image: Image) -> Image:
        self.images[image.id] = image
        return image

    def get_image(self, image_id: str) -> Image | None:
        return self.images.get(image_id)

    def list_images_by_session(self, session_id: str) -> list[Image]:
        return [
            image for image in self.images.values() if image.session_id == session_id
        ]

    def update_image(self, image_id: str, processed_image_url: str) -> None:
        image = self.images[image_id]
        self.images[image_id] = replace(image, processed_image_url=processed_image_url)

    def transition_analysis(
        self, image_id: str, expected: AnalysisStatus, analysis: DamageAnalysis
    ) -> bool:
        image = self.images.get(image_id)
        if image is None or image.analysis.status is not expected:
            return False
        self.images[image_id] = replace(image, analysis=analysis)
        self.transitions.append((expected, analysis.status))
        return True

    def delete_image(self, image_id: str) -> None:
        self.images.pop(image_id, None)


@dataclass
class InMemorySurveyRepository(SurveyRepository):
    """In-memory survey repository for tests."""

    responses: dict[str, SurveyResponse] = field(default_factory=dict)

    def create_response(self, response: SurveyResponse) -> SurveyResponse:
        self.responses[response.id] = response
        return response

    def get_response(self, response_id: str) -> SurveyResponse | None:
        return self.responses.get(response_id)

    def list_responses(self) -> list[SurveyResponse]:
        return list(self.responses.values())

    def list_responses_by_session(self, session_id: str) -> list[SurveyResponse]:
        return [
            item for item in self.responses.values() if item.session_id == session_id
        ]

    def delete_response(self, response_id: str) -> None:
        self.responses.pop(response_id, None)


@dataclass
class InMemoryObjectStorage(ObjectStorage):
    """Dictionary-backed object storage."""

    objects: dict[str, bytes] = field(default_factory=dict)
    base_url: str = "https://storage.test/bucket"

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        self.objects[key] = data

    def download(self, key: str) -> bytes:
        if key not in self.objects:
            raise StorageError("download", f"missing object {key}")
        return self.objects[key]

    def delete(self, key: str) -> None:
        self.objects.pop(key, None)

    def create_upload_url(self, key: str) -> SignedUpload:
        return SignedUpload(
            upload_url=f"{self.base_url}/upload/{key}?token=t",
            token="t",
            object_key=key,
        )

    def signed_url(self, key: str, expires_in: int) -> str:
        return f"{self.base_url}/{key}?expires={expires_in}"

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def resolve_url(self, key: str) -> str:
        return self.public_url(key)


@dataclass
class FakeDetector(DamageDetector):
    """Fake detector that records calls and returns a fixed result."""

    result: DetectionResult = field(
        default_factory=lambda: DetectionResult(
            processed_image_url="http://inference.test/results/out.jpg",
            has_damage=True,
            confidence=0.85,
            bounding_boxes=[DetectedBox(x=10, y=20, width=30, height=40)],
        )
    )
    error: Exception | None = None
    healthy: bool = True
    calls: list[tuple[bytes, str]] = field(default_factory=list)

    async def detect(self, image_bytes: bytes, content_type: str) -> DetectionResult:
        self.calls.append((image_bytes, content_type))
        if self.error is not None:
            raise self.error
        return self.result

    async def health(self) -> bool:
        return self.healthy


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        storage_bucket="images",
        table_prefix="test_",
        inference_base_url="http://inference.test",
        environment="production",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def image_repository() -> InMemoryImageRepository:
    return InMemoryImageRepository()


@pytest.fixture
def storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector()


@pytest.fixture
def image_service(
    image_repository: InMemoryImageRepository,
    storage: InMemoryObjectStorage,
    detector: FakeDetector,
    clock: FixedClock,
) -> ImageService:
    return ImageService(
        repository=image_repository,
        storage=storage,
        detector=detector,
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    image_service: ImageService,
    detector: FakeDetector,
    clock: FixedClock,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        detector=detector,
        session_service=SessionService(InMemorySessionRepository(), clock=clock),
        image_service=image_service,
        survey_service=SurveyService(InMemorySurveyRepository(), clock=clock),
        share_service=ShareService(
            image_service=image_service,
            renderer=ReportRenderer(),
            web_url="https://web.test",
        ),
        close_resources=close_resources,
    )
