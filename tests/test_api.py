"""Tests for the HTTP routes."""

import base64
from dataclasses import replace

from fastapi.testclient import TestClient

from damage_inspector.api.app import create_app
from damage_inspector.containers import AppContainer
from damage_inspector.errors import InferenceRejectedError
from tests.conftest import JPEG_BYTES, FakeDetector


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container), raise_server_exceptions=False)


def _upload(client: TestClient, session_id: str = "session-1") -> str:
    response = client.post(
        "/api/image/upload",
        data={"sessionId": session_id},
        files={"image": ("wall.jpg", JPEG_BYTES, "image/jpeg")},
    )
    assert response.status_code == 201
    return response.json()["imageId"]


def test_health_endpoints(container: AppContainer) -> None:
    client = _client(container)

    root = client.get("/")
    health = client.get("/health")
    inference = client.get("/health/inference")

    assert root.json()["success"] is True
    assert health.json()["status"] == "healthy"
    assert inference.json()["inference"] == "ok"
    assert health.headers["access-control-allow-origin"] == "*"


def test_inference_health_reports_unreachable(
    container: AppContainer, detector: FakeDetector
) -> None:
    detector.healthy = False

    response = _client(container).get("/health/inference")

    assert response.json()["inference"] == "unreachable"


def test_unknown_route_returns_json_404(container: AppContainer) -> None:
    response = _client(container).get("/nope")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_session_create_and_validate(container: AppContainer) -> None:
    client = _client(container)

    created = client.post("/api/session/create", json={"sessionId": "abc"})
    generated = client.post("/api/session/create")
    validated = client.get("/api/session/validate/abc")
    missing = client.get("/api/session/validate/unknown")

    assert created.status_code == 201
    assert created.json()["sessionId"] == "abc"
    assert generated.json()["sessionId"]
    assert validated.status_code == 200
    assert validated.json()["valid"] is True
    assert missing.status_code == 404
    assert missing.json()["message"] == "Session not found"


def test_upload_then_analyze(container: AppContainer, detector: FakeDetector) -> None:
    client = _client(container)
    image_id = _upload(client)

    pending = client.get(f"/api/image/{image_id}").json()["image"]
    analyzed = client.post(f"/api/image/analyze/{image_id}")
    again = client.post(f"/api/image/analyze/{image_id}")

    assert pending["damageAnalysis"]["status"] == "pending"
    assert analyzed.status_code == 200
    body = analyzed.json()
    assert body["status"] == "completed"
    assert body["damages"][0]["severity"] == "high"
    assert body["damages"][0]["boundingBox"] == {
        "x": 10.0,
        "y": 20.0,
        "width": 30.0,
        "height": 40.0,
    }
    assert body["processedImageUrl"] == "http://inference.test/results/out.jpg"
    assert again.json()["damages"] == body["damages"]
    assert len(detector.calls) == 1


def test_upload_rejects_non_image(container: AppContainer) -> None:
    response = _client(container).post(
        "/api/image/upload",
        data={"sessionId": "session-1"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Only image files are allowed",
    }


def test_upload_without_file(container: AppContainer) -> None:
    response = _client(container).post(
        "/api/image/upload", data={"sessionId": "session-1"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Image file is required"


def test_presign_and_confirm(container: AppContainer) -> None:
    client = _client(container)

    presigned = client.post(
        "/api/image/presign",
        json={
            "sessionId": "session-1",
            "filename": "a.png",
            "contentType": "image/png",
        },
    ).json()
    confirmed = client.post(
        "/api/image/confirm",
        json={
            "sessionId": "session-1",
            "objectKey": presigned["objectKey"],
            "imageUrl": presigned["imageUrl"],
        },
    )
    incomplete = client.post("/api/image/confirm", json={"sessionId": "session-1"})

    assert presigned["uploadUrl"]
    assert confirmed.status_code == 201
    assert confirmed.json()["imageUrl"] == presigned["imageUrl"]
    assert incomplete.status_code == 400
    assert incomplete.json()["message"] == "objectKey is required"


def test_analyze_unknown_image(container: AppContainer, detector: FakeDetector) -> None:
    response = _client(container).post("/api/image/analyze/missing")

    assert response.status_code == 404
    assert response.json()["message"] == "Image not found"
    assert detector.calls == []


def test_analyze_inference_failure(
    container: AppContainer, detector: FakeDetector
) -> None:
    detector.error = InferenceRejectedError(502, "Bad Gateway")
    client = _client(container)
    image_id = _upload(client)

    response = client.post(f"/api/image/analyze/{image_id}")

    assert response.status_code == 500
    assert "status 502" in response.json()["message"]
    image = client.get(f"/api/image/{image_id}").json()["image"]
    assert image["damageAnalysis"]["status"] == "failed"


def test_unexpected_error_hides_detail_outside_debug(
    container: AppContainer, detector: FakeDetector
) -> None:
    detector.error = RuntimeError("secret detail")
    client = _client(container)
    image_id = _upload(client)

    response = client.post(f"/api/image/analyze/{image_id}")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_session_images_are_listed(container: AppContainer) -> None:
    client = _client(container)
    _upload(client)
    _upload(client)
    _upload(client, session_id="other")

    response = client.get("/api/image/session/session-1")

    assert response.json()["count"] == 2


def test_delete_image(container: AppContainer) -> None:
    client = _client(container)
    image_id = _upload(client)

    deleted = client.delete(f"/api/image/{image_id}")
    lookup = client.get(f"/api/image/{image_id}")

    assert deleted.status_code == 200
    assert lookup.status_code == 404


def test_share_generate_and_metadata(container: AppContainer) -> None:
    client = _client(container)
    image_id = _upload(client)

    not_ready = client.post(f"/api/share/generate/{image_id}")
    client.post(f"/api/image/analyze/{image_id}")
    report = client.post(f"/api/share/generate/{image_id}").json()
    metadata = client.post(f"/api/share/metadata/{image_id}").json()

    assert not_ready.status_code == 400
    assert report["filename"] == f"damage_report_{image_id}.pdf"
    assert base64.b64decode(report["pdf"]).startswith(b"%PDF")
    assert metadata["shareData"]["link"]["webUrl"].endswith(f"/report/{image_id}")


def test_survey_submit_and_results(container: AppContainer) -> None:
    client = _client(container)

    accepted = client.post(
        "/api/survey/submit",
        json={"sessionId": "session-1", "response": "very_helpful"},
    )
    rejected = client.post(
        "/api/survey/submit", json={"sessionId": "session-1", "response": "wow"}
    )
    results = client.get("/api/survey/results").json()
    by_session = client.get("/api/survey/session/session-1").json()

    assert accepted.status_code == 201
    assert rejected.status_code == 400
    assert results["stats"]["total"] == 1
    assert results["stats"]["breakdown"]["very_helpful"] == 1
    assert results["stats"]["breakdown"]["not_at_all_helpful"] == 0
    assert by_session["count"] == 1
    assert by_session["responses"][0]["response"] == "very_helpful"


def test_malformed_body_is_bad_request(container: AppContainer) -> None:
    response = _client(container).post(
        "/api/survey/submit",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unexpected_error_detail_in_debug(
    container: AppContainer, detector: FakeDetector
) -> None:
    debug_settings = container.settings.model_copy(update={"environment": "local"})
    debug_container = replace(container, settings=debug_settings)
    detector.error = RuntimeError("secret detail")
    client = _client(debug_container)
    image_id = _upload(client)

    response = client.post(f"/api/image/analyze/{image_id}")

    assert response.status_code == 500
    assert response.json()["error"] == "RuntimeError: secret detail"
