"""API endpoint tests using FastAPI TestClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api.server import app
from bf_vton.config import PipelineConfig
from bf_vton.errors import USER_MESSAGES, ErrorKind, PipelineError
from bf_vton.models import EncodedImage, MediaType, SizeCode, TryOnResult

PHOTO = "data:image/jpeg;base64,VVNFUg=="
PRODUCT_URL = "https://superbeautiful.de/produktfotored1_800x800.png"


def mock_pipeline(api_key="test-key"):
    pipeline = MagicMock()
    pipeline.config = PipelineConfig(gemini_api_key=api_key)
    return pipeline


@pytest.fixture
def client():
    return TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client):
        """Root endpoint returns OK status."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "service" in data
        assert "version" in data

    def test_health_endpoint(self, client):
        """Health endpoint reports credential state and models."""
        with patch("api.server.get_pipeline", return_value=mock_pipeline()):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["credential"] == "configured"
        assert data["image_model"] == "gemini-2.5-flash-image"

    def test_health_without_credential(self, client):
        with patch("api.server.get_pipeline", return_value=mock_pipeline(api_key=None)):
            data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["credential"] == "missing"


class TestTryOnEndpoint:
    """Tests for the main try-on endpoint."""

    def test_tryon_missing_user_photo(self, client):
        """Request without user_photo fails validation."""
        response = client.post("/api/tryon", json={
            "product_image": PRODUCT_URL,
            "product_name": "Maroon Performance Set",
        })

        assert response.status_code == 422

    def test_tryon_empty_product_name(self, client):
        """An empty product label fails validation."""
        response = client.post("/api/tryon", json={
            "user_photo": PHOTO,
            "product_image": PRODUCT_URL,
            "product_name": "",
        })

        assert response.status_code == 422

    def test_tryon_success(self, client):
        pipeline = mock_pipeline()
        pipeline.perform_try_on = AsyncMock(return_value=TryOnResult(
            generated_image=EncodedImage.from_base64("R0VO", MediaType.JPEG),
            recommended_size=SizeCode.L,
            attempt_id="a1b2c3d4",
        ))

        with patch("api.server.get_pipeline", return_value=pipeline):
            response = client.post("/api/tryon", json={
                "user_photo": PHOTO,
                "product_image": PRODUCT_URL,
                "product_name": "Maroon Performance Set",
            })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["image_base64"] == "R0VO"
        assert data["media_type"] == "image/jpeg"
        assert data["recommended_size"] == "L"
        assert data["attempt_id"] == "a1b2c3d4"
        pipeline.perform_try_on.assert_awaited_once_with(
            user_source=PHOTO,
            product_source=PRODUCT_URL,
            product_label="Maroon Performance Set",
        )

    def test_tryon_failure(self, client):
        """Classified failures come back with the user message and kind."""
        pipeline = mock_pipeline()
        pipeline.perform_try_on = AsyncMock(
            side_effect=PipelineError(ErrorKind.SAFETY_REJECTED, "finish_reason=IMAGE_SAFETY"),
        )

        with patch("api.server.get_pipeline", return_value=pipeline):
            response = client.post("/api/tryon", json={
                "user_photo": PHOTO,
                "product_image": PRODUCT_URL,
                "product_name": "Maroon Performance Set",
            })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["error"] == USER_MESSAGES[ErrorKind.SAFETY_REJECTED]
        assert data["error_kind"] == "SafetyRejected"
        assert data["image_base64"] is None
        assert "IMAGE_SAFETY" not in data["error"]


class TestSizeEndpoint:
    """Tests for the standalone size endpoint."""

    def test_size(self, client):
        pipeline = mock_pipeline()
        pipeline.estimate_size = AsyncMock(return_value=SizeCode.XS)

        with patch("api.server.get_pipeline", return_value=pipeline):
            response = client.post("/api/size", json={
                "user_photo": PHOTO,
                "product_name": "Sky Blue Yoga Set",
            })

        assert response.status_code == 200
        assert response.json() == {"success": True, "recommended_size": "XS"}

    def test_size_requires_photo(self, client):
        response = client.post("/api/size", json={"product_name": "Sky Blue Yoga Set"})
        assert response.status_code == 422
