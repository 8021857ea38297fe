"""Tests for GeminiClient - SDK request mapping and the live API."""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from bf_vton.agents import RequestBuilder, extract_size_code
from bf_vton.config import GeminiConfig, PromptConfig
from bf_vton.errors import ErrorKind, PipelineError
from bf_vton.models import EncodedImage, MediaType
from bf_vton.services import GeminiClient
from bf_vton.utils import normalize
from conftest import image_bytes

USER = EncodedImage.from_bytes(b"user-bytes", MediaType.JPEG)
PRODUCT = EncodedImage.from_bytes(b"product-bytes", MediaType.JPEG)


@pytest.fixture
def builder():
    return RequestBuilder(GeminiConfig(), PromptConfig())


class TestSdkMapping:
    """Provider requests map onto google-genai types."""

    def test_parts(self, builder):
        client = GeminiClient(GeminiConfig(), "test-key")
        request = builder.build_edit_request(USER, PRODUCT, "Maroon Performance Set")

        parts = [client._to_sdk_part(part) for part in request.parts]

        assert parts[0].inline_data.data == b"user-bytes"
        assert parts[0].inline_data.mime_type == "image/jpeg"
        assert parts[1].inline_data.data == b"product-bytes"
        assert "Maroon Performance Set" in parts[2].text

    def test_edit_config(self, builder):
        client = GeminiClient(GeminiConfig(), "test-key")
        config = client._to_sdk_config(builder.build_edit_request(USER, PRODUCT, "x"))

        assert config.temperature == 0.0
        assert list(config.response_modalities) == ["IMAGE", "TEXT"]

    def test_size_request_has_no_config(self, builder):
        client = GeminiClient(GeminiConfig(), "test-key")
        assert client._to_sdk_config(builder.build_size_request(USER, "x")) is None

    def test_client_requires_key(self):
        with pytest.raises(PipelineError) as exc_info:
            GeminiClient(GeminiConfig(), None).client
        assert exc_info.value.kind is ErrorKind.MISSING_CREDENTIAL

    @pytest.mark.asyncio
    async def test_generate_decodes_response(self, builder):
        client = GeminiClient(GeminiConfig(), "test-key")
        sdk = MagicMock()
        sdk.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(
            candidates=[SimpleNamespace(
                content=SimpleNamespace(parts=[SimpleNamespace(text="M", inline_data=None)]),
                finish_reason=SimpleNamespace(name="STOP"),
            )],
            prompt_feedback=None,
        ))
        client._client = sdk

        response = await client.generate(builder.build_size_request(USER, "x"))

        assert response.text == "M"
        kwargs = sdk.aio.models.generate_content.await_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"] is None


@pytest.mark.skipif(not os.getenv("GEMINI_API_KEY"), reason="GEMINI_API_KEY not set")
class TestLiveGemini:
    """Calls the real API; run with `pytest -m integration`."""

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_size_estimate_round_trip(self, builder):
        client = GeminiClient(GeminiConfig(), os.environ["GEMINI_API_KEY"])
        photo = normalize(image_bytes(600, 900), 800)

        response = await client.generate(builder.build_size_request(photo, "Maroon Performance Set"))

        # Any well-formed answer decodes; the code itself may be absent
        assert response.candidates
        extract_size_code(response)
