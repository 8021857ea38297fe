"""Gemini API client for try-on image edits and size estimates."""

import logging

from google import genai
from google.genai import types

from ..config import GeminiConfig
from ..errors import ErrorKind, PipelineError
from ..models import ProviderPart, ProviderRequest, ProviderResponse

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin async wrapper around google-genai's `generate_content`.

    Responses are decoded into `ProviderResponse` before they leave this class.
    """

    def __init__(self, config: GeminiConfig, api_key: str | None):
        self.config = config
        self._api_key = api_key
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        """Get or create the SDK client."""
        if self._client is None:
            if not self._api_key:
                raise PipelineError(ErrorKind.MISSING_CREDENTIAL, "Gemini client has no API key")
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=int(self.config.timeout_seconds * 1000)),
            )
        return self._client

    def _to_sdk_part(self, part: ProviderPart) -> types.Part:
        if part.image is not None:
            return types.Part.from_bytes(data=part.image.decode(), mime_type=part.image.media_type.value)
        return types.Part.from_text(text=part.text)

    def _to_sdk_config(self, request: ProviderRequest) -> types.GenerateContentConfig | None:
        options = {}
        if request.temperature is not None:
            options["temperature"] = request.temperature
        if request.response_modalities:
            options["response_modalities"] = list(request.response_modalities)
        return types.GenerateContentConfig(**options) if options else None

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        """Send one request and return the decoded response.

        SDK and transport exceptions propagate unchanged for classification.
        """
        contents = [self._to_sdk_part(part) for part in request.parts]
        logger.debug("Calling %s with %d parts", request.model, len(contents))

        response = await self.client.aio.models.generate_content(
            model=request.model,
            contents=contents,
            config=self._to_sdk_config(request),
        )
        return ProviderResponse.from_sdk(response)
