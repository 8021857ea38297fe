"""Try-On Orchestrator - normalize inputs, call the provider, interpret results."""

import asyncio
import logging
import uuid

from PIL import Image

from ..agents import RequestBuilder, classify, extract_image, extract_size_code
from ..config import PipelineConfig
from ..errors import ErrorKind, PipelineError
from ..models import DEFAULT_SIZE, EncodedImage, SizeCode, TryOnRequest, TryOnResult
from ..services import GeminiClient, RemoteImageFetcher
from ..services.image_fetcher import is_remote_url
from ..utils.image_normalizer import ImageNormalizationError, ImageSource, load_image, normalize

logger = logging.getLogger(__name__)


class TryOnPipeline:
    """Pipeline for one-shot virtual try-on with a size recommendation.

    Flow per attempt:
    1. Check the credential (no network call without one)
    2. Prepare: decode the user photo once, fetch the product image if it is
       an http(s) URL, normalize both images
    3. Dispatch the edit and size requests concurrently, await both
    4. Interpret: image or classified failure; size or the default

    Attempts share no mutable state and are never retried here.
    """

    def __init__(
        self,
        config: PipelineConfig,
        gemini: GeminiClient | None = None,
        fetcher: RemoteImageFetcher | None = None,
    ):
        self.config = config

        # Initialize services
        api_key = config.gemini_api_key.strip() if config.has_api_key else None
        self.gemini = gemini or GeminiClient(config.gemini, api_key)
        self.fetcher = fetcher or RemoteImageFetcher(config.proxy)

        self.request_builder = RequestBuilder(config.gemini, config.prompts)

    def _normalize(self, source: ImageSource, max_dimension: int) -> EncodedImage:
        settings = self.config.normalizer
        return normalize(
            source,
            max_dimension,
            quality=settings.jpeg_quality,
            background=settings.background_color,
        )

    def _decode(self, source: ImageSource) -> Image.Image:
        try:
            return load_image(source)
        except ImageNormalizationError as e:
            raise PipelineError(
                ErrorKind.TRANSIENT_PROVIDER_FAULT,
                f"Image preparation failed: {e}",
            ) from e

    @staticmethod
    def _check_label(product_label: str):
        if not isinstance(product_label, str) or not product_label.strip():
            raise PipelineError(ErrorKind.UNKNOWN, "Product label is empty")

    async def prepare(
        self,
        user_source: ImageSource,
        product_source: ImageSource,
        product_label: str,
    ) -> TryOnRequest:
        """Normalize both images into a TryOnRequest.

        Only http(s) URLs go through the remote fetcher. Data URIs and bare
        base64 strings are decoded directly.

        Raises:
            PipelineError: Unknown for an empty label (checked before any
                fetch), TransientProviderFault if either image fails
        """
        self._check_label(product_label)
        settings = self.config.normalizer

        if isinstance(product_source, str) and is_remote_url(product_source):
            product_source = await self.fetcher.fetch_remote_image(product_source)

        try:
            product_image = self._normalize(product_source, settings.product_max_dimension)
            user_image = self._normalize(user_source, settings.user_max_dimension)
        except (ImageNormalizationError, OSError) as e:
            raise PipelineError(
                ErrorKind.TRANSIENT_PROVIDER_FAULT,
                f"Image preparation failed: {e}",
            ) from e

        return TryOnRequest(
            user_image=user_image,
            product_image=product_image,
            product_label=product_label,
        )

    async def perform_try_on(
        self,
        user_source: ImageSource,
        product_source: ImageSource,
        product_label: str,
    ) -> TryOnResult:
        """Run one try-on attempt.

        Args:
            user_source: Photo of the user (bytes, file handle, path, data URI, or image)
            product_source: Product image URL, data URI, or any user_source form
            product_label: Product name used in the prompts

        Returns:
            TryOnResult with the generated image and a recommended size

        Raises:
            PipelineError: classified failure; the attempt is terminal
        """
        attempt_id = uuid.uuid4().hex[:8]
        logger.info("[%s] Try-on started for %r", attempt_id, product_label)

        try:
            self.config.require_api_key()
        except PipelineError:
            logger.error("[%s] No Gemini API key configured", attempt_id)
            raise

        # Decoded once; the edit and size images are both derived from the source pixels
        user_pixels = self._decode(user_source)
        request = await self.prepare(user_pixels, product_source, product_label)
        logger.info(
            "[%s] Prepared images: user %d bytes, product %d bytes",
            attempt_id, request.user_image.byte_size, request.product_image.byte_size,
        )

        # Both requests start before either is awaited
        edit_outcome, size_outcome = await asyncio.gather(
            self._generate_image(request, attempt_id),
            self._estimate_size(user_pixels, product_label, attempt_id),
            return_exceptions=True,
        )

        if isinstance(edit_outcome, PipelineError):
            raise edit_outcome
        if isinstance(edit_outcome, Exception):
            raise classify(edit_outcome) from edit_outcome
        if isinstance(edit_outcome, BaseException):
            raise edit_outcome

        recommended_size = size_outcome if isinstance(size_outcome, SizeCode) else DEFAULT_SIZE

        logger.info("[%s] Try-on complete, size %s", attempt_id, recommended_size.value)
        return TryOnResult(
            generated_image=edit_outcome,
            recommended_size=recommended_size,
            attempt_id=attempt_id,
        )

    async def estimate_size(self, user_source: ImageSource, product_label: str) -> SizeCode:
        """Estimate a size for the user. Never raises; falls back to M."""
        attempt_id = uuid.uuid4().hex[:8]
        if not self.config.has_api_key:
            logger.warning("[%s] No Gemini API key configured, using default size", attempt_id)
            return DEFAULT_SIZE
        return await self._estimate_size(user_source, product_label, attempt_id)

    async def _generate_image(self, request: TryOnRequest, attempt_id: str) -> EncodedImage:
        provider_request = self.request_builder.build_edit_request(
            request.user_image, request.product_image, request.product_label,
        )

        try:
            response = await self.gemini.generate(provider_request)
        except Exception as e:
            error = classify(e)
            logger.warning("[%s] Edit request failed (%s): %s", attempt_id, error.kind.value, e)
            raise error from e

        extraction = extract_image(response)
        if not extraction.found:
            error = classify(extraction)
            logger.warning("[%s] No image returned (%s): %s", attempt_id, error.kind.value, error.detail)
            raise error

        if extraction.text:
            logger.info("[%s] Model commentary: %s", attempt_id, extraction.text[:200])

        try:
            return self._normalize(extraction.image.data, self.config.normalizer.result_max_dimension)
        except ImageNormalizationError as e:
            raise PipelineError(
                ErrorKind.EMPTY_RESULT,
                f"Generated image could not be decoded: {e}",
            ) from e

    async def _estimate_size(self, user_source: ImageSource, product_label: str, attempt_id: str) -> SizeCode:
        # Size is auxiliary: every failure here degrades to the default.
        try:
            user_image = self._normalize(user_source, self.config.normalizer.size_max_dimension)
            response = await self.gemini.generate(
                self.request_builder.build_size_request(user_image, product_label)
            )
        except Exception as e:
            logger.warning("[%s] Size estimation failed, using %s: %s", attempt_id, DEFAULT_SIZE.value, e)
            return DEFAULT_SIZE

        size = extract_size_code(response)
        if size is None:
            logger.info("[%s] Unparseable size answer %r, using %s", attempt_id, response.text, DEFAULT_SIZE.value)
            return DEFAULT_SIZE
        return size

    async def close(self):
        """Close the HTTP client used for product images."""
        await self.fetcher.close()
