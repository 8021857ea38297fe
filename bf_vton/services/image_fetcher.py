"""Fetch product images through an image proxy."""

import io
import logging
from urllib.parse import quote, urlsplit

import httpx
from PIL import Image, UnidentifiedImageError

from ..config import ProxyConfig
from ..errors import ErrorKind, PipelineError

logger = logging.getLogger(__name__)


def is_data_uri(value: str) -> bool:
    return value.lstrip()[:5].lower() == "data:"


def is_remote_url(value: str) -> bool:
    parts = urlsplit(value.strip())
    return parts.scheme in ("http", "https") and bool(parts.hostname)


def url_origin(url: str) -> str:
    """Scheme and host of `url`, without path, query, or credentials."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    if not parts.scheme or not host:
        return "<invalid url>"
    return f"{parts.scheme}://{host}"


class RemoteImageFetcher:
    """Loads remote product images as decoded pixel data.

    Requests go through an image proxy that re-encodes the source, so the
    result is never subject to the origin's cross-origin or hotlink rules.
    """

    def __init__(
        self,
        config: ProxyConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def build_proxy_url(self, url: str) -> str:
        """Rewrite `url` into the proxy's `?url=...&w=...&output=...[&q=...]` form."""
        proxy_url = (
            f"{self.config.host.rstrip('/')}/?url={quote(url, safe='')}"
            f"&w={self.config.width}&output={self.config.output}"
        )
        if self.config.quality is not None:
            proxy_url += f"&q={self.config.quality}"
        return proxy_url

    async def fetch_remote_image(self, url: str) -> str | Image.Image:
        """Return pixel data for `url`.

        Data URIs are already self-describing and come back unchanged without
        a network round-trip. Every other call re-fetches.

        Raises:
            PipelineError: TransientProviderFault when the image cannot be
                loaded or decoded. The detail names only the source origin.
        """
        if is_data_uri(url):
            return url

        origin = url_origin(url)
        try:
            response = await self.client.get(self.build_proxy_url(url), follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Product image from %s failed with HTTP %d", origin, e.response.status_code)
            raise PipelineError(
                ErrorKind.TRANSIENT_PROVIDER_FAULT,
                f"Product image from {origin} failed with HTTP {e.response.status_code}",
            ) from None
        except httpx.HTTPError as e:
            logger.warning("Product image from %s could not be loaded: %s", origin, type(e).__name__)
            raise PipelineError(
                ErrorKind.TRANSIENT_PROVIDER_FAULT,
                f"Product image from {origin} could not be loaded ({type(e).__name__})",
            ) from None

        try:
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
            logger.warning("Product image from %s could not be decoded", origin)
            raise PipelineError(
                ErrorKind.TRANSIENT_PROVIDER_FAULT,
                f"Product image from {origin} could not be decoded",
            ) from None

        return image

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
