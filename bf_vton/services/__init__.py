"""External service clients."""

from .gemini_client import GeminiClient
from .image_fetcher import RemoteImageFetcher

__all__ = ["GeminiClient", "RemoteImageFetcher"]
