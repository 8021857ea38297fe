"""Data models for the try-on pipeline."""

from .image import (
    CANONICAL_MEDIA_TYPE,
    EncodedImage,
    MediaType,
    extract_clean_payload,
)
from .size import DEFAULT_SIZE, SIZE_SEARCH_ORDER, SizeCode
from .provider import (
    ProviderPart,
    ProviderRequest,
    ProviderResponse,
    ResponseCandidate,
    ResponsePart,
)
from .extraction import ExtractionStatus, ImageExtraction
from .tryon import TryOnRequest, TryOnResult

__all__ = [
    "CANONICAL_MEDIA_TYPE",
    "EncodedImage",
    "MediaType",
    "extract_clean_payload",
    "DEFAULT_SIZE",
    "SIZE_SEARCH_ORDER",
    "SizeCode",
    "ProviderPart",
    "ProviderRequest",
    "ProviderResponse",
    "ResponseCandidate",
    "ResponsePart",
    "ExtractionStatus",
    "ImageExtraction",
    "TryOnRequest",
    "TryOnResult",
]
