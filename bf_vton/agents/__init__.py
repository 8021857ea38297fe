"""Request, response, and error agents for the try-on pipeline."""

from .request_builder import RequestBuilder
from .response_extractor import extract_image, extract_size_code, match_size_code
from .error_classifier import classify, classify_extraction, is_safety_stop

__all__ = [
    "RequestBuilder",
    "extract_image",
    "extract_size_code",
    "match_size_code",
    "classify",
    "classify_extraction",
    "is_safety_stop",
]
