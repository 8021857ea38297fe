"""Error Classifier - maps raw failures onto the closed PipelineError taxonomy."""

import asyncio
import re

import httpx
from google.genai import errors as genai_errors

from ..errors import ErrorKind, PipelineError, trim_detail
from ..models import ImageExtraction

SAFETY_FINISH_REASONS = frozenset({
    "SAFETY",
    "IMAGE_SAFETY",
    "PROHIBITED_CONTENT",
    "IMAGE_PROHIBITED_CONTENT",
    "BLOCKLIST",
    "SPII",
})

PAYLOAD_STATUS_CODES = frozenset({400, 413})

_STATUS_400 = re.compile(r"(?<!\d)400(?!\d)")


def is_safety_stop(finish_reason: str | None) -> bool:
    return (finish_reason or "").strip().upper() in SAFETY_FINISH_REASONS


def _from_status(code: int | None, detail: str) -> PipelineError:
    if code in PAYLOAD_STATUS_CODES:
        return PipelineError(ErrorKind.PAYLOAD_TOO_LARGE, detail)
    return PipelineError(ErrorKind.TRANSIENT_PROVIDER_FAULT, detail)


def classify_extraction(extraction: ImageExtraction) -> PipelineError:
    """Classify an edit response that produced no image."""
    if extraction.block_reason or is_safety_stop(extraction.finish_reason):
        reason = extraction.block_reason or extraction.finish_reason
        return PipelineError(ErrorKind.SAFETY_REJECTED, f"Provider stopped with {reason}")

    detail = f"No image part ({extraction.status.value}, finish_reason={extraction.finish_reason})"
    if extraction.text:
        detail += f": {trim_detail(extraction.text)}"
    return PipelineError(ErrorKind.EMPTY_RESULT, detail)


def classify(raw: BaseException | ImageExtraction) -> PipelineError:
    """Map a raw failure signal onto a PipelineError.

    | Signal                                    | Kind                   |
    |-------------------------------------------|------------------------|
    | already a PipelineError                   | unchanged              |
    | extraction with safety finish/block       | SafetyRejected         |
    | extraction without image                  | EmptyResult            |
    | provider/HTTP status 400 or 413           | PayloadTooLarge        |
    | other provider/HTTP status, transport     | TransientProviderFault |
    | message mentioning status 400             | PayloadTooLarge        |
    | anything else                             | Unknown                |
    """
    if isinstance(raw, PipelineError):
        return raw

    if isinstance(raw, ImageExtraction):
        return classify_extraction(raw)

    if isinstance(raw, genai_errors.APIError):
        detail = f"Provider returned {raw.code} {raw.status or ''}: {raw.message or ''}".strip()
        return _from_status(raw.code, detail)

    if isinstance(raw, httpx.HTTPStatusError):
        return _from_status(raw.response.status_code, f"HTTP {raw.response.status_code}")

    if isinstance(raw, (httpx.TransportError, asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return PipelineError(ErrorKind.TRANSIENT_PROVIDER_FAULT, f"{type(raw).__name__}: {raw}")

    message = str(raw) or type(raw).__name__
    if _STATUS_400.search(message):
        return PipelineError(ErrorKind.PAYLOAD_TOO_LARGE, message)

    return PipelineError(ErrorKind.UNKNOWN, message)
