"""Response Extractor - pulls the generated image or size code out of a response."""

import re

from ..models import (
    EncodedImage,
    ExtractionStatus,
    ImageExtraction,
    MediaType,
    ProviderResponse,
    SizeCode,
    SIZE_SEARCH_ORDER,
)

# A code counts only when no letter touches it, so "SIZE" is not "S" and "XXL" is not "XL".
_SIZE_PATTERNS = [
    (code, re.compile(rf"(?<![A-Z]){code.value}(?![A-Z])"))
    for code in SIZE_SEARCH_ORDER
]


def extract_image(response: ProviderResponse) -> ImageExtraction:
    """Find the first inline image part of the first candidate.

    Only the first image part is authoritative. The candidate's finish
    reason and any prompt block reason are carried along either way.
    """
    if not response.candidates:
        return ImageExtraction(
            status=ExtractionStatus.NO_CANDIDATES,
            block_reason=response.block_reason,
            text=response.text,
        )

    candidate = response.candidates[0]
    context = dict(
        finish_reason=candidate.finish_reason,
        block_reason=response.block_reason,
        text=response.text,
    )

    if not candidate.parts:
        return ImageExtraction(status=ExtractionStatus.NO_PARTS, **context)

    for part in candidate.parts:
        if part.image_data:
            image = EncodedImage.from_base64(
                part.image_data,
                MediaType.from_mime(part.mime_type, default=MediaType.PNG),
            )
            return ImageExtraction(status=ExtractionStatus.FOUND, image=image, **context)

    return ImageExtraction(status=ExtractionStatus.NO_IMAGE_PART, **context)


def match_size_code(text: str | None) -> SizeCode | None:
    """Match free text against the size enumeration, in enumeration order."""
    if not text:
        return None
    normalized = text.strip().upper()
    for code, pattern in _SIZE_PATTERNS:
        if pattern.search(normalized):
            return code
    return None


def extract_size_code(response: ProviderResponse) -> SizeCode | None:
    """Read the size code from the response text; None when absent."""
    return match_size_code(response.text)
