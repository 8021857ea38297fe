"""Convert arbitrary image sources into size-bounded canonical JPEG payloads."""

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from ..models.image import CANONICAL_MEDIA_TYPE, EncodedImage, extract_clean_payload

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, BinaryIO, Image.Image]

DEFAULT_QUALITY = 80
DEFAULT_BACKGROUND = (255, 255, 255)


class ImageNormalizationError(ValueError):
    """The source could not be read or decoded as an image."""


def scale_factor(width: int, height: int, max_dimension: int) -> float:
    """Scale that fits both sides within `max_dimension`; never upscales."""
    if width <= 0 or height <= 0:
        raise ImageNormalizationError(f"Invalid image dimensions {width}x{height}")
    return min(1.0, max_dimension / max(width, height))


def target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Output dimensions for `width` x `height` capped at `max_dimension`.

    The larger side lands exactly on `max_dimension` when scaling happens.
    """
    scale = scale_factor(width, height, max_dimension)
    if scale >= 1.0:
        return width, height
    if width >= height:
        return max_dimension, max(1, round(height * scale))
    return max(1, round(width * scale)), max_dimension


def load_image(source: ImageSource) -> Image.Image:
    """Decode a source into a Pillow image with EXIF orientation applied."""
    if isinstance(source, Image.Image):
        return ImageOps.exif_transpose(source)

    if isinstance(source, Path):
        raw = source.read_bytes()
    elif isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    elif isinstance(source, str):
        try:
            raw = base64.b64decode(extract_clean_payload(source))
        except (binascii.Error, ValueError) as e:
            raise ImageNormalizationError(f"Invalid base64 image payload: {e}") from e
    elif hasattr(source, "read"):
        raw = source.read()
    else:
        raise ImageNormalizationError(f"Unsupported image source type: {type(source).__name__}")

    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ImageNormalizationError(f"Could not decode image: {e}") from e

    return ImageOps.exif_transpose(image)


def flatten(image: Image.Image, background: tuple[int, int, int] = DEFAULT_BACKGROUND) -> Image.Image:
    """Composite transparent images onto an opaque background, returning RGB."""
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha:
        rgba = image.convert("RGBA")
        canvas = Image.new("RGB", rgba.size, background)
        canvas.paste(rgba, mask=rgba.getchannel("A"))
        return canvas
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def normalize(
    source: ImageSource,
    max_dimension: int,
    quality: int = DEFAULT_QUALITY,
    background: tuple[int, int, int] = DEFAULT_BACKGROUND,
) -> EncodedImage:
    """Decode, cap dimensions, flatten, and re-encode `source` as JPEG.

    Args:
        source: Raw bytes, file handle, path, data URI / base64 string, or a
            decoded Pillow image (e.g. from the remote fetcher)
        max_dimension: Upper bound for both width and height
        quality: JPEG quality factor
        background: Fill color for transparent regions

    Returns:
        EncodedImage in the canonical media type
    """
    image = load_image(source)
    width, height = image.size
    new_size = target_size(width, height, max_dimension)

    image = flatten(image, background)
    if new_size != (width, height):
        image = image.resize(new_size, Image.Resampling.LANCZOS)

    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality)
    encoded = EncodedImage.from_bytes(output.getvalue(), CANONICAL_MEDIA_TYPE)

    logger.debug(
        "Normalized image %dx%d -> %dx%d (%d bytes)",
        width, height, new_size[0], new_size[1], encoded.byte_size,
    )
    return encoded
