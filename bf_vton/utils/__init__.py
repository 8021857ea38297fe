"""Image utilities."""

from .image_normalizer import ImageNormalizationError, normalize

__all__ = ["ImageNormalizationError", "normalize"]
