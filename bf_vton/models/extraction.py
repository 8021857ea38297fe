"""Tagged outcomes of response extraction."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .image import EncodedImage


class ExtractionStatus(str, Enum):
    """Where image extraction stopped."""
    FOUND = "found"
    NO_CANDIDATES = "no_candidates"
    NO_PARTS = "no_parts"
    NO_IMAGE_PART = "no_image_part"


class ImageExtraction(BaseModel):
    """Result of scanning a response for its authoritative image part."""

    model_config = ConfigDict(frozen=True)

    status: ExtractionStatus
    image: EncodedImage | None = None
    finish_reason: str | None = None
    block_reason: str | None = None
    text: str | None = None

    @property
    def found(self) -> bool:
        return self.status is ExtractionStatus.FOUND and self.image is not None
