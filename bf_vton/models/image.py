"""Encoded image model."""

import base64
import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATA_URI_PATTERN = re.compile(r"^data:([^;,]+)?(?:;[^,]*)?;base64,", re.IGNORECASE)


class MediaType(str, Enum):
    """Media types accepted on provider-bound payloads."""
    JPEG = "image/jpeg"
    PNG = "image/png"

    @classmethod
    def from_mime(cls, mime_type: str | None, default: "MediaType | None" = None) -> "MediaType":
        """Map a MIME string onto the enumeration, tolerating `image/jpg` and casing."""
        normalized = (mime_type or "").strip().lower()
        if normalized == "image/jpg":
            normalized = cls.JPEG.value
        for member in cls:
            if member.value == normalized:
                return member
        if default is not None:
            return default
        raise ValueError(f"Unsupported media type: {mime_type!r}")


CANONICAL_MEDIA_TYPE = MediaType.JPEG


def extract_clean_payload(value: str) -> str:
    """Strip a leading `data:<mime>;base64,` prefix, once."""
    return DATA_URI_PATTERN.sub("", value.strip(), count=1)


def media_type_of_data_uri(value: str) -> str | None:
    """Return the MIME type declared by a data URI, if any."""
    match = DATA_URI_PATTERN.match(value.strip())
    if match and match.group(1):
        return match.group(1).lower()
    return None


class EncodedImage(BaseModel):
    """A binary image serialized as base64 plus its media type.

    The payload never carries a data-URI prefix.
    """

    model_config = ConfigDict(frozen=True)

    data: str = Field(description="Base64 payload without data-URI prefix")
    media_type: MediaType
    byte_size: int = Field(ge=0, description="Approximate decoded size in bytes")

    @field_validator("data")
    @classmethod
    def _reject_data_uri(cls, value: str) -> str:
        if value.lstrip().lower().startswith("data:"):
            raise ValueError("payload must not carry a data-URI prefix")
        return value

    @classmethod
    def from_bytes(cls, raw: bytes, media_type: MediaType) -> "EncodedImage":
        return cls(
            data=base64.b64encode(raw).decode("ascii"),
            media_type=media_type,
            byte_size=len(raw),
        )

    @classmethod
    def from_base64(cls, payload: str, media_type: MediaType) -> "EncodedImage":
        """Wrap an existing base64 payload, stripping any data-URI prefix."""
        clean = extract_clean_payload(payload)
        padding = clean.count("=", max(len(clean) - 2, 0))
        return cls(
            data=clean,
            media_type=media_type,
            byte_size=max(len(clean) * 3 // 4 - padding, 0),
        )

    @property
    def data_uri(self) -> str:
        return f"data:{self.media_type.value};base64,{self.data}"

    def decode(self) -> bytes:
        return base64.b64decode(self.data)
