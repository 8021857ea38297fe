"""Provider request and response models.

Responses are decoded once, at the provider boundary, into these models so
the rest of the pipeline never walks optional nested structures.
"""

import base64
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .image import EncodedImage


class ProviderPart(BaseModel):
    """One request part: either instruction text or an inlined image."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    image: EncodedImage | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "ProviderPart":
        if (self.text is None) == (self.image is None):
            raise ValueError("a part carries exactly one of text or image")
        return self

    def to_wire(self) -> dict[str, Any]:
        if self.image is not None:
            return {"inlineData": {"data": self.image.data, "mimeType": self.image.media_type.value}}
        return {"text": self.text}


class ProviderRequest(BaseModel):
    """A multimodal generation request targeted at one model."""

    model_config = ConfigDict(frozen=True)

    model: str
    parts: tuple[ProviderPart, ...]
    temperature: float | None = None
    response_modalities: tuple[str, ...] | None = None

    @property
    def images(self) -> list[EncodedImage]:
        return [part.image for part in self.parts if part.image is not None]

    def to_wire(self) -> dict[str, Any]:
        """Render the documented outbound shape."""
        payload: dict[str, Any] = {
            "model": self.model,
            "contents": {"parts": [part.to_wire() for part in self.parts]},
        }
        config: dict[str, Any] = {}
        if self.temperature is not None:
            config["temperature"] = self.temperature
        if self.response_modalities:
            config["responseModalities"] = list(self.response_modalities)
        if config:
            payload["config"] = config
        return payload


class ResponsePart(BaseModel):
    """A decoded response part."""
    text: str | None = None
    image_data: str | None = None  # base64
    mime_type: str | None = None


class ResponseCandidate(BaseModel):
    """A decoded response candidate."""
    parts: list[ResponsePart] = Field(default_factory=list)
    finish_reason: str | None = None


class ProviderResponse(BaseModel):
    """A decoded provider response."""
    candidates: list[ResponseCandidate] = Field(default_factory=list)
    text: str | None = None
    block_reason: str | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> "ProviderResponse":
        """Decode a JSON wire response, tolerating absent or malformed fields."""
        if not isinstance(payload, dict):
            return cls()

        candidates = []
        for raw_candidate in _as_list(payload.get("candidates")):
            if not isinstance(raw_candidate, dict):
                continue
            content = raw_candidate.get("content")
            raw_parts = _as_list(content.get("parts")) if isinstance(content, dict) else []
            parts = []
            for raw_part in raw_parts:
                if not isinstance(raw_part, dict):
                    continue
                inline = raw_part.get("inlineData") or raw_part.get("inline_data")
                image_data = mime_type = None
                if isinstance(inline, dict) and inline.get("data"):
                    image_data = str(inline["data"])
                    mime_type = inline.get("mimeType") or inline.get("mime_type")
                text = raw_part.get("text")
                parts.append(ResponsePart(
                    text=text if isinstance(text, str) else None,
                    image_data=image_data,
                    mime_type=mime_type,
                ))
            finish = raw_candidate.get("finishReason") or raw_candidate.get("finish_reason")
            candidates.append(ResponseCandidate(
                parts=parts,
                finish_reason=str(finish) if finish else None,
            ))

        feedback = payload.get("promptFeedback") or payload.get("prompt_feedback")
        block = None
        if isinstance(feedback, dict):
            block = feedback.get("blockReason") or feedback.get("block_reason")
        text = payload.get("text")
        return cls(
            candidates=candidates,
            text=text if isinstance(text, str) else _joined_text(candidates),
            block_reason=str(block) if block else None,
        )

    @classmethod
    def from_sdk(cls, response: Any) -> "ProviderResponse":
        """Decode a google-genai `GenerateContentResponse`."""
        candidates = []
        for raw_candidate in getattr(response, "candidates", None) or []:
            content = getattr(raw_candidate, "content", None)
            parts = []
            for raw_part in getattr(content, "parts", None) or []:
                inline = getattr(raw_part, "inline_data", None)
                data = getattr(inline, "data", None) if inline is not None else None
                image_data = None
                if isinstance(data, bytes) and data:
                    image_data = base64.b64encode(data).decode("ascii")
                elif isinstance(data, str) and data:
                    image_data = data
                text = getattr(raw_part, "text", None)
                parts.append(ResponsePart(
                    text=text if isinstance(text, str) else None,
                    image_data=image_data,
                    mime_type=getattr(inline, "mime_type", None) if image_data else None,
                ))
            candidates.append(ResponseCandidate(
                parts=parts,
                finish_reason=_enum_name(getattr(raw_candidate, "finish_reason", None)),
            ))

        feedback = getattr(response, "prompt_feedback", None)
        block = _enum_name(getattr(feedback, "block_reason", None)) if feedback is not None else None
        return cls(candidates=candidates, text=_joined_text(candidates), block_reason=block)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _enum_name(value: Any) -> str | None:
    if value is None:
        return None
    name = getattr(value, "name", None) or getattr(value, "value", None) or str(value)
    return str(name) if name else None


def _joined_text(candidates: list[ResponseCandidate]) -> str | None:
    """Text of the first candidate, as the SDK's `response.text` reports it."""
    if not candidates:
        return None
    texts = [part.text for part in candidates[0].parts if part.text]
    return "".join(texts) if texts else None
