# Test fixtures and configuration
import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bf_vton.config import PipelineConfig  # noqa: E402
from bf_vton.models import ProviderResponse  # noqa: E402


def image_bytes(width: int, height: int, mode: str = "RGB", fmt: str = "PNG", color=None) -> bytes:
    """Encode a solid-color image of the given size."""
    if color is None:
        color = {"RGB": (200, 30, 60), "RGBA": (200, 30, 60, 0), "L": 128, "LA": (128, 0)}[mode]
    img = Image.new(mode, (width, height), color)
    output = io.BytesIO()
    img.save(output, format=fmt)
    return output.getvalue()


def data_uri(raw: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode()}"


def decode_size(payload: str) -> tuple[int, int]:
    """Pixel size of a base64 image payload."""
    return Image.open(io.BytesIO(base64.b64decode(payload))).size


def image_response(payload: str, mime_type: str = "image/png", finish_reason: str = "STOP") -> ProviderResponse:
    """Provider response carrying one inline image part."""
    return ProviderResponse.from_wire({
        "candidates": [{
            "content": {"parts": [{"inlineData": {"data": payload, "mimeType": mime_type}}]},
            "finishReason": finish_reason,
        }]
    })


def text_response(text: str) -> ProviderResponse:
    """Provider response carrying one text part."""
    return ProviderResponse.from_wire({
        "candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]
    })


@pytest.fixture
def config():
    """Pipeline config with a test credential."""
    return PipelineConfig(gemini_api_key="test-key")


@pytest.fixture
def user_photo_png():
    """A wide 2000x1000 user photo."""
    return image_bytes(2000, 1000)


@pytest.fixture
def product_png():
    """A transparent 1200x1600 product cut-out."""
    return image_bytes(1200, 1600, mode="RGBA")


@pytest.fixture
def generated_png_base64():
    """Base64 of a 1024x512 PNG as the provider would return it."""
    return base64.b64encode(image_bytes(1024, 512)).decode()


@pytest.fixture
def temp_image_file(tmp_path):
    """Create a temporary 64x32 PNG file."""
    img_path = tmp_path / "test_image.png"
    img_path.write_bytes(image_bytes(64, 32))
    return img_path
