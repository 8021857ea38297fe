"""Try-on request and result models."""

from pydantic import BaseModel, ConfigDict, Field

from .image import EncodedImage
from .size import SizeCode


class TryOnRequest(BaseModel):
    """Normalized inputs of one try-on attempt."""

    model_config = ConfigDict(frozen=True)

    user_image: EncodedImage
    product_image: EncodedImage
    product_label: str = Field(min_length=1)


class TryOnResult(BaseModel):
    """Successful outcome of one attempt. The generated image is always present."""

    model_config = ConfigDict(frozen=True)

    generated_image: EncodedImage
    recommended_size: SizeCode
    attempt_id: str
