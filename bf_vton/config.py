"""Configuration management for the try-on pipeline."""

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings

from .errors import ErrorKind, PipelineError

PLACEHOLDER_API_KEY = "undefined"


class GeminiConfig(BaseModel):
    """Provider model selection and generation settings."""
    image_model: str = "gemini-2.5-flash-image"
    text_model: str = "gemini-2.5-flash"
    edit_temperature: float = 0.0  # near-deterministic edits
    image_response_modalities: list[str] = Field(default_factory=lambda: ["IMAGE", "TEXT"])
    timeout_seconds: float = 120.0


class NormalizerConfig(BaseModel):
    """Image normalization settings."""
    user_max_dimension: int = 1024
    product_max_dimension: int = 800
    size_max_dimension: int = 800
    result_max_dimension: int = 2048
    jpeg_quality: int = Field(default=80, ge=1, le=95)
    background_color: tuple[int, int, int] = (255, 255, 255)


class ProxyConfig(BaseModel):
    """Image proxy used to fetch product images."""
    host: str = "https://images.weserv.nl"
    width: int = 800
    output: str = "jpg"
    quality: int | None = None
    timeout_seconds: float = 30.0


class PromptConfig(BaseModel):
    """Instruction templates sent to the provider."""
    edit_instruction: str = (
        "TASK: Virtual Try-On. Dress the person in the first image with the clothing "
        "set from the second image ({product_label}). Keep the person, their face, "
        "hair, pose, body shape, and the background exactly as in the first image. "
        "Only replace the clothing. Do not invent design details, logos, or prints "
        "that are not visible in the second image. Reproduce the fabric texture, "
        "color, and seams of the product faithfully. Return the edited image."
    )
    size_instruction: str = (
        "Analyze the person's body in the image. What clothing size would fit them "
        "best for the product \"{product_label}\"? Options: [{sizes}]. Return ONLY "
        "the size code (e.g., \"M\")."
    )


class PipelineConfig(BaseSettings):
    """Main pipeline configuration."""

    # Credential (loaded from .env or environment)
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY", "API_KEY"),
    )

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    prompts: PromptConfig = Field(default_factory=PromptConfig)

    class Config:
        env_file = ".env"
        env_prefix = ""
        env_nested_delimiter = "__"
        extra = "ignore"
        frozen = True

    @property
    def has_api_key(self) -> bool:
        key = (self.gemini_api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY

    def require_api_key(self) -> str:
        """Return the credential, or raise MissingCredential before any network call."""
        if not self.has_api_key:
            raise PipelineError(ErrorKind.MISSING_CREDENTIAL, "gemini_api_key is unset or a placeholder")
        return self.gemini_api_key.strip()


def load_config() -> PipelineConfig:
    """Load configuration from environment and defaults."""
    return PipelineConfig()
