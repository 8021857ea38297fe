"""Virtual try-on pipeline: image preparation, Gemini orchestration, size estimates."""

from .config import PipelineConfig, load_config
from .errors import ErrorKind, PipelineError
from .pipeline import TryOnPipeline

__all__ = [
    "PipelineConfig",
    "load_config",
    "ErrorKind",
    "PipelineError",
    "TryOnPipeline",
]
