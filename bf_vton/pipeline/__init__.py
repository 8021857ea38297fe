"""Try-on orchestration."""

from .tryon_pipeline import TryOnPipeline

__all__ = ["TryOnPipeline"]
