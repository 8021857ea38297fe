"""FastAPI server for Virtual Try-On.

Receives requests from the shop front-end with:
- user_photo: Base64 data URL of the user's photo
- product_image: URL (or data URL) of the product image
- product_name: Product label used in the prompts
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bf_vton.config import PipelineConfig
from bf_vton.errors import PipelineError
from bf_vton.models import SizeCode
from bf_vton.pipeline import TryOnPipeline

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if _pipeline is not None:
        await _pipeline.close()


app = FastAPI(
    title="BF-VTON API",
    description="Virtual try-on with size recommendation using Gemini",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TryOnRequest(BaseModel):
    """Request body for try-on generation."""
    user_photo: str = Field(min_length=1)  # Base64 data URL
    product_image: str = Field(min_length=1)  # URL or base64 data URL
    product_name: str = Field(min_length=1)


class TryOnResponse(BaseModel):
    """Response with generated image."""
    success: bool
    image_base64: str | None = None
    media_type: str | None = None
    recommended_size: SizeCode | None = None
    attempt_id: str | None = None
    error: str | None = None
    error_kind: str | None = None


class SizeRequest(BaseModel):
    """Request body for size estimation."""
    user_photo: str = Field(min_length=1)
    product_name: str = Field(min_length=1)


class SizeResponse(BaseModel):
    """Response with a size code; always succeeds."""
    success: bool = True
    recommended_size: SizeCode


# Initialize pipeline (will be done on first request)
_pipeline: TryOnPipeline | None = None


def get_pipeline() -> TryOnPipeline:
    """Get or create the pipeline instance."""
    global _pipeline
    if _pipeline is None:
        config = PipelineConfig()  # Loads from .env automatically via pydantic-settings
        _pipeline = TryOnPipeline(config)
    return _pipeline


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Virtual Try-On API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Detailed health check."""
    pipeline = get_pipeline()
    configured = pipeline.config.has_api_key

    return {
        "status": "ok" if configured else "degraded",
        "credential": "configured" if configured else "missing",
        "image_model": pipeline.config.gemini.image_model,
        "text_model": pipeline.config.gemini.text_model,
    }


@app.post("/api/tryon", response_model=TryOnResponse)
async def generate_tryon(request: TryOnRequest):
    """Generate a virtual try-on image and size recommendation.

    Failures come back with success=False, the user-facing message, and the
    error kind.
    """
    pipeline = get_pipeline()

    try:
        result = await pipeline.perform_try_on(
            user_source=request.user_photo,
            product_source=request.product_image,
            product_label=request.product_name,
        )
    except PipelineError as e:
        logger.warning("Try-on failed (%s): %s", e.kind.value, e.detail)
        return TryOnResponse(
            success=False,
            error=e.message,
            error_kind=e.kind.value,
        )

    return TryOnResponse(
        success=True,
        image_base64=result.generated_image.data,
        media_type=result.generated_image.media_type.value,
        recommended_size=result.recommended_size,
        attempt_id=result.attempt_id,
    )


@app.post("/api/size", response_model=SizeResponse)
async def estimate_size(request: SizeRequest):
    """Estimate a garment size from the user's photo."""
    pipeline = get_pipeline()
    size = await pipeline.estimate_size(request.user_photo, request.product_name)
    return SizeResponse(recommended_size=size)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
