from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictStr

from app.domain.models import ModelConfig


# --- Requests ---
# Strict string fields: numbers, booleans or lists are rejected instead of coerced.

class EmbeddingRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: StrictStr = Field(..., min_length=1, description="Text to embed.")


class SummaryRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: StrictStr = Field(..., min_length=1, description="Text to summarize.")


class ImageRequest(BaseModel):
    """
    Image synthesis request. `size`, `quality` and `style` are provider-defined
    values (e.g. "1024x1024", "hd", "vivid") and are passed through as given.
    """
    model_config = ConfigDict(extra="ignore")

    prompt: StrictStr = Field(..., min_length=1, description="Image description.")
    size: Optional[StrictStr] = None
    quality: Optional[StrictStr] = None
    style: Optional[StrictStr] = None


# --- Responses ---

class EmbeddingResponse(BaseModel):
    embedding: List[float]

    class Config:
        json_schema_extra = {"example": {"embedding": [0.1, 0.2]}}


class SummaryResponse(BaseModel):
    summary: str


class ImageResponse(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "imageUrl": "https://example.com/image.png",
                "model": "dall-e-3",
                "cost": 0.04,
            }
        },
    )

    success: Literal[True] = True
    image_url: str = Field(..., alias="imageUrl")
    model: str = Field(..., description="Identifier of the provider model used.")
    cost: float


class ErrorResponse(BaseModel):
    error: str


class ModelsResponse(BaseModel):
    models: List[ModelConfig]
