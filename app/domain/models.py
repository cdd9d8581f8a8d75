# File: app/domain/models.py
import enum
from typing import Any, Dict, Generic, Literal, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class Capability(str, enum.Enum):
    """The generation operations the gateway exposes."""
    EMBEDDING = "embedding"
    SUMMARIZATION = "summarization"
    IMAGE_GENERATION = "image-generation"


class ModelPricing(BaseModel):
    """Unit prices in USD. Token-priced models charge per token, image models charge `output` per image."""
    input: float = Field(0.0, ge=0)
    output: float = Field(0.0, ge=0)


class ModelConfig(BaseModel):
    """Provider model bound to a capability."""
    key: Capability
    id: str = Field(..., description="Provider model identifier, e.g. 'text-embedding-3-small'.")
    provider: Literal["openai"] = "openai"
    type: Literal["chat", "embedding", "image"]
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    default_params: Dict[str, Any] = Field(default_factory=dict)


class Usage(BaseModel):
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    cost: float = 0.0


class GenerationResult(BaseModel, Generic[T]):
    """Result bundle returned by a provider adapter: the generated data, the model used and its usage."""
    data: T
    model: ModelConfig
    usage: Usage = Field(default_factory=Usage)
