# File: app/domain/model_registry.py
from typing import Dict, List, Optional

from app.core.config import Settings
from app.domain.errors import ConfigurationError
from app.domain.models import Capability, ModelConfig, ModelPricing


class ModelRegistry:
    """
    Maps each capability to the provider model that serves it, with pricing
    and default call parameters.
    """

    def __init__(self, configs: Dict[Capability, ModelConfig]):
        self._configs = dict(configs)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelRegistry":
        embedding_params = {}
        if settings.EMBEDDING_DIMENSIONS is not None:
            embedding_params["dimensions"] = settings.EMBEDDING_DIMENSIONS

        return cls({
            Capability.EMBEDDING: ModelConfig(
                key=Capability.EMBEDDING,
                id=settings.EMBEDDING_MODEL_NAME,
                type="embedding",
                pricing=ModelPricing(input=settings.EMBEDDING_PRICE_INPUT, output=0.0),
                default_params=embedding_params,
            ),
            Capability.SUMMARIZATION: ModelConfig(
                key=Capability.SUMMARIZATION,
                id=settings.SUMMARY_MODEL_NAME,
                type="chat",
                pricing=ModelPricing(input=settings.SUMMARY_PRICE_INPUT, output=settings.SUMMARY_PRICE_OUTPUT),
                default_params={
                    "max_tokens": settings.SUMMARY_MAX_TOKENS,
                    "temperature": settings.SUMMARY_TEMPERATURE,
                },
            ),
            Capability.IMAGE_GENERATION: ModelConfig(
                key=Capability.IMAGE_GENERATION,
                id=settings.IMAGE_MODEL_NAME,
                type="image",
                pricing=ModelPricing(input=0.0, output=settings.IMAGE_PRICE_PER_IMAGE),
                default_params={"n": 1, "size": settings.IMAGE_DEFAULT_SIZE},
            ),
        })

    def get(self, capability: Capability) -> ModelConfig:
        config = self._configs.get(capability)
        if config is None:
            raise ConfigurationError(f"No AI model configured for task: {capability.value}", capability)
        return config

    def list(self) -> List[ModelConfig]:
        return list(self._configs.values())

    def calculate_cost(
        self,
        capability: Capability,
        input_tokens: Optional[int] = None,
        output_tokens: Optional[int] = None,
    ) -> float:
        pricing = self.get(capability).pricing
        return (input_tokens or 0) * pricing.input + (output_tokens or 0) * pricing.output
