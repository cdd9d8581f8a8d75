# File: app/application/ports/generation_provider_port.py
import abc
from typing import Any, Dict, List, Optional, Tuple

from app.domain.models import GenerationResult, ModelConfig


class GenerationProviderPort(abc.ABC):
    """
    Abstract port defining the interface for an upstream generative-AI provider.
    Each method performs exactly one upstream call.
    """

    @abc.abstractmethod
    async def create_embedding(self, text: str) -> GenerationResult[List[float]]:
        """
        Generates an embedding vector for a single text.

        Returns:
            GenerationResult whose `data` is the first embedding vector.

        Raises:
            ConfigurationError: If the provider credential is missing.
            ProviderError: If the upstream call fails or returns no vector.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def complete_chat(
        self,
        messages: List[Dict[str, str]],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult[str]:
        """
        Runs a chat completion with the summarization model.

        Args:
            messages: Chat messages as `{"role": ..., "content": ...}` dicts.
            overrides: Call parameters that replace the model defaults.

        Returns:
            GenerationResult whose `data` is the trimmed content of the first
            choice, or an empty string when the provider returned none.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def generate_image(
        self,
        prompt: str,
        size: Optional[str] = None,
        quality: Optional[str] = None,
        style: Optional[str] = None,
    ) -> GenerationResult[str]:
        """
        Generates one image. `data` is the URL of the generated asset and
        `usage.cost` the flat per-image price.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def list_models(self) -> List[ModelConfig]:
        raise NotImplementedError

    @abc.abstractmethod
    def is_configured(self) -> bool:
        """True when a provider credential is available. Makes no network call."""
        raise NotImplementedError

    @abc.abstractmethod
    async def health_check(self) -> Tuple[bool, str]:
        """
        Probes the provider.

        Returns:
            A tuple (is_healthy: bool, status_message: str).
        """
        raise NotImplementedError
