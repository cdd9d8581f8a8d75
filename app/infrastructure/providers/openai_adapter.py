# File: app/infrastructure/providers/openai_adapter.py
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

import structlog
from openai import (
    APIConnectionError,
    APIStatusError,
    AuthenticationError,
    OpenAIError,
    RateLimitError,
)
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.application.ports.generation_provider_port import GenerationProviderPort
from app.core.metrics import (
    GENERATION_COST_USD_TOTAL,
    PROVIDER_API_DURATION_SECONDS,
    PROVIDER_API_ERRORS_TOTAL,
)
from app.domain.errors import GatewayError, ProviderError
from app.domain.model_registry import ModelRegistry
from app.domain.models import Capability, GenerationResult, ModelConfig, Usage
from app.infrastructure.openai_client_factory import OpenAIClientFactory

log = structlog.get_logger(__name__)

R = TypeVar("R")


class OpenAIAdapter(GenerationProviderPort):
    """
    Adapter for the OpenAI embeddings, chat completions and images APIs.

    Every call goes through `_call_provider`, which times the request, applies
    the configured retry policy and converts SDK exceptions into ProviderError.
    """

    def __init__(
        self,
        client_factory: OpenAIClientFactory,
        model_registry: ModelRegistry,
        max_retries: int = 0,
        health_check_timeout: float = 5.0,
    ):
        self._client_factory = client_factory
        self._models = model_registry
        self._max_retries = max_retries
        self._health_check_timeout = health_check_timeout
        log.info(
            "OpenAIAdapter initialized",
            models={config.key.value: config.id for config in model_registry.list()},
            max_retries=max_retries,
        )

    async def _call_provider(
        self,
        capability: Capability,
        model: ModelConfig,
        operation: Callable[[], Awaitable[R]],
    ) -> R:
        call_log = log.bind(adapter="OpenAIAdapter", capability=capability.value, model=model.id)

        # Raises ConfigurationError before any network activity.
        self._client_factory.get_client()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type((APIConnectionError, RateLimitError)),
            before_sleep=lambda retry_state: call_log.warning(
                "Retrying OpenAI call",
                attempt_number=retry_state.attempt_number,
                wait_time=retry_state.next_action.sleep if retry_state.next_action else None,
                error=str(retry_state.outcome.exception()) if retry_state.outcome else "Unknown error",
            ),
            reraise=True,
        )

        try:
            with PROVIDER_API_DURATION_SECONDS.labels(capability=capability.value, model_name=model.id).time():
                async for attempt in retrying:
                    with attempt:
                        result = await operation()
            return result
        except GatewayError:
            raise
        except AuthenticationError as e:
            raise self._provider_error(call_log, capability, "authentication_error", e) from e
        except RateLimitError as e:
            raise self._provider_error(call_log, capability, "rate_limit_error", e) from e
        except APIConnectionError as e:
            raise self._provider_error(call_log, capability, "connection_error", e) from e
        except APIStatusError as e:
            raise self._provider_error(call_log, capability, f"status_{e.status_code}", e) from e
        except OpenAIError as e:
            raise self._provider_error(call_log, capability, type(e).__name__, e) from e
        except Exception as e:
            raise self._provider_error(call_log, capability, "unexpected_error", e) from e

    @staticmethod
    def _provider_error(call_log, capability: Capability, error_type: str, cause: Exception) -> ProviderError:
        PROVIDER_API_ERRORS_TOTAL.labels(capability=capability.value, error_type=error_type).inc()
        error = ProviderError(f"OpenAI call failed: {cause}", capability, error_type=error_type)
        call_log.error("OpenAI API error", error_type=error_type, error=str(cause), error_ref=error.error_ref)
        return error

    def _record_cost(self, model: ModelConfig, usage: Usage):
        GENERATION_COST_USD_TOTAL.labels(capability=model.key.value, model_name=model.id).inc(usage.cost)

    def _token_usage(self, capability: Capability, raw_usage: Any) -> Usage:
        input_tokens = getattr(raw_usage, "prompt_tokens", None)
        output_tokens = getattr(raw_usage, "completion_tokens", None)
        return Usage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost=self._models.calculate_cost(capability, input_tokens, output_tokens),
        )

    async def create_embedding(self, text: str) -> GenerationResult[List[float]]:
        capability = Capability.EMBEDDING
        model = self._models.get(capability)
        params: Dict[str, Any] = {"model": model.id, "input": text, **model.default_params}

        async def _create():
            return await self._client_factory.get_client().embeddings.create(**params)

        response = await self._call_provider(capability, model, _create)

        if not response.data or not response.data[0].embedding:
            PROVIDER_API_ERRORS_TOTAL.labels(capability=capability.value, error_type="empty_response").inc()
            raise ProviderError("OpenAI API returned no valid embedding data.", capability, error_type="empty_response")

        usage = self._token_usage(capability, getattr(response, "usage", None))
        self._record_cost(model, usage)
        log.debug("Embedding generated", model=model.id, dimension=len(response.data[0].embedding), cost=usage.cost)
        return GenerationResult(data=list(response.data[0].embedding), model=model, usage=usage)

    async def complete_chat(
        self,
        messages: List[Dict[str, str]],
        overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult[str]:
        capability = Capability.SUMMARIZATION
        model = self._models.get(capability)
        params: Dict[str, Any] = {
            "model": model.id,
            "messages": messages,
            **model.default_params,
            **(overrides or {}),
        }

        async def _create():
            return await self._client_factory.get_client().chat.completions.create(**params)

        response = await self._call_provider(capability, model, _create)

        content = ""
        if response.choices:
            message = response.choices[0].message
            content = (getattr(message, "content", None) or "").strip()

        usage = self._token_usage(capability, getattr(response, "usage", None))
        self._record_cost(model, usage)
        log.debug("Chat completion generated", model=model.id, content_length=len(content), cost=usage.cost)
        return GenerationResult(data=content, model=model, usage=usage)

    async def generate_image(
        self,
        prompt: str,
        size: Optional[str] = None,
        quality: Optional[str] = None,
        style: Optional[str] = None,
    ) -> GenerationResult[str]:
        capability = Capability.IMAGE_GENERATION
        model = self._models.get(capability)
        params: Dict[str, Any] = {"model": model.id, "prompt": prompt, **model.default_params}
        # Unset options keep the model defaults and are not sent upstream.
        for name, value in (("size", size), ("quality", quality), ("style", style)):
            if value is not None:
                params[name] = value

        async def _generate():
            return await self._client_factory.get_client().images.generate(**params)

        response = await self._call_provider(capability, model, _generate)

        image = response.data[0] if response.data else None
        image_url = getattr(image, "url", None) if image is not None else None
        if not image_url and image is not None and getattr(image, "b64_json", None):
            image_url = f"data:image/png;base64,{image.b64_json}"
        if not image_url:
            PROVIDER_API_ERRORS_TOTAL.labels(capability=capability.value, error_type="empty_response").inc()
            raise ProviderError("OpenAI API returned no image.", capability, error_type="empty_response")

        # Flat price per image.
        usage = Usage(cost=model.pricing.output)
        self._record_cost(model, usage)
        log.debug("Image generated", model=model.id, size=params.get("size"), cost=usage.cost)
        return GenerationResult(data=image_url, model=model, usage=usage)

    def list_models(self) -> List[ModelConfig]:
        return self._models.list()

    def is_configured(self) -> bool:
        return self._client_factory.is_configured

    async def health_check(self) -> Tuple[bool, str]:
        if not self._client_factory.is_configured:
            return False, "OpenAI API key is not configured."
        start_time = time.perf_counter()
        try:
            client = self._client_factory.get_client()
            await client.with_options(timeout=self._health_check_timeout).models.list()
        except Exception as e:
            log.warning("OpenAI health check failed", error_type=type(e).__name__, error=str(e))
            return False, f"OpenAI API unreachable: {type(e).__name__}"
        duration_ms = (time.perf_counter() - start_time) * 1000
        return True, f"OpenAI API reachable in {duration_ms:.0f}ms."
