# app/dependencies.py
"""
Dependency wiring for the AI Gateway.

`build_gateway_dependencies` constructs the client factory, provider adapter
and use cases once per application; `create_app` stores them on `app.state`
and the `get_*` resolvers below hand them to the endpoints. Tests pass their
own provider (or client factory) instead of relying on module-level state.
"""
from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import HTTPException, Request, status

from app.application.ports.generation_provider_port import GenerationProviderPort
from app.application.use_cases.generate_embedding_use_case import GenerateEmbeddingUseCase
from app.application.use_cases.generate_image_use_case import GenerateImageUseCase
from app.application.use_cases.generate_summary_use_case import GenerateSummaryUseCase
from app.core.config import Settings
from app.domain.model_registry import ModelRegistry
from app.infrastructure.openai_client_factory import OpenAIClientFactory
from app.infrastructure.providers.openai_adapter import OpenAIAdapter

log = structlog.get_logger(__name__)


@dataclass
class GatewayDependencies:
    provider: GenerationProviderPort
    embedding_use_case: GenerateEmbeddingUseCase
    summary_use_case: GenerateSummaryUseCase
    image_use_case: GenerateImageUseCase
    client_factory: Optional[OpenAIClientFactory] = None


def build_gateway_dependencies(
    settings: Settings,
    provider: Optional[GenerationProviderPort] = None,
    client_factory: Optional[OpenAIClientFactory] = None,
) -> GatewayDependencies:
    """
    Builds the shared instances. No provider client is created here; the
    factory builds it on the first request that needs it.
    """
    if provider is None:
        client_factory = client_factory or OpenAIClientFactory(settings)
        provider = OpenAIAdapter(
            client_factory=client_factory,
            model_registry=ModelRegistry.from_settings(settings),
            max_retries=settings.OPENAI_MAX_RETRIES,
            health_check_timeout=settings.HEALTH_CHECK_TIMEOUT_SECONDS,
        )

    deps = GatewayDependencies(
        provider=provider,
        embedding_use_case=GenerateEmbeddingUseCase(provider),
        summary_use_case=GenerateSummaryUseCase(provider),
        image_use_case=GenerateImageUseCase(provider),
        client_factory=client_factory,
    )
    log.info("Gateway dependencies built", provider_adapter=type(provider).__name__)
    return deps


def _get_dependencies(request: Request) -> GatewayDependencies:
    deps = getattr(request.app.state, "gateway", None)
    if deps is None:
        log.error("Gateway dependencies requested but not initialized.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI Gateway is not ready. Please try again later."
        )
    return deps


def get_provider(request: Request) -> GenerationProviderPort:
    return _get_dependencies(request).provider


def get_embedding_use_case(request: Request) -> GenerateEmbeddingUseCase:
    return _get_dependencies(request).embedding_use_case


def get_summary_use_case(request: Request) -> GenerateSummaryUseCase:
    return _get_dependencies(request).summary_use_case


def get_image_use_case(request: Request) -> GenerateImageUseCase:
    return _get_dependencies(request).image_use_case
