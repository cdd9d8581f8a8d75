"""
Shared fixtures for the AI Gateway tests.

The OpenAI SDK is never reached: `openai_constructor` replaces the
`AsyncOpenAI` class used by the client factory with a mock that returns a
stub client, and `FakeProvider` stands in for the whole provider port in
use-case tests.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.application.ports.generation_provider_port import GenerationProviderPort
from app.core.config import Settings
from app.domain.model_registry import ModelRegistry
from app.domain.models import Capability, GenerationResult, ModelConfig, Usage
from app.main import create_app
from tests._openai_stubs import make_stub_openai_client

# =============================================================================
# Fake provider port
# =============================================================================


class FakeProvider(GenerationProviderPort):
    """Provider port double. Each call is recorded on the matching `*_mock`."""

    def __init__(self, settings: Settings):
        self.registry = ModelRegistry.from_settings(settings)
        self.configured = True
        self.embedding_mock = AsyncMock(
            return_value=self._result(Capability.EMBEDDING, [0.1, 0.2])
        )
        self.chat_mock = AsyncMock(
            return_value=self._result(Capability.SUMMARIZATION, "A short summary.")
        )
        self.image_mock = AsyncMock(
            return_value=GenerationResult(
                data="url",
                model=ModelConfig(key=Capability.IMAGE_GENERATION, id="m1", type="image"),
                usage=Usage(cost=0.02),
            )
        )
        self.health_mock = AsyncMock(return_value=(True, "ok"))

    def _result(self, capability: Capability, data, cost: float = 0.0) -> GenerationResult:
        return GenerationResult(data=data, model=self.registry.get(capability), usage=Usage(cost=cost))

    @property
    def total_calls(self) -> int:
        return self.embedding_mock.await_count + self.chat_mock.await_count + self.image_mock.await_count

    async def create_embedding(self, text):
        return await self.embedding_mock(text)

    async def complete_chat(self, messages, overrides=None):
        return await self.chat_mock(messages, overrides)

    async def generate_image(self, prompt, size=None, quality=None, style=None):
        return await self.image_mock(prompt, size=size, quality=quality, style=style)

    async def health_check(self):
        return await self.health_mock()

    def list_models(self):
        return self.registry.list()

    def is_configured(self):
        return self.configured


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def gateway_settings() -> Settings:
    return Settings(OPENAI_API_KEY="sk-test-key", _env_file=None)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(OPENAI_API_KEY=None, _env_file=None)


@pytest.fixture
def stub_openai_client():
    return make_stub_openai_client()


@pytest.fixture
def openai_constructor(monkeypatch, stub_openai_client):
    constructor = MagicMock(return_value=stub_openai_client)
    monkeypatch.setattr("app.infrastructure.openai_client_factory.AsyncOpenAI", constructor)
    return constructor


@pytest.fixture
def client(gateway_settings, openai_constructor) -> TestClient:
    return TestClient(create_app(settings=gateway_settings))


@pytest.fixture
def unconfigured_client(unconfigured_settings, openai_constructor) -> TestClient:
    return TestClient(create_app(settings=unconfigured_settings))


@pytest.fixture
def fake_provider(gateway_settings) -> FakeProvider:
    return FakeProvider(gateway_settings)


@pytest.fixture
def fake_client(gateway_settings, fake_provider) -> TestClient:
    return TestClient(create_app(settings=gateway_settings, provider=fake_provider))
