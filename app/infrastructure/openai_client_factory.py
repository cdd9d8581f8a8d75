# File: app/infrastructure/openai_client_factory.py
import threading
import time
from typing import Optional

import structlog
from openai import AsyncOpenAI

from app.core.config import Settings
from app.domain.errors import ConfigurationError

log = structlog.get_logger(__name__)


class OpenAIClientFactory:
    """
    Builds the authenticated OpenAI client on first use and hands the same
    instance to every caller afterwards.

    The credential is read from settings once, when the client is built. A
    missing credential raises ConfigurationError before any client exists, so
    no network call can be attempted.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._client: Optional[AsyncOpenAI] = None
        self._lock = threading.Lock()

    @property
    def is_configured(self) -> bool:
        return self._settings.openai_configured

    @property
    def client_initialized(self) -> bool:
        return self._client is not None

    def get_client(self) -> AsyncOpenAI:
        client = self._client
        if client is not None:
            return client

        with self._lock:
            if self._client is None:
                self._client = self._build_client()
            return self._client

    def _build_client(self) -> AsyncOpenAI:
        init_log = log.bind(action="build_openai_client")

        if not self.is_configured:
            init_log.critical("OpenAI API key is not configured.")
            raise ConfigurationError("Missing OPENAI_API_KEY environment variable")

        start_time = time.perf_counter()
        client_kwargs = {
            "api_key": self._settings.OPENAI_API_KEY.get_secret_value(),
            "max_retries": 0,
        }
        if self._settings.OPENAI_BASE_URL:
            client_kwargs["base_url"] = self._settings.OPENAI_BASE_URL
        if self._settings.OPENAI_TIMEOUT_SECONDS is not None:
            client_kwargs["timeout"] = self._settings.OPENAI_TIMEOUT_SECONDS

        client = AsyncOpenAI(**client_kwargs)
        duration_ms = (time.perf_counter() - start_time) * 1000
        init_log.info(
            "OpenAI client initialized.",
            base_url=self._settings.OPENAI_BASE_URL or "default",
            timeout_seconds=self._settings.OPENAI_TIMEOUT_SECONDS,
            duration_ms=round(duration_ms, 2),
        )
        return client

    async def close(self):
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            await client.close()
            log.info("OpenAI client closed.")
