# app/services/gateway_client.py
from typing import Any, Dict, List, Optional

import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.api.v1.schemas import ImageResponse

log = structlog.get_logger(__name__)


class GatewayClientError(Exception):
    """Raised when a gateway call fails. `detail` holds the gateway's `{error}` body when there is one."""
    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class GenerationGatewayClient:
    """
    Async client for services that call the AI Gateway instead of the provider.
    Network errors are retried with exponential backoff; HTTP error responses
    are not retried.
    """

    def __init__(
        self,
        base_url: str,
        api_prefix: str = "/api/ai",
        timeout: float = 60.0,
        max_attempts: int = 3,
        backoff_factor: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_prefix = api_prefix.rstrip("/")
        self.max_attempts = max_attempts
        self.backoff_factor = backoff_factor
        self.client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.log = log.bind(service_client="GenerationGatewayClient", service_url=base_url)

    async def close(self):
        await self.client.aclose()
        self.log.info("Gateway client closed.")

    async def __aenter__(self) -> "GenerationGatewayClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.api_prefix}{endpoint}"
        self.log.debug("Requesting AI Gateway", endpoint=url)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=self.backoff_factor, min=self.backoff_factor, max=10),
                retry=retry_if_exception_type(httpx.RequestError),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.post(url, json=payload)
        except httpx.RequestError as e:
            self.log.error("Request error calling AI Gateway", endpoint=url, error=str(e))
            raise GatewayClientError(
                message=f"Request to AI Gateway failed: {type(e).__name__}",
                detail=str(e)
            ) from e

        if response.is_error:
            error_detail: Any = response.text
            try:
                error_detail = response.json()
            except ValueError:
                pass
            self.log.error("HTTP error from AI Gateway", endpoint=url, status_code=response.status_code, detail=error_detail)
            raise GatewayClientError(
                message=f"AI Gateway returned error: {response.status_code}",
                status_code=response.status_code,
                detail=error_detail,
            )

        try:
            return response.json()
        except ValueError as e:
            raise GatewayClientError(
                message="Invalid JSON response from AI Gateway.",
                status_code=response.status_code,
                detail=response.text,
            ) from e

    async def generate_embedding(self, text: str) -> List[float]:
        data = await self._post("/generate-embedding", {"text": text})
        if "embedding" not in data:
            raise GatewayClientError("Invalid response format from AI Gateway.", detail=data)
        return data["embedding"]

    async def generate_summary(self, text: str) -> str:
        data = await self._post("/generate-summary", {"text": text})
        if "summary" not in data:
            raise GatewayClientError("Invalid response format from AI Gateway.", detail=data)
        return data["summary"]

    async def generate_image(
        self,
        prompt: str,
        size: Optional[str] = None,
        quality: Optional[str] = None,
        style: Optional[str] = None,
    ) -> ImageResponse:
        payload: Dict[str, Any] = {"prompt": prompt}
        for name, value in (("size", size), ("quality", quality), ("style", style)):
            if value is not None:
                payload[name] = value
        data = await self._post("/generate-image", payload)
        try:
            return ImageResponse.model_validate(data)
        except ValueError as e:
            raise GatewayClientError("Invalid response format from AI Gateway.", detail=data) from e
