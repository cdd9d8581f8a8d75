# File: app/application/use_cases/base_generation_use_case.py
import abc
from typing import Any, Generic, Type, TypeVar

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.application.ports.generation_provider_port import GenerationProviderPort
from app.core.metrics import REQUESTS_TOTAL
from app.domain.errors import GatewayError, ProviderError, ValidationError
from app.domain.models import Capability

log = structlog.get_logger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class GenerationUseCase(abc.ABC, Generic[RequestT, ResponseT]):
    """
    Validate -> single provider call -> shape response.

    `execute` is the error boundary for a capability: every failure leaves it
    as a GatewayError tagged with the capability, logged once with its
    error_ref. Nothing is retried or kept between calls.
    """

    capability: Capability
    request_schema: Type[RequestT]

    def __init__(self, provider: GenerationProviderPort):
        self.provider = provider
        log.info(f"{type(self).__name__} initialized", provider_adapter=type(provider).__name__)

    def validate(self, payload: Any) -> RequestT:
        try:
            return self.request_schema.model_validate(payload)
        except PydanticValidationError as e:
            fields = sorted({".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()})
            raise ValidationError(self.capability, reason=f"Invalid fields: {', '.join(fields)}") from e

    @abc.abstractmethod
    async def run(self, request: RequestT) -> ResponseT:
        raise NotImplementedError

    async def execute(self, payload: Any) -> ResponseT:
        use_case_log = log.bind(capability=self.capability.value)

        try:
            request = self.validate(payload)
        except ValidationError as e:
            use_case_log.warning("Rejected invalid generation request", reason=str(e), error_ref=e.error_ref)
            REQUESTS_TOTAL.labels(capability=self.capability.value, status="invalid").inc()
            raise

        try:
            response = await self.run(request)
        except GatewayError as e:
            if e.capability is None:
                e.capability = self.capability
            use_case_log.error(
                "Generation failed",
                error_kind=type(e).__name__,
                error=str(e),
                error_ref=e.error_ref,
                exc_info=True,
            )
            REQUESTS_TOTAL.labels(capability=self.capability.value, status="error").inc()
            raise
        except Exception as e:
            error = ProviderError(f"Unexpected error: {e}", self.capability)
            use_case_log.exception("Unexpected error during generation", error_ref=error.error_ref)
            REQUESTS_TOTAL.labels(capability=self.capability.value, status="error").inc()
            raise error from e

        REQUESTS_TOTAL.labels(capability=self.capability.value, status="success").inc()
        return response
