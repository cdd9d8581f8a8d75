# File: app/domain/errors.py
import uuid
from typing import Dict, Optional

from app.domain.models import Capability

VALIDATION_MESSAGES: Dict[Capability, str] = {
    Capability.EMBEDDING: "Text is required",
    Capability.SUMMARIZATION: "Text is required",
    Capability.IMAGE_GENERATION: "Prompt is required and must be a string",
}

FAILURE_MESSAGES: Dict[Capability, str] = {
    Capability.EMBEDDING: "Failed to generate embedding",
    Capability.SUMMARIZATION: "Failed to generate summary",
    Capability.IMAGE_GENERATION: "Failed to generate image",
}

GENERIC_FAILURE_MESSAGE = "Internal server error"


class GatewayError(Exception):
    """
    Base class for every failure the gateway reports to a caller.

    `public_message` is the only text that may reach the HTTP response; the
    exception message and its `__cause__` stay in the server logs. `error_ref`
    is an opaque id that ties the response to the log entry.

    `capability` may be unknown where the error is raised (e.g. by the client
    factory); the use case boundary fills it in before the error leaves.
    """

    def __init__(self, message: str, capability: Optional[Capability] = None, error_ref: Optional[str] = None):
        super().__init__(message)
        self.capability = capability
        self.error_ref = error_ref or uuid.uuid4().hex

    @property
    def public_message(self) -> str:
        if self.capability is None:
            return GENERIC_FAILURE_MESSAGE
        return FAILURE_MESSAGES[self.capability]


class ValidationError(GatewayError):
    """Missing or malformed required request field. Never forwarded upstream."""

    def __init__(self, capability: Capability, reason: str = "invalid payload", error_ref: Optional[str] = None):
        super().__init__(reason, capability, error_ref)

    @property
    def public_message(self) -> str:
        return VALIDATION_MESSAGES[self.capability]


class ConfigurationError(GatewayError):
    """Operator fault: missing credential or model configuration."""
    pass


class ProviderError(GatewayError):
    """Any failure of the upstream provider call."""

    def __init__(
        self,
        message: str,
        capability: Optional[Capability] = None,
        error_type: str = "unexpected_error",
        error_ref: Optional[str] = None,
    ):
        super().__init__(message, capability, error_ref)
        self.error_type = error_type
