# File: app/api/v1/error_handlers.py
import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.domain.errors import ConfigurationError, GatewayError, ValidationError

log = structlog.get_logger(__name__)


def status_code_for(error: GatewayError, configuration_error_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> int:
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, ConfigurationError):
        return configuration_error_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(error: GatewayError, configuration_error_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    """Renders the `{error}` envelope. Only the fixed public message reaches the body."""
    return JSONResponse(
        status_code=status_code_for(error, configuration_error_status),
        content={"error": error.public_message},
    )


def register_error_handlers(app: FastAPI, configuration_error_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        log.debug(
            "Mapping gateway error to response",
            path=request.url.path,
            error_kind=type(exc).__name__,
            capability=exc.capability.value if exc.capability else None,
            error_ref=exc.error_ref,
        )
        return error_response(exc, configuration_error_status)
