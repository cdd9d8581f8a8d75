# File: app/main.py
import time
import uuid
import structlog
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

# --- Setup Logging First ---
from app.core.logging_config import setup_logging
setup_logging()

from app.core.config import Settings, settings as default_settings
from app.core.metrics import REQUEST_PROCESSING_DURATION_SECONDS
from app.api.v1.endpoints import generation_endpoint, models_endpoint
from app.api.v1.error_handlers import register_error_handlers
from app.application.ports.generation_provider_port import GenerationProviderPort
from app.dependencies import build_gateway_dependencies
from app.infrastructure.openai_client_factory import OpenAIClientFactory

log = structlog.get_logger(__name__)

SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("AI Gateway startup complete.", openai_configured=app.state.gateway.provider.is_configured())
    yield
    log.info("AI Gateway shutting down...")
    client_factory = app.state.gateway.client_factory
    if client_factory is not None:
        await client_factory.close()
    log.info("Shutdown complete.")


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[GenerationProviderPort] = None,
    client_factory: Optional[OpenAIClientFactory] = None,
) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Server-side gateway for text embedding, summarization and image generation.",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = build_gateway_dependencies(settings, provider=provider, client_factory=client_factory)

    # --- Middlewares ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    @app.middleware("http")
    async def request_context_timing_logging(request: Request, call_next):
        if request.url.path.startswith("/metrics"):
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        request_log = log.bind(
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown"
        )
        request_log.info("Request received")

        try:
            response = await call_next(request)
        except Exception:
            process_time = (time.perf_counter() - start_time) * 1000
            request_log.exception("Unhandled exception during request", duration_ms=round(process_time, 2))
            return JSONResponse(status_code=500, content={"error": "Internal server error"})

        process_time = time.perf_counter() - start_time
        route = request.scope.get("route")
        REQUEST_PROCESSING_DURATION_SECONDS.labels(
            method=request.method,
            path=getattr(route, "path", request.url.path),
        ).observe(process_time)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time * 1000:.2f}ms"
        request_log.info("Request completed", status_code=response.status_code, duration_ms=round(process_time * 1000, 2))
        return response

    register_error_handlers(app, configuration_error_status=settings.CONFIGURATION_ERROR_STATUS_CODE)

    # --- Routers ---
    app.include_router(generation_endpoint.router, prefix=settings.API_PREFIX, tags=["Generation"])
    app.include_router(models_endpoint.router, prefix=settings.API_PREFIX, tags=["Models"])
    log.info(f"Generation routers included with prefix: {settings.API_PREFIX}")

    app.mount("/metrics", make_asgi_app())

    # --- Health ---
    @app.get("/health", tags=["Health"], summary="Health check endpoint")
    async def health_check(request: Request, external: bool = False):
        """
        Reports whether the provider credential is configured. With
        `?external=true` the provider is also probed over the network.
        A degraded gateway still answers 200.
        """
        provider = request.app.state.gateway.provider
        configured = provider.is_configured()
        overall_status = "healthy" if configured else "degraded"
        openai_check = {"configured": configured}

        if external:
            start_time = time.perf_counter()
            healthy, message = await provider.health_check()
            openai_check.update({
                "status": "healthy" if healthy else "unhealthy",
                "detail": message,
                "response_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            })
            if not healthy:
                overall_status = "degraded"

        if overall_status != "healthy":
            log.warning("Health check degraded", checks={"openai": openai_check})

        return JSONResponse({
            "status": overall_status,
            "service": settings.PROJECT_NAME,
            "version": SERVICE_VERSION,
            "checks": {"openai": openai_check},
        })

    return app


app = create_app()


# --- Main Execution ---
if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8080,
        log_level=default_settings.LOG_LEVEL.lower()
    )
