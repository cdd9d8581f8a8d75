# File: app/application/use_cases/generate_embedding_use_case.py
import structlog

from app.api.v1.schemas import EmbeddingRequest, EmbeddingResponse
from app.application.use_cases.base_generation_use_case import GenerationUseCase
from app.domain.models import Capability

log = structlog.get_logger(__name__)


class GenerateEmbeddingUseCase(GenerationUseCase[EmbeddingRequest, EmbeddingResponse]):
    """Embeds a single text with the configured embedding model."""

    capability = Capability.EMBEDDING
    request_schema = EmbeddingRequest

    async def run(self, request: EmbeddingRequest) -> EmbeddingResponse:
        result = await self.provider.create_embedding(request.text)
        log.info(
            "Embedding generated",
            model=result.model.id,
            dimension=len(result.data),
            input_tokens=result.usage.input_tokens,
            cost=result.usage.cost,
        )
        return EmbeddingResponse(embedding=result.data)
