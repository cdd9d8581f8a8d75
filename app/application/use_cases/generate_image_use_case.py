# File: app/application/use_cases/generate_image_use_case.py
import structlog

from app.api.v1.schemas import ImageRequest, ImageResponse
from app.application.use_cases.base_generation_use_case import GenerationUseCase
from app.domain.models import Capability

log = structlog.get_logger(__name__)


class GenerateImageUseCase(GenerationUseCase[ImageRequest, ImageResponse]):
    """Generates one image through the provider's image wrapper and reports its cost."""

    capability = Capability.IMAGE_GENERATION
    request_schema = ImageRequest

    async def run(self, request: ImageRequest) -> ImageResponse:
        result = await self.provider.generate_image(
            request.prompt,
            size=request.size,
            quality=request.quality,
            style=request.style,
        )
        log.info("Image generated", model=result.model.id, cost=result.usage.cost)
        return ImageResponse(image_url=result.data, model=result.model.id, cost=result.usage.cost)
