# app/api/v1/endpoints/models_endpoint.py
from fastapi import APIRouter, Depends

from app.api.v1 import schemas
from app.application.ports.generation_provider_port import GenerationProviderPort
from app.dependencies import get_provider

router = APIRouter()


@router.get(
    "/models",
    response_model=schemas.ModelsResponse,
    summary="List the provider models configured per capability",
)
async def list_models_endpoint(provider: GenerationProviderPort = Depends(get_provider)):
    return schemas.ModelsResponse(models=provider.list_models())
