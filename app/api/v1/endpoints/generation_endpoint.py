# app/api/v1/endpoints/generation_endpoint.py
import json
from typing import Any, Type

import structlog
from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from app.api.v1 import schemas
from app.application.use_cases.generate_embedding_use_case import GenerateEmbeddingUseCase
from app.application.use_cases.generate_image_use_case import GenerateImageUseCase
from app.application.use_cases.generate_summary_use_case import GenerateSummaryUseCase
from app.dependencies import get_embedding_use_case, get_image_use_case, get_summary_use_case

router = APIRouter()
log = structlog.get_logger(__name__)

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse, "description": "Missing or invalid required field"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": schemas.ErrorResponse, "description": "Provider or configuration failure"},
}


def _json_body(schema: Type[BaseModel]) -> dict:
    # Bodies are parsed by the use cases, so the schema is declared here.
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema()}},
        }
    }


async def _read_payload(request: Request) -> Any:
    """Returns the decoded JSON body, or None when the body is not valid JSON."""
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        log.warning("Request body is not valid JSON", path=request.url.path, error=str(e))
        return None


@router.post(
    "/generate-embedding",
    response_model=schemas.EmbeddingResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate an embedding for a text",
    responses=ERROR_RESPONSES,
    openapi_extra=_json_body(schemas.EmbeddingRequest),
)
async def generate_embedding_endpoint(
    request: Request,
    use_case: GenerateEmbeddingUseCase = Depends(get_embedding_use_case),
):
    payload = await _read_payload(request)
    return await use_case.execute(payload)


@router.post(
    "/generate-summary",
    response_model=schemas.SummaryResponse,
    status_code=status.HTTP_200_OK,
    summary="Summarize a text in under ~100 words",
    responses=ERROR_RESPONSES,
    openapi_extra=_json_body(schemas.SummaryRequest),
)
async def generate_summary_endpoint(
    request: Request,
    use_case: GenerateSummaryUseCase = Depends(get_summary_use_case),
):
    payload = await _read_payload(request)
    return await use_case.execute(payload)


@router.post(
    "/generate-image",
    response_model=schemas.ImageResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate an image from a prompt",
    description="Returns the generated image URL, the model used and the estimated cost.",
    responses=ERROR_RESPONSES,
    openapi_extra=_json_body(schemas.ImageRequest),
)
async def generate_image_endpoint(
    request: Request,
    use_case: GenerateImageUseCase = Depends(get_image_use_case),
):
    payload = await _read_payload(request)
    return await use_case.execute(payload)
