# File: app/application/use_cases/generate_summary_use_case.py
from typing import Dict, List

import structlog

from app.api.v1.schemas import SummaryRequest, SummaryResponse
from app.application.use_cases.base_generation_use_case import GenerationUseCase
from app.domain.models import Capability

log = structlog.get_logger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise summaries of text. "
    "Keep summaries under 100 words and capture the main ideas."
)


def build_summary_messages(text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {"role": "user", "content": f"Please summarize this text: {text}"},
    ]


class GenerateSummaryUseCase(GenerationUseCase[SummaryRequest, SummaryResponse]):
    """
    Summarizes a text with a low-temperature, length-bounded chat completion.

    When the provider returns no content the input text is returned as the
    summary, so callers always receive non-empty text.
    """

    capability = Capability.SUMMARIZATION
    request_schema = SummaryRequest

    async def run(self, request: SummaryRequest) -> SummaryResponse:
        result = await self.provider.complete_chat(build_summary_messages(request.text))

        summary = result.data or request.text
        if not result.data:
            log.warning("Provider returned empty summary; falling back to input text", model=result.model.id)

        log.info(
            "Summary generated",
            model=result.model.id,
            input_tokens=result.usage.input_tokens,
            output_tokens=result.usage.output_tokens,
            cost=result.usage.cost,
        )
        return SummaryResponse(summary=summary)
