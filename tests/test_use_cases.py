import pytest

from app.application.use_cases.generate_embedding_use_case import GenerateEmbeddingUseCase
from app.application.use_cases.generate_image_use_case import GenerateImageUseCase
from app.application.use_cases.generate_summary_use_case import GenerateSummaryUseCase, SUMMARY_SYSTEM_PROMPT
from app.domain.errors import ConfigurationError, ProviderError, ValidationError
from app.domain.models import Capability, GenerationResult, ModelConfig, Usage


@pytest.mark.parametrize(
    "use_case_cls, payload",
    [
        (GenerateEmbeddingUseCase, None),
        (GenerateEmbeddingUseCase, {"text": 3.5}),
        (GenerateSummaryUseCase, {"text": True}),
        (GenerateSummaryUseCase, "just a string"),
        (GenerateImageUseCase, {"prompt": None}),
        (GenerateImageUseCase, {"prompt": "cat", "quality": ["hd"]}),
    ],
)
async def test_invalid_payload_never_reaches_provider(fake_provider, use_case_cls, payload):
    use_case = use_case_cls(fake_provider)

    with pytest.raises(ValidationError) as exc_info:
        await use_case.execute(payload)

    assert exc_info.value.capability == use_case_cls.capability
    assert fake_provider.total_calls == 0


async def test_embedding_returns_vector(fake_provider):
    response = await GenerateEmbeddingUseCase(fake_provider).execute({"text": "hello", "extra": "ignored"})

    assert response.model_dump() == {"embedding": [0.1, 0.2]}
    fake_provider.embedding_mock.assert_awaited_once_with("hello")


async def test_summary_builds_messages(fake_provider):
    await GenerateSummaryUseCase(fake_provider).execute({"text": "Some text"})

    messages, overrides = fake_provider.chat_mock.await_args.args
    assert messages == [
        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
        {"role": "user", "content": "Please summarize this text: Some text"},
    ]
    assert overrides is None


async def test_summary_falls_back_to_input_on_empty_result(fake_provider):
    fake_provider.chat_mock.return_value = fake_provider._result(Capability.SUMMARIZATION, "")

    response = await GenerateSummaryUseCase(fake_provider).execute({"text": "Original idea"})

    assert response.summary == "Original idea"


async def test_image_shapes_wrapper_result(fake_provider):
    response = await GenerateImageUseCase(fake_provider).execute({"prompt": "cat"})

    assert response.model_dump(by_alias=True) == {"success": True, "imageUrl": "url", "model": "m1", "cost": 0.02}
    fake_provider.image_mock.assert_awaited_once_with("cat", size=None, quality=None, style=None)


async def test_image_passes_options_through(fake_provider):
    await GenerateImageUseCase(fake_provider).execute(
        {"prompt": "cat", "size": "1024x1792", "quality": "hd", "style": "natural"}
    )

    fake_provider.image_mock.assert_awaited_once_with("cat", size="1024x1792", quality="hd", style="natural")


async def test_unexpected_error_is_wrapped_as_provider_error(fake_provider):
    cause = KeyError("data")
    fake_provider.embedding_mock.side_effect = cause

    with pytest.raises(ProviderError) as exc_info:
        await GenerateEmbeddingUseCase(fake_provider).execute({"text": "hello"})

    error = exc_info.value
    assert error.capability == Capability.EMBEDDING
    assert error.__cause__ is cause
    assert error.public_message == "Failed to generate embedding"
    assert len(error.error_ref) == 32


async def test_untagged_configuration_error_gets_capability(fake_provider):
    fake_provider.chat_mock.side_effect = ConfigurationError("Missing OPENAI_API_KEY environment variable")

    with pytest.raises(ConfigurationError) as exc_info:
        await GenerateSummaryUseCase(fake_provider).execute({"text": "hello"})

    assert exc_info.value.capability == Capability.SUMMARIZATION
    assert exc_info.value.public_message == "Failed to generate summary"


async def test_use_case_keeps_no_state_between_calls(fake_provider):
    use_case = GenerateImageUseCase(fake_provider)
    fake_provider.image_mock.side_effect = [
        RuntimeError("first call fails"),
        GenerationResult(
            data="https://img/2.png",
            model=ModelConfig(key=Capability.IMAGE_GENERATION, id="dall-e-3", type="image"),
            usage=Usage(cost=0.04),
        ),
    ]

    with pytest.raises(ProviderError):
        await use_case.execute({"prompt": "cat"})
    response = await use_case.execute({"prompt": "cat"})

    assert response.image_url == "https://img/2.png"
    assert fake_provider.image_mock.await_count == 2
