"""
HTTP-level tests for the three generation endpoints, running the real
use cases, adapter and client factory against a stub OpenAI client.
"""
import pytest
from openai import APIConnectionError
import httpx

from tests._openai_stubs import make_chat_response, make_embedding_response, make_image_response

EMBEDDING_URL = "/api/ai/generate-embedding"
SUMMARY_URL = "/api/ai/generate-summary"
IMAGE_URL = "/api/ai/generate-image"


def _connection_error() -> APIConnectionError:
    return APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/test"))


# --- Embedding ---

def test_embedding_success(client, stub_openai_client):
    stub_openai_client.embeddings.create.return_value = make_embedding_response([0.1, 0.2])

    response = client.post(EMBEDDING_URL, json={"text": "hello"})

    assert response.status_code == 200
    assert response.json() == {"embedding": [0.1, 0.2]}
    stub_openai_client.embeddings.create.assert_awaited_once_with(model="text-embedding-3-small", input="hello")


@pytest.mark.parametrize("body", [{}, {"text": None}, {"text": 42}, {"text": ["a"]}, {"text": ""}, {"prompt": "x"}])
def test_embedding_rejects_missing_or_non_string_text(client, stub_openai_client, openai_constructor, body):
    response = client.post(EMBEDDING_URL, json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Text is required"}
    stub_openai_client.embeddings.create.assert_not_awaited()
    openai_constructor.assert_not_called()


def test_embedding_provider_failure_is_generic_500(client, stub_openai_client):
    stub_openai_client.embeddings.create.side_effect = RuntimeError("upstream exploded: sk-secret")

    response = client.post(EMBEDDING_URL, json={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate embedding"}
    assert "exploded" not in response.text
    assert stub_openai_client.embeddings.create.await_count == 1


def test_embedding_connection_error_is_not_retried_by_default(client, stub_openai_client):
    stub_openai_client.embeddings.create.side_effect = _connection_error()

    response = client.post(EMBEDDING_URL, json={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate embedding"}
    assert stub_openai_client.embeddings.create.await_count == 1


def test_embedding_empty_provider_data_is_500(client, stub_openai_client):
    stub_openai_client.embeddings.create.return_value = make_embedding_response([])

    response = client.post(EMBEDDING_URL, json={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate embedding"}


# --- Summarization ---

def test_summary_rejects_empty_body(client, stub_openai_client):
    response = client.post(SUMMARY_URL, json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Text is required"}
    stub_openai_client.chat.completions.create.assert_not_awaited()


def test_summary_success_uses_fixed_instruction_and_low_temperature(client, stub_openai_client):
    stub_openai_client.chat.completions.create.return_value = make_chat_response("  Cats are great.  ")

    response = client.post(SUMMARY_URL, json={"text": "A long text about cats."})

    assert response.status_code == 200
    assert response.json() == {"summary": "Cats are great."}

    kwargs = stub_openai_client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "gpt-4"
    assert kwargs["max_tokens"] == 150
    assert kwargs["temperature"] == 0.3
    system_message, user_message = kwargs["messages"]
    assert system_message["role"] == "system"
    assert "under 100 words" in system_message["content"]
    assert user_message == {"role": "user", "content": "Please summarize this text: A long text about cats."}


@pytest.mark.parametrize("content", [None, "", "   "])
def test_summary_falls_back_to_input_text(client, stub_openai_client, content):
    stub_openai_client.chat.completions.create.return_value = make_chat_response(content)

    response = client.post(SUMMARY_URL, json={"text": "Keep me verbatim."})

    assert response.status_code == 200
    assert response.json() == {"summary": "Keep me verbatim."}


def test_summary_provider_failure(client, stub_openai_client):
    stub_openai_client.chat.completions.create.side_effect = _connection_error()

    response = client.post(SUMMARY_URL, json={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate summary"}


# --- Image synthesis ---

def test_image_success(client, stub_openai_client):
    stub_openai_client.images.generate.return_value = make_image_response("https://img.example.com/1.png")

    response = client.post(IMAGE_URL, json={"prompt": "cat", "size": "1792x1024", "style": "vivid"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "imageUrl": "https://img.example.com/1.png",
        "model": "dall-e-3",
        "cost": 0.04,
    }
    stub_openai_client.images.generate.assert_awaited_once_with(
        model="dall-e-3", prompt="cat", n=1, size="1792x1024", style="vivid"
    )


def test_image_defaults_size_and_omits_unset_options(client, stub_openai_client):
    client.post(IMAGE_URL, json={"prompt": "cat"})

    kwargs = stub_openai_client.images.generate.await_args.kwargs
    assert kwargs["size"] == "1024x1024"
    assert "quality" not in kwargs
    assert "style" not in kwargs


@pytest.mark.parametrize("body", [{}, {"prompt": 1}, {"prompt": ""}, {"text": "cat"}, {"prompt": "cat", "size": 1024}])
def test_image_rejects_invalid_prompt(client, stub_openai_client, body):
    response = client.post(IMAGE_URL, json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required and must be a string"}
    stub_openai_client.images.generate.assert_not_awaited()


def test_image_provider_failure(client, stub_openai_client):
    stub_openai_client.images.generate.side_effect = ValueError("content policy violation")

    response = client.post(IMAGE_URL, json={"prompt": "cat"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate image"}
    assert "policy" not in response.text


# --- Request plumbing ---

def test_malformed_json_body_is_a_validation_failure(client, stub_openai_client):
    response = client.post(SUMMARY_URL, content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Text is required"}
    stub_openai_client.chat.completions.create.assert_not_awaited()


def test_non_object_json_body_is_a_validation_failure(client):
    response = client.post(IMAGE_URL, json=["cat"])

    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required and must be a string"}


def test_request_id_is_echoed(client):
    response = client.post(EMBEDDING_URL, json={"text": "hello"}, headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Process-Time"].endswith("ms")


def test_client_is_built_once_and_shared(client, openai_constructor):
    client.post(EMBEDDING_URL, json={"text": "one"})
    client.post(SUMMARY_URL, json={"text": "two"})
    client.post(IMAGE_URL, json={"prompt": "three"})

    openai_constructor.assert_called_once()
    assert openai_constructor.call_args.kwargs["api_key"] == "sk-test-key"
    assert openai_constructor.call_args.kwargs["max_retries"] == 0


# --- Missing credential ---

@pytest.mark.parametrize(
    "url, body, message",
    [
        (EMBEDDING_URL, {"text": "hello"}, "Failed to generate embedding"),
        (SUMMARY_URL, {"text": "hello"}, "Failed to generate summary"),
        (IMAGE_URL, {"prompt": "cat"}, "Failed to generate image"),
    ],
)
def test_missing_credential_fails_without_contacting_provider(unconfigured_client, openai_constructor, url, body, message):
    response = unconfigured_client.post(url, json=body)

    assert response.status_code == 500
    assert response.json() == {"error": message}
    openai_constructor.assert_not_called()
