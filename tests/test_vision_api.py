"""Tests for the single chat completions exchange."""

import httpx
import pytest

from conftest import API_KEY, completion
from errors import ApiRequestError, EmptyResponseError, TransportError
from prompts import DetailLevel, FocusLevel, build_prompt
from vision_api import build_messages, create_client, extract_alt_text, request_alt_text

PROMPT = build_prompt(DetailLevel.QUICKLY, FocusLevel.LARGE_IMAGES)


@pytest.fixture
def client(http_client):
    return create_client(API_KEY, http_client=http_client)


@pytest.mark.asyncio
async def test_request_shape(client, fake_api):
    await request_alt_text(client, "QUJD", PROMPT, model="gpt-4o")

    assert fake_api.call_count == 1
    request = fake_api.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["Authorization"] == f"Bearer {API_KEY}"

    payload = fake_api.payloads[0]
    assert payload["model"] == "gpt-4o"
    assert payload["max_tokens"] == 75
    assert payload["messages"] == [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": PROMPT.instruction_text},
                {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,QUJD"}},
            ],
        }
    ]


@pytest.mark.asyncio
async def test_response_text_is_trimmed(client, fake_api):
    fake_api.responder = lambda payload: completion("  \nA dog on a beach.\n ")

    assert await request_alt_text(client, "QUJD", PROMPT) == "A dog on a beach."


@pytest.mark.asyncio
async def test_rate_limit_maps_to_api_request_error(client, fake_api):
    body = '{"error": {"message": "Rate limit reached", "type": "requests"}}'
    fake_api.responder = lambda payload: httpx.Response(
        429, content=body, headers={"content-type": "application/json"}
    )

    with pytest.raises(ApiRequestError) as exc_info:
        await request_alt_text(client, "QUJD", PROMPT)

    assert exc_info.value.status_code == 429
    assert exc_info.value.body == body
    assert "Rate limit reached" in str(exc_info.value)
    assert fake_api.call_count == 1


@pytest.mark.asyncio
async def test_server_error_maps_to_api_request_error(client, fake_api):
    fake_api.responder = lambda payload: httpx.Response(500, text="upstream exploded")

    with pytest.raises(ApiRequestError) as exc_info:
        await request_alt_text(client, "QUJD", PROMPT)

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "upstream exploded"


@pytest.mark.asyncio
async def test_non_200_success_status_is_rejected(client, fake_api):
    fake_api.responder = lambda payload: completion("queued", status_code=202)

    with pytest.raises(ApiRequestError) as exc_info:
        await request_alt_text(client, "QUJD", PROMPT)

    assert exc_info.value.status_code == 202


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"id": "chatcmpl-1"},
        {"choices": [{"message": {"role": "assistant", "content": None}}]},
        {"choices": [{"finish_reason": "stop"}]},
    ],
)
async def test_empty_envelopes_map_to_empty_response_error(client, fake_api, body):
    fake_api.responder = lambda payload: httpx.Response(200, json=body)

    with pytest.raises(EmptyResponseError):
        await request_alt_text(client, "QUJD", PROMPT)


@pytest.mark.asyncio
async def test_non_json_body_maps_to_empty_response_error(client, fake_api):
    fake_api.responder = lambda payload: httpx.Response(
        200, content=b"<html>gateway</html>", headers={"content-type": "text/html"}
    )

    with pytest.raises(EmptyResponseError, match="not JSON"):
        await request_alt_text(client, "QUJD", PROMPT)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [httpx.ConnectError("name resolution failed"), httpx.ReadTimeout("timed out")],
)
async def test_transport_failures_map_to_transport_error(client, fake_api, failure):
    def fail(payload):
        raise failure

    fake_api.responder = fail

    with pytest.raises(TransportError):
        await request_alt_text(client, "QUJD", PROMPT)


def test_build_messages_uses_data_uri():
    messages = build_messages("Zm9v", PROMPT)
    assert messages[0]["content"][1]["image_url"]["url"] == "data:image/jpeg;base64,Zm9v"


def test_extract_alt_text_uses_first_choice():
    payload = {
        "choices": [
            {"message": {"content": " first "}},
            {"message": {"content": "second"}},
        ]
    }
    assert extract_alt_text(payload) == "first"


def test_extract_alt_text_rejects_non_object():
    with pytest.raises(EmptyResponseError):
        extract_alt_text(["choices"])
