"""Tests for the Gemini adapter."""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from agri_vision.providers._exceptions import APIError, RateLimitError
from agri_vision.providers._gemini import GeminiAdapter, _build_payload, _extract_answer
from tests.conftest import PNG_BYTES, MockResponse, httpx_response

_TEXT_RESPONSE = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [{"text": "This is wheat with mild leaf rust."}],
            },
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 260, "candidatesTokenCount": 9},
}


def _make_adapter() -> GeminiAdapter:
    return GeminiAdapter("gemini-1.5-flash")


def test_invoke_text(mock_post: MagicMock) -> None:
    mock_post.return_value = MockResponse(json_data=_TEXT_RESPONSE)
    answer = _make_adapter().invoke(PNG_BYTES, "image/png", "What crop?", "test-key")
    assert answer == "This is wheat with mild leaf rust."


def test_payload_format(mock_post: MagicMock) -> None:
    mock_post.return_value = MockResponse(json_data=_TEXT_RESPONSE)
    _make_adapter().invoke(PNG_BYTES, "image/jpeg", "What crop?", "test-key")

    payload = mock_post.call_args.kwargs["json"]
    assert payload == {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": "What crop?"},
                    {
                        "inlineData": {
                            "mimeType": "image/jpeg",
                            "data": base64.b64encode(PNG_BYTES).decode(),
                        }
                    },
                ],
            }
        ]
    }


def test_key_sent_as_query_parameter(mock_post: MagicMock) -> None:
    mock_post.return_value = MockResponse(json_data=_TEXT_RESPONSE)
    _make_adapter().invoke(PNG_BYTES, "image/png", "q", "secret-key")

    call = mock_post.call_args
    assert call.kwargs["params"] == {"key": "secret-key"}
    assert "secret-key" not in call.args[0]
    assert all("secret-key" not in v for v in call.kwargs["headers"].values())


def test_url_includes_model() -> None:
    adapter = GeminiAdapter("gemini-2.0-flash")
    assert adapter._url == (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash:generateContent"
    )


def test_default_model() -> None:
    adapter = GeminiAdapter()
    assert adapter.model == "gemini-1.5-flash"
    assert adapter.key_section_path == "Gemini:ApiKey"


def test_invoke_rate_limited(mock_post: MagicMock) -> None:
    mock_post.return_value = MockResponse(
        json_data={"error": {"code": 429, "status": "RESOURCE_EXHAUSTED"}}, status_code=429
    )
    with pytest.raises(RateLimitError):
        _make_adapter().invoke(PNG_BYTES, "image/png", "q", "k")


def test_invoke_server_error(mock_post: MagicMock) -> None:
    mock_post.return_value = MockResponse(text="oops", status_code=500)
    with pytest.raises(APIError) as exc_info:
        _make_adapter().invoke(PNG_BYTES, "image/png", "q", "k")
    assert exc_info.value.status_code == 500


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"candidates": []},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]},
        {"candidates": [{"content": {"parts": [{"text": None}]}}]},
        {"candidates": "unexpected"},
        [],
    ],
)
def test_extract_answer_missing_path_is_empty(raw: object) -> None:
    assert _extract_answer(raw) == ""


def test_build_payload_keeps_question_verbatim() -> None:
    payload = _build_payload(b"x", "image/webp", "  Any problems?  ")
    assert payload["contents"][0]["parts"][0] == {"text": "  Any problems?  "}


async def test_ainvoke_text(mock_async_client: AsyncMock) -> None:
    mock_async_client.post.return_value = httpx_response(json_data=_TEXT_RESPONSE)
    answer = await _make_adapter().ainvoke(PNG_BYTES, "image/png", "What crop?", "test-key")

    assert answer == "This is wheat with mild leaf rust."
    call = mock_async_client.post.call_args
    assert call.args[0].endswith("/gemini-1.5-flash:generateContent")
    assert call.kwargs["params"] == {"key": "test-key"}


async def test_ainvoke_empty_candidates(mock_async_client: AsyncMock) -> None:
    mock_async_client.post.return_value = httpx_response(json_data={"candidates": []})
    assert await _make_adapter().ainvoke(PNG_BYTES, "image/png", "q", "k") == ""


async def test_ainvoke_rate_limited(mock_async_client: AsyncMock) -> None:
    mock_async_client.post.return_value = httpx_response(status_code=429, json_data={})
    with pytest.raises(RateLimitError):
        await _make_adapter().ainvoke(PNG_BYTES, "image/png", "q", "k")
