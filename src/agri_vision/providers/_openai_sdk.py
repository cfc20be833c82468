"""Adapter for OpenAI Chat Completions through the official ``openai`` SDK."""

from __future__ import annotations

from typing import Any

import openai
from openai import AsyncOpenAI, OpenAI

from agri_vision.providers._base import BaseAdapter
from agri_vision.providers._exceptions import (
    APIConnectionError,
    APIError,
    RateLimitError,
    parse_retry_after,
)
from agri_vision.providers._openai_chat import build_messages


def _translate_error(exc: openai.APIConnectionError | openai.APIStatusError) -> Exception:
    """Map an SDK error onto the shared provider exceptions by its status code."""
    if isinstance(exc, openai.APIConnectionError):
        return APIConnectionError(str(exc))
    body = exc.body if isinstance(exc.body, (dict, str)) else exc.message
    if exc.status_code == 429:
        retry_after = parse_retry_after(exc.response.headers.get("Retry-After"))
        return RateLimitError(exc.status_code, body, retry_after)
    return APIError(exc.status_code, body)


def _extract_answer(completion: Any) -> str:
    choices = getattr(completion, "choices", None)
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    text = getattr(message, "content", None)
    return text if isinstance(text, str) else ""


class OpenAISDKAdapter(BaseAdapter):
    """OpenAI chat-completions via ``openai.OpenAI`` / ``openai.AsyncOpenAI``.

    The SDK's own retries are disabled; failures are translated to
    :class:`RateLimitError`, :class:`APIError` or :class:`APIConnectionError`.
    """

    name = "openai-sdk"
    label = "openai"
    key_env = "OPENAI_API_KEY"
    config_section = "OpenAI"
    default_model = "gpt-4o-mini"

    def invoke(self, image_bytes: bytes, mime_type: str, question: str, api_key: str) -> str:
        messages = build_messages(image_bytes, mime_type, question)
        try:
            with OpenAI(api_key=api_key, timeout=self._timeout, max_retries=0) as client:
                completion = client.chat.completions.create(model=self._model, messages=messages)
        except (openai.APIConnectionError, openai.APIStatusError) as exc:
            raise _translate_error(exc) from exc
        return _extract_answer(completion)

    async def ainvoke(
        self, image_bytes: bytes, mime_type: str, question: str, api_key: str
    ) -> str:
        messages = build_messages(image_bytes, mime_type, question)
        try:
            async with AsyncOpenAI(
                api_key=api_key, timeout=self._timeout, max_retries=0
            ) as client:
                completion = await client.chat.completions.create(
                    model=self._model, messages=messages
                )
        except (openai.APIConnectionError, openai.APIStatusError) as exc:
            raise _translate_error(exc) from exc
        return _extract_answer(completion)
