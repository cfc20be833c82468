"""Adapter for the Google Gemini generateContent API."""

from __future__ import annotations

from typing import Any

from agri_vision.providers._async_http import async_post_json
from agri_vision.providers._base import BaseAdapter, encode_image
from agri_vision.providers._http import post_json

_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


def _build_payload(image_bytes: bytes, mime_type: str, question: str) -> dict[str, Any]:
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": question},
                    {"inlineData": {"mimeType": mime_type, "data": encode_image(image_bytes)}},
                ],
            }
        ]
    }


def _extract_answer(raw: Any) -> str:
    """Return ``candidates[0].content.parts[0].text``.

    Any missing or mistyped step along that path yields an empty answer
    instead of an error, so a blocked or empty candidate list still
    produces a 200 response.
    """
    try:
        text = raw["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


class GeminiAdapter(BaseAdapter):
    """Google Gemini inline-data adapter; the key travels as the ``key`` query parameter."""

    name = "gemini"
    label = "gemini"
    key_env = "GEMINI_API_KEY"
    config_section = "Gemini"
    default_model = "gemini-1.5-flash"

    def __init__(self, model: str | None = None, *, timeout: float = 60) -> None:
        super().__init__(model, timeout=timeout)
        self._url = f"{_BASE_URL}/{self._model}:generateContent"
        self._headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def invoke(self, image_bytes: bytes, mime_type: str, question: str, api_key: str) -> str:
        payload = _build_payload(image_bytes, mime_type, question)
        raw = post_json(
            self._url, self._headers, payload, params={"key": api_key}, timeout=self._timeout
        )
        return _extract_answer(raw)

    async def ainvoke(
        self, image_bytes: bytes, mime_type: str, question: str, api_key: str
    ) -> str:
        payload = _build_payload(image_bytes, mime_type, question)
        raw = await async_post_json(
            self._url, self._headers, payload, params={"key": api_key}, timeout=self._timeout
        )
        return _extract_answer(raw)
