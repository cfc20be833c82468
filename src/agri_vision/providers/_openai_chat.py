"""Adapter for the OpenAI Chat Completions API over raw HTTP."""

from __future__ import annotations

from typing import Any

from agri_vision.providers._async_http import async_post_json
from agri_vision.providers._base import BaseAdapter, encode_image
from agri_vision.providers._http import post_json

_URL = "https://api.openai.com/v1/chat/completions"


def build_messages(image_bytes: bytes, mime_type: str, question: str) -> list[dict[str, Any]]:
    """One user turn with a text part and an ``image_url`` data-URI part."""
    data_uri = f"data:{mime_type};base64,{encode_image(image_bytes)}"
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": question},
                {"type": "image_url", "image_url": {"url": data_uri}},
            ],
        }
    ]


def _extract_answer(raw: Any) -> str:
    # choices[0].message.content; missing steps or a null content give ""
    try:
        text = raw["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text if isinstance(text, str) else ""


class OpenAIChatAdapter(BaseAdapter):
    """OpenAI chat-completions with Bearer auth, built by hand."""

    name = "openai"
    label = "openai"
    key_env = "OPENAI_API_KEY"
    config_section = "OpenAI"
    default_model = "gpt-4o-mini"

    def _build_payload(self, image_bytes: bytes, mime_type: str, question: str) -> dict[str, Any]:
        return {"model": self._model, "messages": build_messages(image_bytes, mime_type, question)}

    @staticmethod
    def _headers(api_key: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def invoke(self, image_bytes: bytes, mime_type: str, question: str, api_key: str) -> str:
        payload = self._build_payload(image_bytes, mime_type, question)
        raw = post_json(_URL, self._headers(api_key), payload, timeout=self._timeout)
        return _extract_answer(raw)

    async def ainvoke(
        self, image_bytes: bytes, mime_type: str, question: str, api_key: str
    ) -> str:
        payload = self._build_payload(image_bytes, mime_type, question)
        raw = await async_post_json(_URL, self._headers(api_key), payload, timeout=self._timeout)
        return _extract_answer(raw)
