"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from agri_vision.providers import BaseAdapter

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDRfake-image-data"

_CONFIG_ENV = (
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "FAKE_API_KEY",
    "AGRI_MOCK_MODE",
    "AGRI_MOCK_FALLBACK",
    "AGRI_PROVIDER",
    "AGRI_MODEL",
    "AGRI_TIMEOUT",
    "AGRI_STATIC_DIR",
    "AGRI_CORS_ORIGINS",
    "AGRI_SETTINGS_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's real keys and switches out of every test."""
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)


class MockResponse:
    """Mimics ``requests.Response`` for testing post_json."""

    def __init__(
        self,
        json_data: Any = None,
        status_code: int = 200,
        text: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.text = text or ""
        self.ok = 200 <= status_code < 300
        self.headers: dict[str, str] = headers or {}

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("No JSON")
        return self._json_data


@pytest.fixture
def mock_post(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Monkeypatch ``requests.post`` and return the mock."""
    mock = MagicMock()
    monkeypatch.setattr("requests.post", mock)
    return mock


def httpx_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Create an ``httpx.Response`` with a JSON or text body."""
    return httpx.Response(
        status_code=status_code,
        headers=headers or {},
        text=json.dumps(json_data) if json_data is not None else text,
    )


@pytest.fixture
def mock_async_client():
    """Patch ``httpx.AsyncClient`` as used by the async HTTP helper."""
    with patch("agri_vision.providers._async_http.httpx.AsyncClient") as mock_cls:
        mock_instance = AsyncMock()
        mock_cls.return_value.__aenter__ = AsyncMock(return_value=mock_instance)
        mock_cls.return_value.__aexit__ = AsyncMock(return_value=None)
        yield mock_instance


class FakeAdapter(BaseAdapter):
    """Adapter that records its calls and answers (or fails) without any I/O."""

    name = "fake"
    label = "fake"
    key_env = "FAKE_API_KEY"
    config_section = "Fake"
    default_model = "fake-1"

    def __init__(self, answer: str = "", error: Exception | None = None) -> None:
        super().__init__()
        self.answer = answer
        self.error = error
        self.calls: list[tuple[bytes, str, str, str]] = []

    def invoke(self, image_bytes: bytes, mime_type: str, question: str, api_key: str) -> str:
        self.calls.append((image_bytes, mime_type, question, api_key))
        if self.error is not None:
            raise self.error
        return self.answer

    async def ainvoke(
        self, image_bytes: bytes, mime_type: str, question: str, api_key: str
    ) -> str:
        return self.invoke(image_bytes, mime_type, question, api_key)
