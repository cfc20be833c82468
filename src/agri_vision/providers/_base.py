"""Abstract base for provider adapters."""

from __future__ import annotations

import base64
from abc import ABC, abstractmethod
from typing import ClassVar


def encode_image(image_bytes: bytes) -> str:
    """Return the standard base64 text of *image_bytes*."""
    return base64.b64encode(image_bytes).decode("ascii")


class BaseAdapter(ABC):
    """Interface that every provider adapter must implement.

    An adapter turns ``(image bytes, mime type, question, api key)`` into the
    provider's wire request and the provider's response back into plain
    answer text. Errors are raised as :class:`APIError`,
    :class:`RateLimitError` or :class:`APIConnectionError`.
    """

    name: ClassVar[str]
    label: ClassVar[str]
    key_env: ClassVar[str]
    config_section: ClassVar[str]
    default_model: ClassVar[str]

    def __init__(self, model: str | None = None, *, timeout: float = 60) -> None:
        self._model = model or self.default_model
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    @property
    def key_section_path(self) -> str:
        """Nested configuration key holding the API key, e.g. ``Gemini:ApiKey``."""
        return f"{self.config_section}:ApiKey"

    @abstractmethod
    def invoke(self, image_bytes: bytes, mime_type: str, question: str, api_key: str) -> str: ...

    @abstractmethod
    async def ainvoke(
        self, image_bytes: bytes, mime_type: str, question: str, api_key: str
    ) -> str: ...
