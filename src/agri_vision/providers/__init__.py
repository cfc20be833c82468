"""Provider adapters and the registry that maps provider names to them."""

from __future__ import annotations

from agri_vision.providers._base import BaseAdapter
from agri_vision.providers._exceptions import (
    APIConnectionError,
    APIError,
    RateLimitError,
    parse_retry_after,
)
from agri_vision.providers._gemini import GeminiAdapter
from agri_vision.providers._openai_chat import OpenAIChatAdapter
from agri_vision.providers._openai_sdk import OpenAISDKAdapter

ADAPTERS: dict[str, type[BaseAdapter]] = {
    GeminiAdapter.name: GeminiAdapter,
    OpenAIChatAdapter.name: OpenAIChatAdapter,
    OpenAISDKAdapter.name: OpenAISDKAdapter,
}


def create_adapter(name: str, model: str | None = None, *, timeout: float = 60) -> BaseAdapter:
    """Create a provider adapter by name."""
    try:
        adapter_cls = ADAPTERS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown provider {name!r}. Supported: {sorted(ADAPTERS)}"
        ) from None
    return adapter_cls(model, timeout=timeout)


__all__ = [
    "ADAPTERS",
    "APIConnectionError",
    "APIError",
    "BaseAdapter",
    "GeminiAdapter",
    "OpenAIChatAdapter",
    "OpenAISDKAdapter",
    "RateLimitError",
    "create_adapter",
    "parse_retry_after",
]
