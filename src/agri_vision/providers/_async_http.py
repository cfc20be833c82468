"""Async HTTP helpers using ``httpx``."""

from __future__ import annotations

from typing import Any

import httpx

from agri_vision.providers._exceptions import (
    APIConnectionError,
    APIError,
    RateLimitError,
    parse_retry_after,
)


def _raise_for_status_httpx(r: httpx.Response) -> None:
    if r.is_success:
        return
    try:
        body: dict[str, Any] | str = r.json()
    except Exception:
        body = r.text
    if r.status_code == 429:
        retry_after = parse_retry_after(r.headers.get("Retry-After"))
        raise RateLimitError(r.status_code, body, retry_after)
    raise APIError(r.status_code, body)


async def async_post_json(
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    *,
    params: dict[str, str] | None = None,
    timeout: float = 60,
) -> Any:
    """POST JSON asynchronously and return the parsed response.

    Cancelling the awaiting task aborts the in-flight request.
    """
    try:
        async with httpx.AsyncClient() as client:
            r = await client.post(
                url, headers=headers, params=params, json=payload, timeout=timeout
            )
    except httpx.TransportError as exc:
        raise APIConnectionError(str(exc) or type(exc).__name__) from exc
    _raise_for_status_httpx(r)
    return r.json()
