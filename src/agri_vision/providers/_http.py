"""Thin HTTP helpers around ``requests``."""

from __future__ import annotations

from typing import Any

import requests

from agri_vision.providers._exceptions import (
    APIConnectionError,
    APIError,
    RateLimitError,
    parse_retry_after,
)


def _raise_for_status(r: requests.Response) -> None:
    if not r.ok:
        try:
            body: dict[str, Any] | str = r.json()
        except Exception:
            body = r.text
        if r.status_code == 429:
            retry_after = parse_retry_after(r.headers.get("Retry-After"))
            raise RateLimitError(r.status_code, body, retry_after)
        raise APIError(r.status_code, body)


def post_json(
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    *,
    params: dict[str, str] | None = None,
    timeout: float = 60,
) -> Any:
    """POST JSON once and return the parsed response, raising on HTTP errors.

    Upstream failures are never retried here; a 429 surfaces as
    :class:`RateLimitError` so the caller can decide on a fallback.
    """
    try:
        r = requests.post(url, headers=headers, params=params, json=payload, timeout=timeout)
    except (requests.ConnectionError, requests.Timeout) as exc:
        raise APIConnectionError(str(exc)) from exc
    _raise_for_status(r)
    return r.json()
