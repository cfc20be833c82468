"""Exceptions for upstream provider failures."""

from __future__ import annotations

import contextlib
from typing import Any


class APIError(Exception):
    """Raised when an upstream provider answers with an HTTP error status."""

    def __init__(self, status_code: int, body: dict[str, Any] | str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class RateLimitError(APIError):
    """HTTP 429 from the provider, with ``retry_after`` seconds when the server sent one."""

    def __init__(
        self,
        status_code: int,
        body: dict[str, Any] | str,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(status_code, body)
        self.retry_after = retry_after


def parse_retry_after(raw: str | None) -> float | None:
    """Seconds from a ``Retry-After`` header value; ``None`` when absent or not numeric."""
    retry_after: float | None = None
    if raw is not None:
        with contextlib.suppress(ValueError, TypeError):
            retry_after = float(raw)
    return retry_after


class APIConnectionError(Exception):
    """Raised when the upstream provider cannot be reached (DNS, refused, timeout)."""
