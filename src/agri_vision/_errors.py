"""Error taxonomy for the analyze pipeline and upstream failure classification."""

from __future__ import annotations

import enum

from agri_vision.providers._exceptions import APIConnectionError, APIError, RateLimitError

QUOTA_DETAIL = (
    "The AI provider rejected the request because the quota for this API key is "
    "exhausted. Please check your plan and billing details."
)
UNAVAILABLE_DETAIL = (
    "The AI provider is temporarily unavailable or returned an error. Please try again later."
)


class ErrorKind(enum.IntEnum):
    """Classification of an upstream failure, valued by the HTTP status it maps to."""

    QUOTA_EXCEEDED = 429
    UPSTREAM_UNAVAILABLE = 502
    UNEXPECTED = 500


def classify_error(exc: BaseException) -> ErrorKind:
    """Classify *exc* raised while invoking a provider adapter."""
    if isinstance(exc, RateLimitError):
        return ErrorKind.QUOTA_EXCEEDED
    if isinstance(exc, APIError):
        if exc.status_code == 429:
            return ErrorKind.QUOTA_EXCEEDED
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if isinstance(exc, APIConnectionError):
        return ErrorKind.UPSTREAM_UNAVAILABLE
    if getattr(exc, "status_code", None) == 429 or "HTTP 429" in str(exc):
        return ErrorKind.QUOTA_EXCEEDED
    return ErrorKind.UNEXPECTED


class ClientInputError(Exception):
    """Malformed or missing upload; rendered as a plain-text 400."""

    status_code = 400


class AnalyzeError(Exception):
    """A pipeline failure rendered as a problem-details response."""

    def __init__(
        self, status_code: int, title: str, detail: str, *, retry_after: float | None = None
    ) -> None:
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.retry_after = retry_after
        super().__init__(f"{title}: {detail}")

    @classmethod
    def from_upstream(cls, exc: BaseException) -> AnalyzeError:
        kind = classify_error(exc)
        if kind is ErrorKind.QUOTA_EXCEEDED:
            retry_after = exc.retry_after if isinstance(exc, RateLimitError) else None
            return cls(kind.value, "Quota exceeded", QUOTA_DETAIL, retry_after=retry_after)
        if kind is ErrorKind.UPSTREAM_UNAVAILABLE:
            return cls(kind.value, "Upstream provider unavailable", UNAVAILABLE_DETAIL)
        # The raw message is passed through as a best-effort diagnostic and may
        # expose upstream or internal detail to the caller.
        return cls(kind.value, "Unexpected server error", str(exc) or type(exc).__name__)


class ConfigurationError(AnalyzeError):
    """The API key is missing while mock mode is off."""

    def __init__(self, key_env: str) -> None:
        self.key_env = key_env
        super().__init__(500, "Configuration error", f"{key_env} is not configured.")
