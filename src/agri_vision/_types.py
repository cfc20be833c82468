"""Request-scoped value types for the analyze pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_QUESTION = "Describe this image."
DEFAULT_MIME_TYPE = "image/png"
MOCK_NOTE = "mock"


@dataclass(frozen=True, slots=True)
class AnalyzeRequest:
    """An uploaded image plus the question asked about it."""

    image_bytes: bytes
    mime_type: str = DEFAULT_MIME_TYPE
    question: str = DEFAULT_QUESTION
    file_name: str = ""

    def __post_init__(self) -> None:
        if not self.image_bytes:
            raise ValueError("image_bytes must not be empty")

    @classmethod
    def from_upload(
        cls,
        image_bytes: bytes,
        *,
        mime_type: str | None = None,
        question: str | None = None,
        file_name: str | None = None,
    ) -> AnalyzeRequest:
        """Build a request from raw form values, applying the defaults."""
        if not question or not question.strip():
            question = DEFAULT_QUESTION
        return cls(
            image_bytes=image_bytes,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            question=question,
            file_name=file_name or "",
        )


@dataclass(frozen=True, slots=True)
class AnalyzeResponse:
    """Answer text, with ``note="mock"`` when a live call degraded to the mock answer."""

    answer: str
    note: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"answer": self.answer}
        if self.note is not None:
            body["note"] = self.note
        return body
