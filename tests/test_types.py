"""Tests for request and response value types."""

from __future__ import annotations

import pytest

from agri_vision._types import AnalyzeRequest, AnalyzeResponse


@pytest.mark.parametrize("question", [None, "", "   ", "\n\t"])
def test_blank_question_defaults(question: str | None) -> None:
    request = AnalyzeRequest.from_upload(b"img", question=question)
    assert request.question == "Describe this image."


def test_question_kept_verbatim() -> None:
    assert AnalyzeRequest.from_upload(b"img", question=" Any issues? ").question == " Any issues? "


@pytest.mark.parametrize("mime_type", [None, ""])
def test_missing_mime_type_defaults_to_png(mime_type: str | None) -> None:
    assert AnalyzeRequest.from_upload(b"img", mime_type=mime_type).mime_type == "image/png"


def test_declared_mime_type_kept() -> None:
    assert AnalyzeRequest.from_upload(b"img", mime_type="image/jpeg").mime_type == "image/jpeg"


def test_file_name_defaults_to_empty() -> None:
    assert AnalyzeRequest.from_upload(b"img").file_name == ""


def test_empty_image_rejected() -> None:
    with pytest.raises(ValueError, match="image_bytes"):
        AnalyzeRequest(image_bytes=b"")


def test_response_without_note() -> None:
    assert AnalyzeResponse("Wheat.").to_dict() == {"answer": "Wheat."}


def test_response_with_note() -> None:
    assert AnalyzeResponse("Wheat.", note="mock").to_dict() == {"answer": "Wheat.", "note": "mock"}
