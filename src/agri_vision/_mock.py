"""Canned answers used in mock mode and as the quota fallback."""

from __future__ import annotations

CROP_AND_ISSUES_ANSWER = (
    "Crop: Wheat. Observed issues: mild leaf rust spots and slight nitrogen deficiency "
    "(yellowing lower leaves). Suggested actions: apply a labeled fungicide if disease "
    "pressure increases, and consider a split nitrogen top-dress aligned with local "
    "recommendations."
)
CROP_ANSWER = (
    "Likely crop: Wheat, based on general morphology. For precise ID, provide a closer "
    "view of leaves and seed heads."
)
ISSUES_ANSWER = (
    "Potential issues: minor foliar disease and uneven nutrition. Recommend scouting "
    "multiple spots, checking soil moisture, and conducting a quick soil test to "
    "fine-tune fertilization."
)
GENERIC_ANSWER = (
    "Mock analysis for '{file_name}': healthy stand with uniform tillering; no major "
    "stress detected. Ask a more specific question for targeted advice."
)


def build_mock_answer(question: str | None, file_name: str | None) -> str:
    """Return a deterministic answer chosen by keywords in *question*.

    Rules are checked in order and the first match wins.
    """
    normalized = (question or "").strip().lower()
    if "what crop" in normalized and "issues" in normalized:
        return CROP_AND_ISSUES_ANSWER
    if "what crop" in normalized:
        return CROP_ANSWER
    if "issues" in normalized or "problems" in normalized:
        return ISSUES_ANSWER
    return GENERIC_ANSWER.format(file_name=file_name or "")
