"""Error responses: plain text for bad input, problem details for everything else."""

from __future__ import annotations

import math

from fastapi import Request
from fastapi.responses import JSONResponse, PlainTextResponse

from agri_vision._errors import AnalyzeError, ClientInputError

PROBLEM_MEDIA_TYPE = "application/problem+json"


def problem(
    status_code: int, title: str, detail: str, *, retry_after: float | None = None
) -> JSONResponse:
    headers = None
    if retry_after is not None and retry_after >= 0:
        # Retry-After takes whole seconds.
        headers = {"Retry-After": str(math.ceil(retry_after))}
    return JSONResponse(
        {"title": title, "detail": detail, "status": status_code},
        status_code=status_code,
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def client_input_error_handler(_request: Request, exc: Exception) -> PlainTextResponse:
    assert isinstance(exc, ClientInputError)
    return PlainTextResponse(str(exc), status_code=exc.status_code)


async def analyze_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, AnalyzeError)
    return problem(exc.status_code, exc.title, exc.detail, retry_after=exc.retry_after)
