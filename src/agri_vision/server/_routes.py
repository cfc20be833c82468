"""HTTP routes: ``POST /api/analyze`` and ``GET /healthz``."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from agri_vision._config import key_visibility
from agri_vision._errors import ClientInputError
from agri_vision._pipeline import analyze
from agri_vision._types import AnalyzeRequest
from agri_vision.providers import BaseAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

MULTIPART_REQUIRED = "Multipart form-data with 'image' and 'question' is required."
IMAGE_REQUIRED = "Image file 'image' is required."

# Status nginx uses for "client closed request"; nobody is left to read it.
CLIENT_CLOSED_REQUEST = 499
DISCONNECT_POLL_INTERVAL = 0.5

router = APIRouter()


async def read_analyze_request(request: Request) -> AnalyzeRequest:
    """Validate the multipart body and build an :class:`AnalyzeRequest`."""
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise ClientInputError(MULTIPART_REQUIRED)
    try:
        form = await request.form()
    except HTTPException as exc:
        raise ClientInputError(MULTIPART_REQUIRED) from exc

    image = form.get("image")
    if not isinstance(image, UploadFile):
        raise ClientInputError(IMAGE_REQUIRED)
    image_bytes = await image.read()
    if not image_bytes:
        raise ClientInputError(IMAGE_REQUIRED)

    question = form.get("question")
    return AnalyzeRequest.from_upload(
        image_bytes,
        mime_type=image.content_type,
        question=question if isinstance(question, str) else None,
        file_name=image.filename,
    )


async def run_until_disconnected(request: Request, work: Awaitable[T]) -> tuple[bool, T | None]:
    """Await *work*, cancelling it if the client goes away first.

    Returns ``(True, result)`` when the work finished, ``(False, None)`` when
    the client disconnected and the work was cancelled. If the disconnect check
    itself fails the work runs to completion unwatched. Cancelling the caller
    cancels the work.
    """
    task = asyncio.ensure_future(work)

    async def _watch() -> None:
        while not await request.is_disconnected():
            await asyncio.sleep(DISCONNECT_POLL_INTERVAL)

    watcher = asyncio.ensure_future(_watch())
    try:
        done, _ = await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
        if task in done:
            return True, task.result()
        error = watcher.exception()
        if error is None:
            return False, None
        logger.warning("Could not check for client disconnect: %r", error)
        return True, await task
    finally:
        # Cancelling a finished task is a no-op.
        watcher.cancel()
        task.cancel()


@router.post("/api/analyze")
async def analyze_image(request: Request) -> Response:
    analyze_request = await read_analyze_request(request)
    adapter: BaseAdapter = request.app.state.adapter
    finished, result = await run_until_disconnected(
        request, analyze(analyze_request, adapter, store=request.app.state.config_store)
    )
    if not finished or result is None:
        logger.info("Client disconnected; cancelled the %s call", adapter.name)
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    return JSONResponse(result.to_dict())


@router.get("/healthz")
async def healthz(request: Request) -> dict[str, bool]:
    """Report where an API key is visible, never the key itself."""
    adapter: BaseAdapter = request.app.state.adapter
    visibility = key_visibility(
        adapter.key_env, adapter.key_section_path, store=request.app.state.config_store
    )
    return visibility.to_health(adapter.label)
