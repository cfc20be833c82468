"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse, Response

from agri_vision._config import AppSettings, ConfigStore, key_visibility, load_store
from agri_vision._errors import AnalyzeError, ClientInputError
from agri_vision.providers import BaseAdapter, create_adapter
from agri_vision.server._problems import analyze_error_handler, client_input_error_handler
from agri_vision.server._routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    adapter: BaseAdapter = app.state.adapter
    visibility = key_visibility(
        adapter.key_env, adapter.key_section_path, store=app.state.config_store
    )
    logger.info(
        "Provider %s (model %s); API key configured at startup: %s",
        adapter.name,
        adapter.model,
        visibility.configured,
    )
    yield


def _add_frontend(app: FastAPI, static_dir: Path) -> None:
    """Serve bundled frontend files, falling back to ``index.html`` for client routes."""
    root = static_dir.resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def frontend(full_path: str) -> Response:
        if full_path:
            candidate = (root / full_path).resolve()
            if candidate.is_relative_to(root) and candidate.is_file():
                return FileResponse(candidate)
        index = root / "index.html"
        if index.is_file():
            return FileResponse(index)
        return PlainTextResponse("Not Found", status_code=404)


def create_app(
    settings: AppSettings | None = None,
    *,
    adapter: BaseAdapter | None = None,
    store: ConfigStore | None = None,
) -> FastAPI:
    """Build the app.

    *store* defaults to the settings document named by ``AGRI_SETTINGS_FILE``;
    *settings* and *adapter* default to what the environment and store select.
    """
    if store is None:
        store = load_store()
    if settings is None:
        settings = AppSettings.load(store=store)
    if adapter is None:
        adapter = create_adapter(settings.provider, settings.model, timeout=settings.timeout)

    app = FastAPI(title="AgriVision API", lifespan=_lifespan)
    app.state.settings = settings
    app.state.adapter = adapter
    app.state.config_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ClientInputError, client_input_error_handler)
    app.add_exception_handler(AnalyzeError, analyze_error_handler)
    app.include_router(router)
    _add_frontend(app, Path(settings.static_dir))
    return app
