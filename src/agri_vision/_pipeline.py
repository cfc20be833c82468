"""The analyze pipeline: resolve config, short-circuit or call the provider, map the result."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from agri_vision._config import ConfigStore, ProviderConfig, resolve_config
from agri_vision._errors import AnalyzeError, ConfigurationError, ErrorKind, classify_error
from agri_vision._mock import build_mock_answer
from agri_vision._types import MOCK_NOTE, AnalyzeRequest, AnalyzeResponse
from agri_vision.providers import BaseAdapter

logger = logging.getLogger(__name__)


def resolve_provider_config(
    adapter: BaseAdapter,
    *,
    environ: Mapping[str, str] | None = None,
    store: ConfigStore | None = None,
) -> ProviderConfig:
    """Resolve the adapter's key and the mock switches, failing fast without a key."""
    config = resolve_config(
        adapter.key_env, adapter.key_section_path, environ=environ, store=store
    )
    if config.api_key is None and not config.mock_mode_enabled:
        raise ConfigurationError(adapter.key_env)
    return config


def _mock_response(request: AnalyzeRequest, note: str | None = None) -> AnalyzeResponse:
    return AnalyzeResponse(build_mock_answer(request.question, request.file_name), note=note)


def map_failure(
    exc: Exception, request: AnalyzeRequest, config: ProviderConfig, *, provider: str
) -> AnalyzeResponse:
    """Turn an adapter failure into a mock answer or raise :class:`AnalyzeError`."""
    kind = classify_error(exc)
    if kind is ErrorKind.QUOTA_EXCEEDED and config.quota_fallback:
        logger.info(
            "%s quota exceeded; answering %r with the mock answer", provider, request.file_name
        )
        return _mock_response(request, note=MOCK_NOTE)
    if kind is ErrorKind.UNEXPECTED:
        logger.exception("Unexpected error while calling %s", provider)
    else:
        logger.warning("%s call failed (%s): %s", provider, kind.name, exc)
    raise AnalyzeError.from_upstream(exc) from exc


async def analyze(
    request: AnalyzeRequest,
    adapter: BaseAdapter,
    *,
    environ: Mapping[str, str] | None = None,
    store: ConfigStore | None = None,
) -> AnalyzeResponse:
    """Answer *request* with *adapter* without blocking the event loop.

    Raises :class:`ConfigurationError` when no key is configured and mock mode
    is off, and :class:`AnalyzeError` when the provider call fails without a
    mock fallback.
    """
    config = resolve_provider_config(adapter, environ=environ, store=store)
    if config.mock_mode_enabled:
        logger.info("Mock mode enabled; skipping %s", adapter.name)
        return _mock_response(request)
    assert config.api_key is not None
    try:
        answer = await adapter.ainvoke(
            request.image_bytes, request.mime_type, request.question, config.api_key
        )
    except Exception as exc:
        return map_failure(exc, request, config, provider=adapter.name)
    return AnalyzeResponse(answer)


def analyze_sync(
    request: AnalyzeRequest,
    adapter: BaseAdapter,
    *,
    environ: Mapping[str, str] | None = None,
    store: ConfigStore | None = None,
) -> AnalyzeResponse:
    """Blocking twin of :func:`analyze`, used by the command line."""
    config = resolve_provider_config(adapter, environ=environ, store=store)
    if config.mock_mode_enabled:
        logger.info("Mock mode enabled; skipping %s", adapter.name)
        return _mock_response(request)
    assert config.api_key is not None
    try:
        answer = adapter.invoke(
            request.image_bytes, request.mime_type, request.question, config.api_key
        )
    except Exception as exc:
        return map_failure(exc, request, config, provider=adapter.name)
    return AnalyzeResponse(answer)
