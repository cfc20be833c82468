"""agri-vision — ask a multimodal AI provider about an uploaded farm image."""

from agri_vision._config import AppSettings, ConfigStore, ProviderConfig, resolve_config
from agri_vision._errors import (
    AnalyzeError,
    ClientInputError,
    ConfigurationError,
    ErrorKind,
    classify_error,
)
from agri_vision._mock import build_mock_answer
from agri_vision._pipeline import analyze, analyze_sync
from agri_vision._types import AnalyzeRequest, AnalyzeResponse
from agri_vision.providers import (
    APIConnectionError,
    APIError,
    BaseAdapter,
    RateLimitError,
    create_adapter,
)

__all__ = [
    "APIConnectionError",
    "APIError",
    "AnalyzeError",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "AppSettings",
    "BaseAdapter",
    "ClientInputError",
    "ConfigStore",
    "ConfigurationError",
    "ErrorKind",
    "ProviderConfig",
    "RateLimitError",
    "analyze",
    "analyze_sync",
    "build_mock_answer",
    "classify_error",
    "create_adapter",
    "resolve_config",
]
