"""Configuration resolution: environment first, then the settings document.

Every setting is looked up in three places, first non-blank value wins:

1. the process environment (``GEMINI_API_KEY``),
2. a flat key in the settings document (``{"GEMINI_API_KEY": "..."}``),
3. a nested key in the settings document (``{"Gemini": {"ApiKey": "..."}}``,
   addressed as ``Gemini:ApiKey``).
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_SETTINGS_FILE = "appsettings.json"

MOCK_MODE_ENV = "AGRI_MOCK_MODE"
MOCK_MODE_SECTION = "Agri:MockMode"
MOCK_FALLBACK_ENV = "AGRI_MOCK_FALLBACK"
MOCK_FALLBACK_SECTION = "Agri:MockFallback"


class ConfigStore:
    """Read-only view over a JSON settings document.

    Keys containing ``:`` walk nested sections.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: Mapping[str, Any] = data or {}

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> ConfigStore:
        """Load *path*; a missing file gives an empty store."""
        p = Path(path)
        if not p.is_file():
            return cls()
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Settings file {p} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {p} must contain a JSON object.")
        return cls(data)

    def get(self, key: str) -> str | None:
        node: Any = self._data
        for part in key.split(":"):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        if node is None or isinstance(node, (Mapping, list)):
            return None
        return str(node)


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def resolve_setting(
    name: str,
    section_key: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    store: ConfigStore | None = None,
) -> str | None:
    """Return the first non-blank value of *name* across the configuration sources."""
    env = os.environ if environ is None else environ
    store = store or ConfigStore()
    candidates = [env.get(name), store.get(name)]
    if section_key:
        candidates.append(store.get(section_key))
    for value in candidates:
        if (found := _non_blank(value)) is not None:
            return found
    return None


def is_true(value: str | None) -> bool:
    return value is not None and value.lower() == "true"


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Per-request view of the credential and mock switches."""

    api_key: str | None
    mock_mode_enabled: bool = False
    mock_fallback_enabled: bool = False

    @property
    def quota_fallback(self) -> bool:
        """Whether a quota failure should degrade to the mock answer."""
        return self.mock_mode_enabled or self.mock_fallback_enabled


def resolve_config(
    key_env: str,
    key_section: str,
    *,
    environ: Mapping[str, str] | None = None,
    store: ConfigStore | None = None,
) -> ProviderConfig:
    api_key = resolve_setting(key_env, key_section, environ=environ, store=store)
    mock_mode = resolve_setting(MOCK_MODE_ENV, MOCK_MODE_SECTION, environ=environ, store=store)
    fallback = resolve_setting(
        MOCK_FALLBACK_ENV, MOCK_FALLBACK_SECTION, environ=environ, store=store
    )
    return ProviderConfig(
        api_key=api_key,
        mock_mode_enabled=is_true(mock_mode),
        mock_fallback_enabled=is_true(fallback),
    )


@dataclass(frozen=True, slots=True)
class KeyVisibility:
    """Which sources carry a non-blank API key. Never holds the key itself."""

    has_env: bool
    has_cfg_root: bool
    has_cfg_section: bool

    @property
    def configured(self) -> bool:
        return self.has_env or self.has_cfg_root or self.has_cfg_section

    def to_health(self, label: str) -> dict[str, bool]:
        """Health payload, e.g. ``{"geminiKeyConfigured": True, "hasEnv": True, ...}``."""
        return {
            f"{label}KeyConfigured": self.configured,
            "hasEnv": self.has_env,
            "hasCfgRoot": self.has_cfg_root,
            "hasCfgSection": self.has_cfg_section,
        }


def key_visibility(
    key_env: str,
    key_section: str,
    *,
    environ: Mapping[str, str] | None = None,
    store: ConfigStore | None = None,
) -> KeyVisibility:
    env = os.environ if environ is None else environ
    store = store or ConfigStore()
    return KeyVisibility(
        has_env=_non_blank(env.get(key_env)) is not None,
        has_cfg_root=_non_blank(store.get(key_env)) is not None,
        has_cfg_section=_non_blank(store.get(key_section)) is not None,
    )


@dataclass(frozen=True, slots=True)
class AppSettings:
    """Startup settings for the HTTP app."""

    provider: str = "gemini"
    model: str | None = None
    timeout: float = 60
    static_dir: str = "wwwroot"
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)

    @classmethod
    def load(
        cls,
        *,
        environ: Mapping[str, str] | None = None,
        store: ConfigStore | None = None,
    ) -> AppSettings:
        def get(name: str, section_key: str) -> str | None:
            return resolve_setting(name, section_key, environ=environ, store=store)

        defaults = cls()
        timeout = get("AGRI_TIMEOUT", "Agri:Timeout")
        origins = get("AGRI_CORS_ORIGINS", "Agri:CorsOrigins")
        try:
            timeout_value = float(timeout) if timeout else defaults.timeout
        except ValueError:
            raise ValueError(f"AGRI_TIMEOUT must be a number, got {timeout!r}") from None
        return cls(
            provider=(get("AGRI_PROVIDER", "Agri:Provider") or defaults.provider).strip().lower(),
            model=get("AGRI_MODEL", "Agri:Model"),
            timeout=timeout_value,
            static_dir=get("AGRI_STATIC_DIR", "Agri:StaticDir") or defaults.static_dir,
            cors_origins=(
                tuple(o.strip() for o in origins.split(",") if o.strip())
                if origins
                else defaults.cors_origins
            ),
        )


def load_store(environ: Mapping[str, str] | None = None) -> ConfigStore:
    """Load the settings document named by ``AGRI_SETTINGS_FILE`` (or the default)."""
    env = os.environ if environ is None else environ
    path = _non_blank(env.get("AGRI_SETTINGS_FILE")) or DEFAULT_SETTINGS_FILE
    return ConfigStore.from_file(path)
