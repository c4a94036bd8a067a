"""Load preview configuration YAML into :class:`PreviewConfig`."""

from __future__ import annotations

import collections.abc as cabc
import os
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import PreviewConfig, PreviewConfigError

ENV_RENDERER_URL = "LIQUID_SERVICE_URL"
ENV_THEMES_PATH = "THEMES_PATH"
_KNOWN_KEYS = frozenset(
    {
        "renderer_url",
        "themes_path",
        "default_theme",
        "request_timeout",
        "max_attempts",
        "retry_delay",
        "min_html_length",
        "proxy_prefix",
    }
)


def _read_yaml(path: Path) -> dict[str, typ.Any]:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in '{path}' must be a mapping."
        raise PreviewConfigError(msg)
    unknown = sorted(set(loaded) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown preview configuration keys: {', '.join(unknown)}"
        raise PreviewConfigError(msg)
    return dict(loaded)


def _number(raw: dict[str, typ.Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        msg = f"'{key}' must be a number, got {value!r}"
        raise PreviewConfigError(msg)
    return float(value)


def _integer(raw: dict[str, typ.Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{key}' must be an integer, got {value!r}"
        raise PreviewConfigError(msg)
    return value


def _string(raw: dict[str, typ.Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str) or not value.strip():
        msg = f"'{key}' must be a non-empty string, got {value!r}"
        raise PreviewConfigError(msg)
    return value.strip()


def load_preview_config(
    path: Path | None = None,
    *,
    environ: cabc.Mapping[str, str] | None = None,
) -> PreviewConfig:
    """Load the preview configuration with environment overrides.

    Parameters
    ----------
    path : Path, optional
        YAML file to read. A missing file is not an error: defaults apply.
    environ : Mapping[str, str], optional
        Environment to read overrides from; defaults to ``os.environ``.

    Returns
    -------
    PreviewConfig
        Validated configuration.

    Raises
    ------
    PreviewConfigError
        If the file is not a mapping, names unknown keys, or holds values of
        the wrong type or range.

    Examples
    --------
    >>> config = load_preview_config(environ={})
    >>> config.max_attempts, config.retry_delay
    (3, 0.5)
    """
    env = os.environ if environ is None else environ
    defaults = PreviewConfig()
    raw: dict[str, typ.Any] = {}
    if path is not None and path.exists():
        raw = _read_yaml(path)

    config = PreviewConfig(
        renderer_url=_string(raw, "renderer_url", defaults.renderer_url),
        themes_path=Path(_string(raw, "themes_path", str(defaults.themes_path))),
        default_theme=_string(raw, "default_theme", defaults.default_theme),
        request_timeout=_number(raw, "request_timeout", defaults.request_timeout),
        max_attempts=_integer(raw, "max_attempts", defaults.max_attempts),
        retry_delay=_number(raw, "retry_delay", defaults.retry_delay),
        min_html_length=_integer(raw, "min_html_length", defaults.min_html_length),
        proxy_prefix=_string(raw, "proxy_prefix", defaults.proxy_prefix),
    )
    if url := env.get(ENV_RENDERER_URL, "").strip():
        config.renderer_url = url
    if themes := env.get(ENV_THEMES_PATH, "").strip():
        config.themes_path = Path(themes)

    if config.max_attempts < 1:
        msg = f"'max_attempts' must be at least 1, got {config.max_attempts}"
        raise PreviewConfigError(msg)
    if config.retry_delay < 0:
        msg = f"'retry_delay' cannot be negative, got {config.retry_delay}"
        raise PreviewConfigError(msg)
    if config.request_timeout <= 0:
        msg = f"'request_timeout' must be positive, got {config.request_timeout}"
        raise PreviewConfigError(msg)
    return config
