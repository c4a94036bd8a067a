"""Typed dataclasses describing preview pipeline configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from .._constants import DEFAULT_PROXY_PREFIX


class PreviewConfigError(ValueError):
    """Raised when the preview configuration is invalid."""


@dc.dataclass(slots=True)
class PreviewConfig:
    """Settings shared by the composer, the renderer client and the CLI.

    Attributes
    ----------
    renderer_url : str
        Base URL of the Liquid rendering backend.
    themes_path : Path
        Directory holding one sub-directory per theme key.
    default_theme : str
        Theme key used when a caller does not name one.
    request_timeout : float
        Per-attempt HTTP timeout in seconds.
    max_attempts : int
        Upper bound on render attempts per preview.
    retry_delay : float
        Seconds to wait between retryable attempts.
    min_html_length : int
        Backend HTML must be longer than this to be accepted.
    proxy_prefix : str
        Public prefix that replaces the backend's ``/shopify/`` asset prefix.
    """

    renderer_url: str = "http://127.0.0.1:9292"
    themes_path: Path = dc.field(default_factory=lambda: Path("themes"))
    default_theme: str = "theme_v4"
    request_timeout: float = 30.0
    max_attempts: int = 3
    retry_delay: float = 0.5
    min_html_length: int = 1000
    proxy_prefix: str = DEFAULT_PROXY_PREFIX

    def theme_path(self, theme_key: str | None = None) -> str:
        """Return the forward-slash theme path sent to the backend."""
        key = theme_key or self.default_theme
        return (self.themes_path / key).as_posix()
