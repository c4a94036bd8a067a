"""Load and validate configuration for the preview pipeline.

Configuration lives in an optional YAML file (``preview.yaml`` by
convention). Every field has a default, and the renderer URL and themes
directory can be overridden with ``LIQUID_SERVICE_URL`` and ``THEMES_PATH``
so deployments need no file at all.

Examples
--------
>>> from pathlib import Path
>>> from theme_preview.config import load_preview_config
>>> config = load_preview_config(Path("preview.yaml"))  # doctest: +SKIP
>>> config.theme_path("theme_v4")  # doctest: +SKIP
'themes/theme_v4'
"""

from .loader import ENV_RENDERER_URL, ENV_THEMES_PATH, load_preview_config
from .models import PreviewConfig, PreviewConfigError

__all__ = [
    "ENV_RENDERER_URL",
    "ENV_THEMES_PATH",
    "PreviewConfig",
    "PreviewConfigError",
    "load_preview_config",
]
