"""Shared Jinja environment construction for package templates."""

from __future__ import annotations

import functools
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).parent / "templates"


@functools.cache
def build_environment(
    *, autoescape: bool, templates_dir: Path = TEMPLATES_DIR
) -> Environment:
    """Return a cached Jinja environment rooted at ``templates_dir``.

    HTML templates want autoescaping; the CSS and script templates must not
    have it, so callers pick one explicitly.
    """
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=autoescape,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


__all__ = ["TEMPLATES_DIR", "build_environment"]
