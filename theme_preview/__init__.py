"""Compose, render and finish theme previews for generated stores.

The package turns an AI content store plus a theme template into a finished
preview page: sections are resolved against the editor's hide and order
lists, content is composed into them, the Liquid backend renders the page,
and the result is post-processed for the editor frame. When the backend
fails, a local fallback page is returned instead.

Exports
-------
- ``PreviewComposer``: end-to-end pipeline entry point.
- ``app``: Cyclopts application behind the ``preview`` console script.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from theme_preview import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .composer import PreviewComposer, PreviewDocument

__all__ = ["PreviewComposer", "PreviewDocument", "app", "main"]
