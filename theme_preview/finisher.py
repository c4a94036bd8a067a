"""Post-process backend HTML so it works inside the editor preview frame.

:func:`finish` is a pure string transformation applied to every accepted
backend response:

1. quoted ``/shopify/`` asset URLs are pointed at the asset proxy;
2. the Swiper ``<script>`` loses its ``defer`` attribute;
3. the theme variable sheet is injected before ``</head>``;
4. an optional ``<base href>`` becomes the first child of ``<head>``;
5. the Swiper readiness shim and the live highlight client become the first
   children of ``<body>``.

A document without ``</head>`` or ``<body>`` simply skips the steps that need
them.
"""

from __future__ import annotations

import re
import typing as typ
from html import escape

from ._constants import DEFAULT_PROXY_PREFIX, INTERNAL_ASSET_PREFIX
from .highlight import body_scripts
from .theme_css import synthesize

_ASSET_PREFIX = re.compile(r"""(['"])""" + re.escape(INTERNAL_ASSET_PREFIX))
_SWIPER_DEFER = re.compile(
    r'(<script[^>]*src="[^"]*swiper[^"]*\.js"[^>]*?)\s*\bdefer\b(?:=(?:""|\'\'|"defer"))?([^>]*>)',
    re.IGNORECASE,
)
_HEAD_OPEN = re.compile(r"<head(\s[^>]*)?>", re.IGNORECASE)
_BODY_OPEN = re.compile(r"<body(\s[^>]*)?>", re.IGNORECASE)
_HEAD_CLOSE = re.compile(r"</head\s*>", re.IGNORECASE)
STYLE_MARKER = "data-shopify-color-override"


def rewrite_asset_urls(html: str, proxy_prefix: str = DEFAULT_PROXY_PREFIX) -> str:
    """Point quoted ``/shopify/`` URLs at ``proxy_prefix``.

    Examples
    --------
    >>> rewrite_asset_urls('<img src="/shopify/a.png">')
    '<img src="/api/shopify/a.png">'
    """
    return _ASSET_PREFIX.sub(lambda match: match.group(1) + proxy_prefix, html)


def undefer_swiper(html: str) -> str:
    """Remove ``defer`` from the Swiper script tag only."""
    return _SWIPER_DEFER.sub(r"\1\2", html)


def style_block(css: str) -> str:
    """Wrap ``css`` in the override ``<style>`` element."""
    return f'\n<style {STYLE_MARKER}="">\n{css}\n</style>\n'


def inject_style(html: str, css: str) -> str:
    """Insert the override sheet right before the first ``</head>``."""
    return _HEAD_CLOSE.sub(lambda match: style_block(css) + match.group(0), html, count=1)


def insert_base_tag(html: str, base_url: str | None) -> str:
    """Insert ``<base href>`` as the first child of ``<head>``."""
    if not base_url:
        return html
    tag = f'<base href="{escape(base_url, quote=True)}">'
    return _HEAD_OPEN.sub(lambda match: f"{match.group(0)}\n{tag}", html, count=1)


def insert_body_scripts(html: str, scripts: str) -> str:
    """Insert ``scripts`` as the first children of ``<body>``."""
    return _BODY_OPEN.sub(lambda match: match.group(0) + scripts, html, count=1)


def finish(
    html: str,
    content: typ.Mapping[str, typ.Any],
    base_url: str | None = None,
    *,
    theme_settings: typ.Mapping[str, typ.Any] | None = None,
    proxy_prefix: str = DEFAULT_PROXY_PREFIX,
) -> str:
    """Return backend ``html`` ready for the preview frame.

    Parameters
    ----------
    html : str
        Document returned by the rendering backend.
    content : Mapping[str, Any]
        AI content store used to synthesize the theme variables.
    base_url : str, optional
        Base URL for relative links when the preview is loaded from a blob.
    theme_settings : Mapping[str, Any], optional
        Theme settings passed through to :func:`theme_preview.theme_css.synthesize`.
    proxy_prefix : str, optional
        Replacement for the internal ``/shopify/`` asset prefix.
    """
    result = rewrite_asset_urls(html, proxy_prefix)
    result = undefer_swiper(result)
    result = inject_style(result, synthesize(content, theme_settings))
    result = insert_base_tag(result, base_url)
    return insert_body_scripts(result, body_scripts())


__all__ = [
    "STYLE_MARKER",
    "finish",
    "inject_style",
    "insert_base_tag",
    "insert_body_scripts",
    "rewrite_asset_urls",
    "style_block",
    "undefer_swiper",
]
