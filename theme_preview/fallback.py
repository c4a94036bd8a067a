"""Build the self-contained page shown when the rendering backend fails.

The fallback page has no dependency on the theme or the backend: one inline
stylesheet, a gallery, the price block and a call to action, coloured with
the same AI picks as the real preview. It is deterministic and every input
is optional.
"""

from __future__ import annotations

import collections.abc as cabc
import math
import typing as typ

from ._constants import (
    DEFAULT_PRICE,
    DEFAULT_PRODUCT_TITLE,
    FALLBACK_STORE_NAME,
    HOVER_DARKEN_OFFSET,
    PLACEHOLDER_IMAGE,
)
from ._jinja import build_environment
from .colors import darken_hex
from .theme_css import resolve_palette

DEFAULT_ANNOUNCEMENT = "Free Shipping on All Orders!"
MAX_THUMBNAILS = 5


def _text_or(value: object, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _price_or_default(value: object) -> float:
    if isinstance(value, bool):
        return DEFAULT_PRICE
    try:
        price = float(str(value))
    except ValueError:
        return DEFAULT_PRICE
    return price if math.isfinite(price) and price >= 0 else DEFAULT_PRICE


def build_fallback(
    title: str | None = None,
    description: str | None = None,
    price: float | str | None = None,
    images: cabc.Sequence[str] | None = None,
    store_name: str | None = None,
    content: typ.Mapping[str, typ.Any] | None = None,
) -> str:
    """Return the fallback HTML page.

    Parameters
    ----------
    title : str, optional
        Product title, ``"Product"`` when missing.
    description : str, optional
        Product description, empty when missing.
    price : float or str, optional
        Price in store currency, ``29.99`` when missing or unparseable.
    images : Sequence[str], optional
        Gallery images; a placeholder is used when empty.
    store_name : str, optional
        Store name for the page title, ``"Store"`` when missing.
    content : Mapping[str, Any], optional
        AI content store supplying colors, font and announcement text.

    Examples
    --------
    >>> page = build_fallback()
    >>> "<h1>Product</h1>" in page
    True
    >>> "29.99 €" in page
    True
    """
    content = content or {}
    palette = resolve_palette(content)
    gallery = [image for image in images or () if isinstance(image, str) and image]
    amount = _price_or_default(price)
    template = build_environment(autoescape=True).get_template("fallback_page.html.jinja")
    return template.render(
        title=_text_or(title, DEFAULT_PRODUCT_TITLE),
        description=_text_or(description, ""),
        price=amount,
        compare_price=amount * 1.5,
        featured_image=gallery[0] if gallery else PLACEHOLDER_IMAGE,
        thumbnails=gallery[:MAX_THUMBNAILS],
        store_name=_text_or(store_name, FALLBACK_STORE_NAME),
        announcement=_text_or(content.get("specialOffer"), DEFAULT_ANNOUNCEMENT),
        primary_color=palette.primary_hex,
        primary_hover=darken_hex(palette.primary_hex, HOVER_DARKEN_OFFSET),
        tertiary_color=palette.tertiary_hex,
        font_family=palette.font_family,
    )


__all__ = ["DEFAULT_ANNOUNCEMENT", "build_fallback"]
