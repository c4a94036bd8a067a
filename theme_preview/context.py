"""Build the global Liquid context sent alongside the composed sections.

Theme templates expect Shopify-shaped globals (``shop``, ``product``,
``request``, ``settings``...). None of them exist for a generated store, so
this module fabricates plausible values from the AI content store and the
scraped product record. Every field read has a literal default; a sparse or
empty content store still yields a complete context.
"""

from __future__ import annotations

import dataclasses as dc
import math
import re
import typing as typ

from ._constants import (
    DEFAULT_PRICE,
    DEFAULT_PRODUCT_TITLE,
    DEFAULT_STORE_NAME,
    PLACEHOLDER_IMAGE,
)
from .colors import hex_to_rgb_string
from .theme_css import resolve_font_family, resolve_palette, structural_settings

_WHITESPACE = re.compile(r"\s+")
COLOR_FIELDS = (
    ("primary_color_picker", "primary_rgbcolor_picker"),
    ("tertiary_color_picker", "tertiary_rgbcolor_picker"),
)


@dc.dataclass(frozen=True, slots=True)
class ProductFacts:
    """The few product values every preview path needs."""

    title: str
    description: str
    price: float
    compare_at_price: float
    images: tuple[str, ...]
    category: str = "General"


def _first_text(*values: object) -> str | None:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _as_price(*values: object) -> float | None:
    for value in values:
        if value is None or value == "" or isinstance(value, bool):
            continue
        try:
            price = float(str(value))
        except ValueError:
            continue
        if math.isfinite(price) and price >= 0:
            return price
    return None


def refresh_rgb_fields(content: dict[str, typ.Any]) -> dict[str, typ.Any]:
    """Recompute the ``*_rgbcolor_picker`` fields from their hex pickers in place."""
    for hex_key, rgb_key in COLOR_FIELDS:
        if content.get(hex_key):
            content[rgb_key] = hex_to_rgb_string(content[hex_key])
    return content


def merge_edits(
    stored: typ.Mapping[str, typ.Any] | None,
    edited: typ.Mapping[str, typ.Any] | None,
) -> dict[str, typ.Any]:
    """Shallow-merge editor changes over stored content and refresh RGB fields."""
    merged = {**(stored or {}), **(edited or {})}
    return refresh_rgb_fields(merged)


def product_facts(
    content: typ.Mapping[str, typ.Any],
    product: typ.Mapping[str, typ.Any] | None = None,
) -> ProductFacts:
    """Resolve title, description, prices and images with literal defaults."""
    product = product or {}
    price = _as_price(product.get("price"), content.get("price"))
    if price is None:
        price = DEFAULT_PRICE
    compare = _as_price(product.get("compare_at_price"), content.get("compare_price"))
    raw_images = product.get("images")
    images = tuple(
        image for image in (raw_images if isinstance(raw_images, list) else [])
        if isinstance(image, str) and image
    )
    return ProductFacts(
        title=_first_text(product.get("title"), content.get("product_title"))
        or DEFAULT_PRODUCT_TITLE,
        description=_first_text(content.get("product_description"), product.get("description"))
        or "",
        price=price,
        compare_at_price=compare if compare is not None else price * 1.5,
        images=images,
        category=_first_text(product.get("category")) or "General",
    )


def _handle(title: str) -> str:
    return _WHITESPACE.sub("-", title.strip().lower())


def _font(family: str) -> dict[str, typ.Any]:
    return {
        "family": family,
        "fallback_families": "sans-serif",
        "style": "normal",
        "weight": 400,
        "system": False,
    }


def build_global_context(
    content: typ.Mapping[str, typ.Any],
    facts: ProductFacts,
    theme_settings: typ.Mapping[str, typ.Any] | None = None,
    *,
    page_type: str = "product",
) -> dict[str, typ.Any]:
    """Return the global context mapping for the rendering backend.

    Parameters
    ----------
    content : Mapping[str, Any]
        AI content store.
    facts : ProductFacts
        Resolved product values, see :func:`product_facts`.
    theme_settings : Mapping[str, Any], optional
        Theme ``settings_data.json`` ``current`` block.
    page_type : str, optional
        Page type reported through ``request.page_type``.
    """
    palette = resolve_palette(content)
    font_family = resolve_font_family(content)
    store_name = _first_text(content.get("store_name")) or DEFAULT_STORE_NAME
    featured = facts.images[0] if facts.images else PLACEHOLDER_IMAGE
    cents = round(facts.price * 100)
    compare_cents = round(facts.compare_at_price * 100)
    handle = _handle(facts.title)

    images = [
        {
            "src": src,
            "alt": f"{facts.title} - Image {index + 1}",
            "width": 800,
            "height": 800,
            "aspect_ratio": 1.0,
        }
        for index, src in enumerate(facts.images)
    ]
    variant = {
        "id": 1,
        "title": "Default",
        "price": cents,
        "compare_at_price": compare_cents,
        "available": True,
        "option1": "Default",
        "option2": None,
        "option3": None,
        "featured_image": {"src": featured},
        "inventory_quantity": 100,
    }
    settings = {
        **(theme_settings or {}),
        **structural_settings(theme_settings),
        "title_custom_fonts": font_family,
        "content_custom_fonts": font_family,
        "type_header_font": _font(font_family),
        "type_body_font": _font(font_family),
        "colors_accent_1": palette.primary_hex,
        "colors_accent_2": palette.tertiary_hex,
    }

    return {
        "shop": {
            "name": store_name,
            "url": "https://example.myshopify.com",
            "domain": "example.myshopify.com",
            "currency": "EUR",
            "money_format": "{{amount}} €",
            "money_with_currency_format": "{{amount}} EUR",
        },
        "product": {
            "id": 1,
            "title": facts.title,
            "description": facts.description,
            "handle": handle,
            "price": cents,
            "price_min": cents,
            "price_max": cents,
            "compare_at_price": compare_cents,
            "available": True,
            "type": facts.category,
            "vendor": store_name,
            "featured_image": {"src": featured, "alt": facts.title, "width": 800, "height": 800},
            "images": images,
            "media": [
                {
                    "id": index + 1,
                    "media_type": "image",
                    "src": image["src"],
                    "alt": image["alt"],
                    "preview_image": {"src": image["src"], "width": 800, "height": 800},
                }
                for index, image in enumerate(images)
            ],
            "variants": [variant],
            "options": [{"name": "Title", "position": 1, "values": ["Default"]}],
            "selected_or_first_available_variant": variant,
            "first_available_variant": variant,
            "has_only_default_variant": True,
            "tags": [],
            "metafields": {},
        },
        "request": {
            "page_type": page_type,
            "host": "example.myshopify.com",
            "path": f"/products/{handle}",
            "locale": {"iso_code": "en", "root_url": "/"},
        },
        "aicontent": {
            **content,
            "primary_color_picker": palette.primary_hex,
            "tertiary_color_picker": palette.tertiary_hex,
            "primary_rgbcolor_picker": hex_to_rgb_string(palette.primary_hex),
            "tertiary_rgbcolor_picker": hex_to_rgb_string(palette.tertiary_hex),
            "font_family_input": font_family,
        },
        "settings": settings,
        "template": page_type,
        "template_name": page_type,
        "template_suffix": "",
        "menu_header": {
            "handle": "menu-header",
            "links": [
                {"title": "Home", "url": "/", "active": False},
                {"title": "Shop", "url": "/collections/all", "active": False},
                {"title": "About", "url": "/pages/about", "active": False},
                {"title": "Contact", "url": "/pages/contact", "active": False},
            ],
        },
        "cart": {"item_count": 0, "items": [], "total_price": 0},
    }


__all__ = [
    "ProductFacts",
    "build_global_context",
    "merge_edits",
    "product_facts",
    "refresh_rgb_fields",
]
