"""Synthesize the CSS custom-property sheet injected into previews.

The AI picks a primary color, a tertiary color, and a font. Everything else
in the sheet (five color schemes, typography scale, spacing, shadows, radii)
is either derived from those picks or taken from the theme's own settings,
with a fixed fallback for anything the theme leaves unset.

:func:`synthesize` is pure: the same content and settings always produce the
same bytes, which keeps previews cacheable by the caller and diffable in tests.

Examples
--------
>>> css = synthesize({"primary_color_picker": "#000000"})
>>> "--color-primary: 0,0,0;" in css
True
>>> synthesize({}) == synthesize({})
True
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ._constants import (
    DARK_HIGHLIGHT_FACTOR,
    DEFAULT_FONT_FAMILY,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_TERTIARY_COLOR,
    LIGHT_HIGHLIGHT_FACTOR,
)
from ._jinja import build_environment
from .colors import hex_to_rgb_string, lighten_color, parse_hex

_FONT_UNSAFE = re.compile(r"[\"';{}<>\\]")
_KEYWORD = re.compile(r"[a-z-]+")
_RGB_TRIPLE = re.compile(r"\d{1,3},\d{1,3},\d{1,3}")

STRUCTURAL_DEFAULTS: typ.Mapping[str, int | float | str] = {
    "body_scale": 100,
    "heading_scale": 130,
    "page_width": 1200,
    "spacing_sections": 0,
    "spacing_grid_horizontal": 8,
    "spacing_grid_vertical": 8,
    "media_radius": 0,
    "media_border_thickness": 1,
    "media_border_opacity": 5,
    "media_shadow_vertical_offset": 4,
    "media_shadow_blur": 5,
    "card_corner_radius": 0,
    "card_text_alignment": "left",
    "badge_corner_radius": 40,
    "popup_corner_radius": 0,
    "text_boxes_radius": 0,
    "buttons_radius": 34,
    "buttons_border_thickness": 1,
    "buttons_border_opacity": 100,
    "buttons_shadow_vertical_offset": 4,
    "buttons_shadow_blur": 5,
    "inputs_radius": 0,
    "inputs_border_thickness": 1,
    "inputs_border_opacity": 55,
    "variant_pills_radius": 40,
    "variant_pills_border_thickness": 1,
    "variant_pills_border_opacity": 55,
}
"""Theme setting names and the values used when the theme omits them."""


@dc.dataclass(frozen=True, slots=True)
class ThemePalette:
    """Colors and font chosen for a preview, in the forms the CSS needs."""

    primary_hex: str
    tertiary_hex: str
    primary_rgb: str
    tertiary_rgb: str
    inner_highlight_rgb: str
    dark_inner_highlight_rgb: str
    font_family: str


def _text(content: typ.Mapping[str, typ.Any], *keys: str) -> str | None:
    for key in keys:
        value = content.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _color(content: typ.Mapping[str, typ.Any], key: str, default: str) -> str:
    value = _text(content, key)
    return value if parse_hex(value) else default


def _rgb(content: typ.Mapping[str, typ.Any], key: str, hex_value: str) -> str:
    value = _text(content, key)
    if value and _RGB_TRIPLE.fullmatch(value):
        if all(int(part) <= 255 for part in value.split(",")):
            return value
    return hex_to_rgb_string(hex_value)


def resolve_font_family(content: typ.Mapping[str, typ.Any]) -> str:
    """Return the font family, preferring the explicit override field."""
    font = _text(content, "font_family_input", "font_family") or DEFAULT_FONT_FAMILY
    return _FONT_UNSAFE.sub("", font) or DEFAULT_FONT_FAMILY


def resolve_palette(content: typ.Mapping[str, typ.Any]) -> ThemePalette:
    """Read the AI color and font picks from ``content`` with defaults."""
    primary_hex = _color(content, "primary_color_picker", DEFAULT_PRIMARY_COLOR)
    tertiary_hex = _color(content, "tertiary_color_picker", DEFAULT_TERTIARY_COLOR)
    return ThemePalette(
        primary_hex=primary_hex,
        tertiary_hex=tertiary_hex,
        primary_rgb=_rgb(content, "primary_rgbcolor_picker", primary_hex),
        tertiary_rgb=_rgb(content, "tertiary_rgbcolor_picker", tertiary_hex),
        inner_highlight_rgb=lighten_color(primary_hex, LIGHT_HIGHLIGHT_FACTOR),
        dark_inner_highlight_rgb=lighten_color(primary_hex, DARK_HIGHLIGHT_FACTOR),
        font_family=resolve_font_family(content),
    )


def structural_settings(
    theme_settings: typ.Mapping[str, typ.Any] | None,
) -> dict[str, int | float | str]:
    """Merge theme settings over :data:`STRUCTURAL_DEFAULTS`.

    Only values with the same kind as the default are taken; anything else
    falls back so a stray string cannot break a ``px`` expression.
    """
    merged: dict[str, int | float | str] = dict(STRUCTURAL_DEFAULTS)
    for key, default in STRUCTURAL_DEFAULTS.items():
        value = (theme_settings or {}).get(key)
        if isinstance(default, str):
            if isinstance(value, str) and _KEYWORD.fullmatch(value.strip()):
                merged[key] = value.strip()
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            merged[key] = value
    return merged


def synthesize(
    content: typ.Mapping[str, typ.Any],
    theme_settings: typ.Mapping[str, typ.Any] | None = None,
) -> str:
    """Return the CSS custom-property sheet for ``content``.

    Parameters
    ----------
    content : Mapping[str, Any]
        AI content store; only the color and font fields are read.
    theme_settings : Mapping[str, Any], optional
        Theme ``settings_data.json`` values used for structural variables.

    Returns
    -------
    str
        Deterministic CSS text without a surrounding ``<style>`` element.
    """
    template = build_environment(autoescape=False).get_template("theme_variables.css.jinja")
    return template.render(
        palette=resolve_palette(content),
        settings=structural_settings(theme_settings),
    )


__all__ = [
    "STRUCTURAL_DEFAULTS",
    "ThemePalette",
    "resolve_font_family",
    "resolve_palette",
    "structural_settings",
    "synthesize",
]
