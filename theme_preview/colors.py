"""Small color helpers shared by the CSS synthesizer and the fallback page."""

from __future__ import annotations

import re

RGB = tuple[int, int, int]

_HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")
_LIGHTEN_FALLBACK = "247,243,237"


def parse_hex(value: object) -> RGB | None:
    """Return the RGB triple for a ``#rrggbb`` or ``#rgb`` string, else None."""
    if not isinstance(value, str) or not value.strip().startswith("#"):
        return None
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(char * 2 for char in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_string(rgb: RGB) -> str:
    """Format ``rgb`` as the comma separated form the theme CSS expects."""
    return ",".join(str(channel) for channel in rgb)


def hex_to_rgb_string(value: object) -> str:
    """Return ``"r,g,b"`` for a hex color, or ``"0,0,0"`` when unparseable."""
    rgb = parse_hex(value)
    return rgb_string(rgb) if rgb else "0,0,0"


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def blend_toward_white(rgb: RGB, factor: float) -> RGB:
    """Linearly mix ``rgb`` toward white by ``factor`` in ``[0, 1]``."""
    factor = min(max(factor, 0.0), 1.0)
    r, g, b = (_round_half_up(channel + (255 - channel) * factor) for channel in rgb)
    return (r, g, b)


def lighten_color(value: object, factor: float) -> str:
    """Return the lightened ``"r,g,b"`` string for a hex color.

    Non-hex input yields a warm off-white so the sheet stays well formed.
    """
    rgb = parse_hex(value)
    if rgb is None:
        return _LIGHTEN_FALLBACK
    return rgb_string(blend_toward_white(rgb, factor))


def darken_hex(value: object, offset: int) -> str:
    """Subtract ``offset`` from each channel, clamped at zero, as ``#rrggbb``."""
    rgb = parse_hex(value) or (0, 0, 0)
    r, g, b = (max(0, channel - offset) for channel in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


__all__ = [
    "RGB",
    "blend_toward_white",
    "darken_hex",
    "hex_to_rgb_string",
    "lighten_color",
    "parse_hex",
    "rgb_string",
]
