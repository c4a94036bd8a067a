"""Common literal values used across theme_preview.

These constants keep brand defaults, header types, and asset prefixes in one
place so the resolver, synthesizer, finisher, and tests cannot drift apart.
Intended for internal use within the theme_preview package.

Examples
--------
>>> from theme_preview import _constants
>>> _constants.TEMPLATE_FILES["home"]
'index.json'
>>> _constants.DEFAULT_PRIMARY_COLOR
'#6f6254'
"""

DEFAULT_PRIMARY_COLOR = "#6f6254"
DEFAULT_TERTIARY_COLOR = "#e6e1dc"
DEFAULT_FONT_FAMILY = "Inter"
DEFAULT_STORE_NAME = "YOUR BRAND"
FALLBACK_STORE_NAME = "Store"
DEFAULT_PRODUCT_TITLE = "Product"
DEFAULT_PRICE = 29.99
PLACEHOLDER_IMAGE = "https://placehold.co/600x600/png?text=Product"

# Blend factors toward white for the light and dark inner highlight.
LIGHT_HIGHLIGHT_FACTOR = 0.85
DARK_HIGHLIGHT_FACTOR = 0.30
HOVER_DARKEN_OFFSET = 30

HEADER_TYPES = ("announcement-bar", "header")

TEMPLATE_FILES = {"product": "product.json", "home": "index.json"}
SETTINGS_DATA_PATH = ("config", "settings_data.json")

INTERNAL_ASSET_PREFIX = "/shopify/"
DEFAULT_PROXY_PREFIX = "/api/shopify/"
"""Asset prefix used by the rendering backend and its proxied equivalent."""
