"""Scripts injected into finished previews.

Two snippets go in at the top of ``<body>``:

* the Swiper readiness shim, which queues ``window.onSwiperReady`` callbacks
  until the carousel library has loaded;
* the live highlight client, which listens for ``postMessage`` calls from the
  editor frame and scrolls to or outlines the section being edited.

Messages understood by the client::

    {"type": "scrollToSection", "sectionType": "faq", "noHighlight": false}
    {"type": "highlightInput", "sectionType": "faq"}
    {"type": "clearHighlight"}

Both scripts are rendered once per process; their text never depends on the
preview being finished.
"""

from __future__ import annotations

import functools
import types
import typing as typ

from ._jinja import build_environment

SWIPER_POLL_INTERVAL_MS = 50
SWIPER_GIVE_UP_MS = 5000
OVERLAY_OFFSET_PX = 6

SECTION_SELECTORS: typ.Mapping[str, tuple[str, ...]] = types.MappingProxyType(
    {
        "announcement-bar": (".announcement-bar-section", ".announcement-bar"),
        "header": (".section-header", "header.header", "sticky-header"),
        "main-product": ("[id*='main-product']", "[id*='main_product']", ".product"),
        "featured-product": ("[id*='featured-product']", "[id*='featured_product']"),
        "pdp-benefits": ("[id*='pdp-benefits']", "[id*='pdp_benefits']", ".pdp-benefits"),
        "pdp-statistics": ("[id*='pdp-statistics']", "[id*='pdp_statistics']", ".pdp-statistics"),
        "image-with-text": ("[id*='image-with-text']", "[id*='image_with_text']", ".image-with-text"),
        "comparison-table": ("[id*='comparison']", ".comparison-table"),
        "timeline": ("[id*='timeline']", ".timeline"),
        "faq": ("[id*='faq']", ".image-faq", ".faq"),
        "newsletter": ("[id*='newsletter']", ".newsletter"),
        "footer": (".footer", "footer"),
        "scrolling-text": (".scrolling-text", "[class*='scrolling-text']"),
        "marquee": (".marquee", ".scrolling-text"),
        "testimonials": ("[id*='testimonial']", ".testimonials"),
        "rich-text": ("[id*='rich-text']", "[id*='rich_text']", ".rich-text"),
        "multicolumn": ("[id*='multicolumn']", ".multicolumn"),
    }
)
"""Per-type selectors tried in order once the ambiguity heuristics give up."""


@functools.cache
def swiper_ready_script() -> str:
    """Return the ``<script>`` element that defers work until Swiper loads."""
    template = build_environment(autoescape=False).get_template("swiper_ready.js.jinja")
    return template.render(
        poll_interval=SWIPER_POLL_INTERVAL_MS,
        give_up_after=SWIPER_GIVE_UP_MS,
    )


@functools.cache
def highlight_client_script() -> str:
    """Return the ``<script>`` element implementing the live highlight client."""
    template = build_environment(autoescape=False).get_template("live_highlight.js.jinja")
    return template.render(
        selectors={key: list(value) for key, value in SECTION_SELECTORS.items()},
        overlay_offset=OVERLAY_OFFSET_PX,
    )


def body_scripts() -> str:
    """Return both scripts in the order they must run."""
    return swiper_ready_script() + highlight_client_script()


__all__ = [
    "OVERLAY_OFFSET_PX",
    "SECTION_SELECTORS",
    "body_scripts",
    "highlight_client_script",
    "swiper_ready_script",
]
