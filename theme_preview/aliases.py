"""Logical section names, template type aliases, and ranked type matching.

The editor names page sections by what they mean (``"what-makes-us-different"``)
while theme templates name them by how they were built (``"pdp_benefits_aB1"``,
with an author-generated suffix). This module owns the static table bridging
the two vocabularies and the small ranked matcher used to compare them.

Matching works on normalized strings (lower case, underscores folded into
hyphens) and tries an ordered tuple of strategies. Each strategy is a plain
function so it can be tested in isolation.

Examples
--------
>>> normalize_type("PDP_Benefits_aB1")
'pdp-benefits-ab1'
>>> expand_logical_name("what-makes-us-different")
('pdp-benefits', 'what-makes-us-different')
>>> ranked_match("pdp_benefits_aB1", "pdp-benefits", ORDER_STRATEGIES)
'prefix'
>>> ranked_match("header_with_marquee", "marquee", HIDE_STRATEGIES) is None
True
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from types import MappingProxyType

SEPARATOR = "-"

TYPE_ALIASES: typ.Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "product-section": ("main-product", "pdp-main-product", "featured-product"),
        "review": (
            "testimonials",
            "scrolling-testimonials",
            "header-with-marquee",
            "reviews",
        ),
        "timeline": ("timeline-points", "timeline"),
        "product-information": ("image-with-text", "img-with-txt", "shopall-img-with-txt"),
        "what-makes-us-different": ("pdp-benefits",),
        "clinical-section": ("pdp-statistics", "pdp-statistics-column"),
        "faqs": ("faq", "image-faq", "collapsible-content"),
        "comparison-table": ("pdp-comparison-table", "comparison-table"),
        "hero": ("slideshow", "image-banner", "hero"),
        "marquee": ("marquee", "scrolling-text"),
        "newsletter": ("newsletter", "custom-newsletter", "email-signup"),
        "images": ("video-grid-slider", "image-gallery"),
    }
)
"""Logical editor names mapped to the template type patterns they may denote."""

MatchStrategy = cabc.Callable[[str, str], bool]


def normalize_type(value: str) -> str:
    """Return ``value`` lower-cased with underscores folded into hyphens."""
    return value.strip().lower().replace("_", SEPARATOR)


def match_exact(subject: str, candidate: str) -> bool:
    """Return True when both normalized strings are identical."""
    return subject == candidate


def match_prefix(subject: str, candidate: str) -> bool:
    """Return True when ``subject`` starts with ``candidate`` plus a separator.

    The separator requirement keeps ``"faq"`` from claiming ``"faqtory"`` while
    still matching ``"faq-x7Yq"``.
    """
    return subject.startswith(candidate + SEPARATOR)


def match_substring(subject: str, candidate: str) -> bool:
    """Return True when ``candidate`` occurs anywhere inside ``subject``."""
    return bool(candidate) and candidate in subject


ORDER_STRATEGIES: tuple[tuple[str, MatchStrategy], ...] = (
    ("exact", match_exact),
    ("prefix", match_prefix),
    ("substring", match_substring),
)
"""Strategies used when placing a section at a caller-requested position."""

HIDE_STRATEGIES: tuple[tuple[str, MatchStrategy], ...] = (
    ("exact", match_exact),
    ("prefix", match_prefix),
)
"""Strategies used when hiding; never substring so generic tokens stay narrow."""


def ranked_match(
    subject: str,
    candidate: str,
    strategies: cabc.Sequence[tuple[str, MatchStrategy]],
) -> str | None:
    """Return the name of the first strategy that matches, or ``None``.

    Parameters
    ----------
    subject : str
        Template type or instance id being tested.
    candidate : str
        Type pattern to look for.
    strategies : Sequence[tuple[str, MatchStrategy]]
        Named strategies in priority order.
    """
    normalized_subject = normalize_type(subject)
    normalized_candidate = normalize_type(candidate)
    if not normalized_candidate:
        return None
    for name, strategy in strategies:
        if strategy(normalized_subject, normalized_candidate):
            return name
    return None


def expand_logical_name(
    name: str, aliases: typ.Mapping[str, cabc.Sequence[str]] = TYPE_ALIASES
) -> tuple[str, ...]:
    """Return the alias types for ``name`` followed by ``name`` itself.

    A logical name without a table entry stands for itself, and a logical name
    may coincide with a real template type, so the literal is always kept.
    """
    normalized = normalize_type(name)
    expanded: list[str] = []
    for alias in aliases.get(normalized, aliases.get(name, ())):
        alias_norm = normalize_type(alias)
        if alias_norm not in expanded:
            expanded.append(alias_norm)
    if normalized and normalized not in expanded:
        expanded.append(normalized)
    return tuple(expanded)


__all__ = [
    "HIDE_STRATEGIES",
    "ORDER_STRATEGIES",
    "SEPARATOR",
    "TYPE_ALIASES",
    "MatchStrategy",
    "expand_logical_name",
    "match_exact",
    "match_prefix",
    "match_substring",
    "normalize_type",
    "ranked_match",
]
