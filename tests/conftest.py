"""Shared fixtures for theme preview tests."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest

from theme_preview.config import PreviewConfig

PRODUCT_TEMPLATE: dict[str, typ.Any] = {
    "sections": {
        "announcement_Xy12": {
            "type": "announcement-bar",
            "settings": {"text": "Free shipping"},
        },
        "header_main": {
            "type": "header",
            "settings": {"title": "Old name"},
            "blocks": {
                "title_1": {"type": "navbar-title", "settings": {"title": "Old"}},
                "link_1": {"type": "link", "settings": {"title": "Shop"}},
            },
            "block_order": ["title_1", "link_1"],
        },
        "main": {
            "type": "main-product",
            "blocks": {
                "title": {"type": "product-title", "settings": {"title": "x"}},
                "price": {"type": "price", "settings": {}},
            },
            "block_order": ["title", "price"],
        },
        "benefits_aB1": {"type": "pdp_benefits_aB1"},
        "faq_k2": {"type": "image-faq"},
        "strip": {"type": "header_with_marquee"},
        "ticker": {"type": "scrolling-text"},
        "off": {"type": "rich-text", "disabled": True},
    },
    "order": [
        "main",
        "benefits_aB1",
        "faq_k2",
        "strip",
        "ticker",
        "off",
        "announcement_Xy12",
        "header_main",
    ],
}


@pytest.fixture
def themes_path(tmp_path: Path) -> Path:
    """Return a themes directory holding a single ``theme_v4`` theme."""
    root = tmp_path / "themes"
    templates = root / "theme_v4" / "templates"
    templates.mkdir(parents=True)
    (templates / "product.json").write_text(json.dumps(PRODUCT_TEMPLATE), encoding="utf-8")
    (templates / "index.json").write_text(
        json.dumps(
            {
                "sections": {
                    "hero": {"type": "image-banner"},
                    "news": {"type": "newsletter"},
                },
                "order": ["hero", "news"],
            }
        ),
        encoding="utf-8",
    )
    config_dir = root / "theme_v4" / "config"
    config_dir.mkdir()
    (config_dir / "settings_data.json").write_text(
        json.dumps({"current": {"page_width": 1400, "buttons_radius": 10}}),
        encoding="utf-8",
    )
    return root


@pytest.fixture
def preview_config(themes_path: Path) -> PreviewConfig:
    """Return a config pointing at the temporary themes directory."""
    return PreviewConfig(
        renderer_url="http://renderer.invalid",
        themes_path=themes_path,
        retry_delay=0.5,
    )


@pytest.fixture
def sample_content() -> dict[str, typ.Any]:
    """Return a small but realistic AI content store."""
    return {
        "store_name": "Glow Lab",
        "primary_color_picker": "#6f6254",
        "tertiary_color_picker": "#e6e1dc",
        "font_family": "Poppins",
        "product_description": "A serum that glows.",
        "specialOffer": "Two for one this week",
    }


@pytest.fixture
def sample_product() -> dict[str, typ.Any]:
    return {
        "title": "Glow Serum",
        "price": "24.50",
        "images": ["https://cdn.example/a.jpg", "https://cdn.example/b.jpg"],
    }
