from __future__ import annotations

import typing as typ

from theme_preview._constants import PLACEHOLDER_IMAGE
from theme_preview.compositor import DefaultCompositor, compose_sections
from theme_preview.template import TemplateDocument

TEMPLATE = TemplateDocument.from_mapping(
    {
        "sections": {
            "nav": {
                "type": "header",
                "blocks": {
                    "t": {"type": "navbar_title", "settings": {"title": "Old"}},
                    "l": {"type": "link", "settings": {"title": "Shop"}},
                },
                "block_order": ["t", "l"],
            },
            "strip": {
                "type": "header-with-marquee",
                "blocks": {"t": {"type": "title", "settings": {"title": "Loved by many"}}},
            },
            "main": {
                "type": "main-product",
                "blocks": {
                    "t": {"type": "product-title", "settings": {"title": "x"}},
                    "p": {"type": "price", "settings": {"title": "keep"}},
                },
            },
        },
        "order": ["nav", "strip", "main"],
    }
)


def _by_id(content: dict[str, typ.Any], **kwargs: typ.Any) -> dict[str, typ.Any]:
    sections = compose_sections(TEMPLATE.instances(), content, [], **kwargs)
    return {section.id: section.to_payload() for section in sections}


def test_store_name_wins_in_header_sections() -> None:
    sections = _by_id({"store_name": "Glow Lab"})
    nav = sections["nav"]
    assert nav["settings"]["title"] == "Glow Lab"
    assert nav["blocks"]["t"]["settings"]["title"] == "Glow Lab"
    assert nav["blocks"]["l"]["settings"]["title"] == "Shop"
    assert nav["block_order"] == ["t", "l"]


def test_store_name_defaults_when_missing() -> None:
    assert _by_id({})["nav"]["settings"]["heading"] == "YOUR BRAND"


def test_header_with_marquee_is_not_a_header() -> None:
    strip = _by_id({"store_name": "Glow Lab"})["strip"]
    assert strip["blocks"]["t"]["settings"]["title"] == "Loved by many"
    assert "title" not in strip["settings"]


def test_product_title_wins_in_product_sections() -> None:
    main = _by_id({}, product_title="Glow Serum")["main"]
    assert main["blocks"]["t"]["settings"]["title"] == "Glow Serum"
    assert main["blocks"]["p"]["settings"]["title"] == "keep"


def test_empty_product_title_leaves_blocks() -> None:
    assert _by_id({})["main"]["blocks"]["t"]["settings"]["title"] == "x"


def test_template_settings_are_not_mutated() -> None:
    _by_id({"store_name": "Glow Lab"}, product_title="Glow Serum")
    header = TEMPLATE.sections_by_id["nav"]
    assert header.blocks["t"].settings == {"title": "Old"}
    assert header.settings == {}


def test_injected_compositor_is_used() -> None:
    calls: list[str] = []

    class Recording(DefaultCompositor):
        def apply_to_settings(self, section_type, settings, content, images):
            calls.append(section_type)
            return {**settings, "heading": content["store_name"].upper()}

    sections = compose_sections(TEMPLATE.instances(), {"store_name": "x"}, [], Recording())
    assert calls == ["header", "header-with-marquee", "main-product"]
    assert sections[2].settings == {"heading": "X"}


def test_migrate_fills_defaults_without_touching_input() -> None:
    content = {"faq": [{"question": "Q", "answer": "A"}]}
    migrated = DefaultCompositor().migrate(content)
    assert migrated["faq"][0]["content"] == "A"
    assert "content" not in content["faq"][0]
    assert migrated["specialOffer"]
    assert migrated["newsletter"]["heading"]


def test_distribute_images_with_overrides_and_placeholder() -> None:
    compositor = DefaultCompositor()
    empty = compositor.distribute_images({}, [])
    assert empty["featuredImage"] == PLACEHOLDER_IMAGE
    assert empty["heroImages"] == []

    images = ["a.jpg", "b.jpg", "c.jpg"]
    slots = compositor.distribute_images(
        {"selectedBenefitsImage": "chosen.jpg", "productSectionImage": ["ps.jpg"]},
        images,
    )
    assert slots["featuredImage"] == "a.jpg"
    assert slots["benefitsImage"] == "chosen.jpg"
    assert slots["productSectionImage"] == "ps.jpg"
    assert slots["heroImages"] == ["ps.jpg"]
    assert slots["timelineImage"] == "c.jpg"
