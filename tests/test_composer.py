from __future__ import annotations

import pytest
from bs4 import BeautifulSoup
from fakes import FakeTransport, backend_page, success_response

from theme_preview.composer import PreviewComposer
from theme_preview.config import PreviewConfig
from theme_preview.renderer_client import RendererTransportError
from theme_preview.template import UnknownPageTypeError


def _composer(config: PreviewConfig, transport: FakeTransport) -> PreviewComposer:
    return PreviewComposer(config, transport=transport, sleep=lambda _: None)


def test_compose_sends_resolved_sections(preview_config, sample_content, sample_product) -> None:
    transport = FakeTransport([success_response(backend_page())])
    content = {**sample_content, "hidden_sections": ["marquee", "faqs"]}
    document = _composer(preview_config, transport).compose(content, sample_product)

    assert document.used_fallback is False
    assert document.content_type == "text/html"
    request = transport.requests[0]
    assert request.theme_path == (preview_config.themes_path / "theme_v4").as_posix()
    ids = [section["id"] for section in request.sections]
    assert ids == ["announcement_Xy12", "header_main", "main", "benefits_aB1", "strip"]
    header = request.sections[1]
    assert header["blocks"]["title_1"]["settings"]["title"] == "Glow Lab"
    main = request.sections[2]
    assert main["blocks"]["title"]["settings"]["title"] == "Glow Serum"
    assert request.context["product"]["price"] == 2450
    assert request.context["settings"]["page_width"] == 1400


def test_compose_finishes_backend_html(preview_config, sample_content) -> None:
    transport = FakeTransport([success_response(backend_page())])
    document = _composer(preview_config, transport).compose(
        sample_content, base_url="https://editor.example"
    )
    soup = BeautifulSoup(document.html, "html.parser")
    assert soup.head.find("base")["href"] == "https://editor.example"
    assert soup.head.find("style", attrs={"data-shopify-color-override": True}) is not None
    assert "--page-width: 140rem;" in document.html
    assert "/api/shopify/assets/base.css" in document.html


def test_compose_falls_back_when_renderer_down(preview_config, sample_content, sample_product) -> None:
    transport = FakeTransport([RendererTransportError("refused")])
    document = _composer(preview_config, transport).compose(sample_content, sample_product)
    assert document.used_fallback is True
    assert transport.calls == 3
    soup = BeautifulSoup(document.html, "html.parser")
    assert soup.h1.get_text() == "Glow Serum"
    assert soup.title.get_text() == "Glow Serum - Glow Lab"
    assert soup.select_one(".price").get_text() == "24.50 €"


def test_explicit_order_overrides_content(preview_config, sample_content) -> None:
    transport = FakeTransport([success_response(backend_page())])
    _composer(preview_config, transport).compose(
        {**sample_content, "section_order": ["faqs"]},
        order=["what-makes-us-different"],
        hidden=["review"],
    )
    ids = [section["id"] for section in transport.requests[0].sections]
    assert ids[:3] == ["announcement_Xy12", "header_main", "benefits_aB1"]
    assert "strip" not in ids


def test_home_page_uses_index_template(preview_config) -> None:
    transport = FakeTransport([success_response(backend_page())])
    _composer(preview_config, transport).compose({}, page_type="home")
    assert [section["type"] for section in transport.requests[0].sections] == [
        "image-banner",
        "newsletter",
    ]
    assert transport.requests[0].context["request"]["page_type"] == "home"


def test_unknown_theme_renders_with_no_sections(preview_config) -> None:
    transport = FakeTransport([success_response(backend_page())])
    document = _composer(preview_config, transport).compose({}, theme="missing")
    assert transport.requests[0].sections == []
    assert document.used_fallback is False


def test_unknown_page_type_is_rejected(preview_config) -> None:
    transport = FakeTransport([])
    with pytest.raises(UnknownPageTypeError):
        _composer(preview_config, transport).compose({}, page_type="blog")
    assert transport.calls == 0


def test_compose_edited_merges_and_reads_targets(preview_config) -> None:
    transport = FakeTransport([success_response(backend_page())])
    document = _composer(preview_config, transport).compose_edited(
        {"store_name": "Old", "primary_color_picker": "#000000"},
        {"primary_color_picker": "#ffffff", "page_type": "home"},
    )
    request = transport.requests[0]
    assert request.context["aicontent"]["primary_rgbcolor_picker"] == "255,255,255"
    assert request.context["request"]["page_type"] == "home"
    assert "--color-primary: 255,255,255;" in document.html


def test_non_finite_price_still_yields_a_page(preview_config, sample_content) -> None:
    transport = FakeTransport([success_response(backend_page())])
    document = _composer(preview_config, transport).compose(
        sample_content, {"title": "Glow Serum", "price": "NaN"}
    )
    assert document.used_fallback is False
    assert transport.requests[0].context["product"]["price"] == 2999


def test_stale_rgb_field_is_recomputed_from_hex(preview_config) -> None:
    transport = FakeTransport([success_response(backend_page())])
    document = _composer(preview_config, transport).compose(
        {"primary_color_picker": "#ffffff", "primary_rgbcolor_picker": "0,0,0"}
    )
    request = transport.requests[0]
    assert request.context["aicontent"]["primary_rgbcolor_picker"] == "255,255,255"
    assert "--color-primary: 255,255,255;" in document.html
    assert "--color-primary: 0,0,0;" not in document.html
