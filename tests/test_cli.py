from __future__ import annotations

import json
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from fakes import backend_page, success_response

from theme_preview import cli
from theme_preview.renderer_client import (
    RenderBackendClient,
    RendererTransportError,
    RenderRequest,
)
from theme_preview.template import UnknownPageTypeError


@pytest.fixture
def config_file(tmp_path: Path, themes_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("LIQUID_SERVICE_URL", raising=False)
    monkeypatch.delenv("THEMES_PATH", raising=False)
    path = tmp_path / "preview.yaml"
    path.write_text(
        f"renderer_url: http://renderer.invalid\nthemes_path: {themes_path}\nretry_delay: 0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def content_file(tmp_path: Path, sample_content: dict) -> Path:
    path = tmp_path / "content.json"
    path.write_text(
        json.dumps({**sample_content, "hidden_sections": ["marquee"], "section_order": ["faqs"]}),
        encoding="utf-8",
    )
    return path


def test_render_writes_finished_page(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    config_file: Path,
    content_file: Path,
) -> None:
    sent: list[RenderRequest] = []

    def _fake_render(self: RenderBackendClient, request: RenderRequest):
        sent.append(request)
        return success_response(backend_page())

    monkeypatch.setattr(RenderBackendClient, "render", _fake_render)
    output = tmp_path / "out" / "preview.html"
    cli.render(content=content_file, output=output, config=config_file, base_url="https://app.example")

    assert capsys.readouterr().out.strip().endswith(f"wrote {output}")
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.head.find("base")["href"] == "https://app.example"
    assert [section["id"] for section in sent[0].sections][:3] == [
        "announcement_Xy12",
        "header_main",
        "faq_k2",
    ]


def test_render_reports_fallback(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    config_file: Path,
    content_file: Path,
) -> None:
    def _down(self: RenderBackendClient, request: RenderRequest):
        raise RendererTransportError("refused")

    monkeypatch.setattr(RenderBackendClient, "render", _down)
    output = tmp_path / "preview.html"
    cli.render(content=content_file, output=output, config=config_file)
    out = capsys.readouterr().out
    assert "fallback" in out
    assert "announcement-bar" in output.read_text(encoding="utf-8")


def test_render_rejects_unknown_page_type(config_file: Path, content_file: Path, tmp_path: Path) -> None:
    with pytest.raises(UnknownPageTypeError):
        cli.render(content=content_file, page_type="blog", output=tmp_path / "x.html", config=config_file)


def test_resolve_prints_effective_order(
    capsys: pytest.CaptureFixture[str], config_file: Path, content_file: Path
) -> None:
    cli.order(content=content_file, config=config_file)
    assert capsys.readouterr().out.splitlines() == [
        "announcement_Xy12",
        "header_main",
        "faq_k2",
        "main",
        "benefits_aB1",
        "strip",
    ]


def test_css_prints_sheet_with_theme_settings(
    capsys: pytest.CaptureFixture[str], config_file: Path, content_file: Path
) -> None:
    cli.css(content=content_file, theme="theme_v4", config=config_file)
    out = capsys.readouterr().out
    assert "--page-width: 140rem;" in out
    assert "--font-body-family: 'Poppins', sans-serif;" in out


def test_fallback_command_writes_page(
    capsys: pytest.CaptureFixture[str], tmp_path: Path, content_file: Path
) -> None:
    product = tmp_path / "product.json"
    product.write_text(json.dumps({"title": "Glow Serum", "price": 9}), encoding="utf-8")
    output = tmp_path / "fallback.html"
    cli.fallback(content=content_file, product=product, output=output)
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert soup.h1.get_text() == "Glow Serum"
    assert soup.select_one(".price").get_text() == "9.00 €"
    assert capsys.readouterr().out.strip() == f"wrote {output}"


def test_content_file_must_hold_object(tmp_path: Path) -> None:
    path = tmp_path / "content.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(TypeError, match="JSON object"):
        cli.fallback(content=path, output=tmp_path / "x.html")
