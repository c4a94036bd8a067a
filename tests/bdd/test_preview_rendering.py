"""Behaviour tests for the end-to-end preview pipeline.

These scenarios drive :class:`theme_preview.composer.PreviewComposer` against
a temporary theme directory and a scripted renderer transport, covering both
the finished-page path and the fallback path taken when the renderer is down.

Usage:
    pytest tests/bdd/test_preview_rendering.py -v
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from fakes import FakeTransport, backend_page, success_response
from pytest_bdd import given, parsers, scenarios, then, when

from theme_preview.composer import PreviewComposer
from theme_preview.config import PreviewConfig
from theme_preview.renderer_client import RendererTransportError

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "preview_rendering.feature"
)
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@given("a theme with product sections")
def given_theme(themes_path: Path, scenario_state: ScenarioState) -> None:
    scenario_state["config"] = PreviewConfig(
        renderer_url="http://renderer.invalid", themes_path=themes_path
    )


@given("the renderer returns a full page")
def given_renderer_ok(scenario_state: ScenarioState) -> None:
    scenario_state["transport"] = FakeTransport([success_response(backend_page(1500))])


@given("the renderer is unreachable")
def given_renderer_down(scenario_state: ScenarioState) -> None:
    scenario_state["transport"] = FakeTransport([RendererTransportError("refused")])


@when("I compose the product preview")
def when_compose(
    scenario_state: ScenarioState,
    sample_content: dict[str, typ.Any],
    sample_product: dict[str, typ.Any],
) -> None:
    composer = PreviewComposer(
        scenario_state["config"],
        transport=scenario_state["transport"],
        sleep=lambda _: None,
    )
    document = composer.compose(sample_content, sample_product)
    scenario_state["document"] = document
    scenario_state["soup"] = BeautifulSoup(document.html, "html.parser")


@then("the page carries the theme colour override styles")
def then_override_styles(scenario_state: ScenarioState) -> None:
    soup: BeautifulSoup = scenario_state["soup"]
    style = soup.head.find("style", attrs={"data-shopify-color-override": True})
    assert style is not None, "expected the colour override <style> in <head>"
    assert "--color-primary: 111,98,84;" in style.get_text()


@then("no asset URL uses the internal shopify prefix")
def then_no_internal_prefix(scenario_state: ScenarioState) -> None:
    html = scenario_state["document"].html
    assert '"/shopify/' not in html
    assert "'/shopify/" not in html


@then("the live highlight client is the first body script after the swiper shim")
def then_scripts_first(scenario_state: ScenarioState) -> None:
    soup: BeautifulSoup = scenario_state["soup"]
    first, second = soup.body.find_all(True, recursive=False)[:2]
    assert first.has_attr("data-preview-swiper-ready")
    assert second.has_attr("data-preview-live-highlight")


@then(parsers.parse("the renderer was called {count:d} times"))
def then_call_count(scenario_state: ScenarioState, count: int) -> None:
    assert scenario_state["transport"].calls == count


@then("the fallback page shows the product title")
def then_fallback_title(scenario_state: ScenarioState) -> None:
    assert scenario_state["document"].used_fallback is True
    soup: BeautifulSoup = scenario_state["soup"]
    assert soup.h1.get_text() == "Glow Serum"
