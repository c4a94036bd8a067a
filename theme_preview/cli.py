"""Cyclopts CLI entrypoint for rendering theme previews outside the editor.

The ``preview`` console script exposes the pipeline stages for local use:
``preview render`` produces a finished HTML page (falling back to the local
page when the backend is unreachable), ``preview resolve`` prints the
effective section order, and ``preview css`` prints the synthesized theme
variable sheet.

Examples
--------
Render the product page of the default theme:

>>> from theme_preview.cli import app
>>> app.run(["render", "--content", "content.json"])  # doctest: +SKIP
"""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .composer import PreviewComposer
from .config import load_preview_config
from .context import product_facts
from .fallback import build_fallback
from .logging_config import configure_logging
from .resolver import resolve
from .template import load_template, load_theme_settings, template_file_for
from .theme_css import synthesize

DEFAULT_CONFIG = Path("preview.yaml")

app = App(name="preview", config=cyclopts.config.Env("PREVIEW_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _load_json(path: Path | None) -> dict[str, typ.Any]:
    if path is None:
        return {}
    loaded = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(loaded, dict):
        msg = f"'{path}' must contain a JSON object."
        raise TypeError(msg)
    return loaded


@app.command(help="Render a finished preview page to an HTML file.")
def render(
    *,
    content: typ.Annotated[Path, Parameter(help="AI content JSON file")],
    product: typ.Annotated[
        Path | None, Parameter(help="Product record JSON file")
    ] = None,
    theme: typ.Annotated[str | None, Parameter(help="Theme key")] = None,
    page_type: typ.Annotated[str, Parameter(help="product or home")] = "product",
    base_url: typ.Annotated[
        str | None, Parameter(help="Value for the injected <base href>")
    ] = None,
    output: typ.Annotated[Path, Parameter(help="Destination HTML file")] = Path(
        "preview.html"
    ),
    config: typ.Annotated[Path, Parameter(help="Preview config YAML")] = DEFAULT_CONFIG,
    log_level: typ.Annotated[str, Parameter(help="Logging level")] = "INFO",
) -> None:
    """Render a preview and write it to ``output``.

    Raises
    ------
    UnknownPageTypeError
        If ``page_type`` is neither ``product`` nor ``home``.
    """
    configure_logging(log_level)
    composer = PreviewComposer.from_config(load_preview_config(config))
    document = composer.compose(
        _load_json(content),
        _load_json(product),
        theme=theme,
        page_type=page_type,
        base_url=base_url,
    )
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document.html, encoding="utf-8")
    if document.used_fallback:
        print("renderer unavailable, wrote fallback page")
    print(f"wrote {_format_path(output)}")


@app.command(
    name="resolve",
    help="Print the effective section order, one instance id per line.",
)
def order(
    *,
    content: typ.Annotated[Path, Parameter(help="AI content JSON file")],
    theme: typ.Annotated[str | None, Parameter(help="Theme key")] = None,
    page_type: typ.Annotated[str, Parameter(help="product or home")] = "product",
    config: typ.Annotated[Path, Parameter(help="Preview config YAML")] = DEFAULT_CONFIG,
) -> None:
    """Resolve hidden sections and requested order from the content file."""
    settings = load_preview_config(config)
    template_file_for(page_type)
    payload = _load_json(content)
    template = load_template(
        settings.themes_path, theme or settings.default_theme, page_type
    )
    hidden = payload.get("hidden_sections")
    requested = payload.get("section_order")
    for section_id in resolve(
        template,
        hidden if isinstance(hidden, list) else [],
        requested if isinstance(requested, list) else [],
    ):
        print(section_id)


@app.command(help="Print the synthesized theme variable CSS.")
def css(
    *,
    content: typ.Annotated[Path, Parameter(help="AI content JSON file")],
    theme: typ.Annotated[
        str | None, Parameter(help="Theme key supplying structural settings")
    ] = None,
    config: typ.Annotated[Path, Parameter(help="Preview config YAML")] = DEFAULT_CONFIG,
) -> None:
    """Print the CSS injected into finished previews."""
    settings = load_preview_config(config)
    theme_settings = (
        load_theme_settings(settings.themes_path, theme) if theme else None
    )
    print(synthesize(_load_json(content), theme_settings), end="")


@app.command(help="Write the local fallback page without calling the renderer.")
def fallback(
    *,
    content: typ.Annotated[Path, Parameter(help="AI content JSON file")],
    product: typ.Annotated[
        Path | None, Parameter(help="Product record JSON file")
    ] = None,
    output: typ.Annotated[Path, Parameter(help="Destination HTML file")] = Path(
        "fallback.html"
    ),
) -> None:
    """Write the fallback page for ``content`` to ``output``."""
    payload = _load_json(content)
    facts = product_facts(payload, _load_json(product))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        build_fallback(
            facts.title,
            facts.description,
            facts.price,
            list(facts.images),
            payload.get("store_name"),
            payload,
        ),
        encoding="utf-8",
    )
    print(f"wrote {_format_path(output)}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``preview`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
