"""Tie the preview stages together.

:class:`PreviewComposer` is the single entry point callers use: it loads the
theme template, resolves which sections to render, composes content into
them, asks the backend to render, and finishes or replaces the result. It
never raises for backend trouble; the only errors that escape are caller
mistakes such as an unknown page type.

Example
-------
>>> from theme_preview.config import load_preview_config
>>> composer = PreviewComposer.from_config(load_preview_config())  # doctest: +SKIP
>>> document = composer.compose({"store_name": "Acme"}, page_type="home")  # doctest: +SKIP
>>> document.content_type  # doctest: +SKIP
'text/html'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import functools
import logging
import typing as typ

from .compositor import ContentCompositor, DefaultCompositor, compose_sections
from .config import PreviewConfig
from .context import (
    build_global_context,
    merge_edits,
    product_facts,
    refresh_rgb_fields,
)
from .fallback import build_fallback
from .finisher import finish
from .renderer_client import (
    RenderBackendClient,
    RenderInvocationManager,
    RenderRequest,
    RenderTransport,
)
from .resolver import resolve_instances
from .template import load_template, load_theme_settings, template_file_for

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html"


@dc.dataclass(frozen=True, slots=True)
class PreviewDocument:
    """Finished preview page handed back to the caller."""

    html: str
    used_fallback: bool
    content_type: str = HTML_CONTENT_TYPE


def _names(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


class PreviewComposer:
    """Compose theme previews from templates, content and the renderer.

    Parameters
    ----------
    config : PreviewConfig
        Paths, renderer location and retry bounds.
    transport : RenderTransport, optional
        Renderer transport; defaults to a :class:`RenderBackendClient` for
        ``config.renderer_url``.
    compositor : ContentCompositor, optional
        Content-mapping service; defaults to :class:`DefaultCompositor`.
    sleep : Callable[[float], None], optional
        Forwarded to :class:`RenderInvocationManager` for tests.
    """

    def __init__(
        self,
        config: PreviewConfig,
        *,
        transport: RenderTransport | None = None,
        compositor: ContentCompositor | None = None,
        sleep: cabc.Callable[[float], None] | None = None,
    ) -> None:
        self.config = config
        self.compositor = compositor or DefaultCompositor()
        backend = transport or RenderBackendClient(
            config.renderer_url, timeout=config.request_timeout
        )
        options: dict[str, typ.Any] = {
            "max_attempts": config.max_attempts,
            "retry_delay": config.retry_delay,
            "min_html_length": config.min_html_length,
        }
        if sleep is not None:
            options["sleep"] = sleep
        self.manager = RenderInvocationManager(backend, **options)

    @classmethod
    def from_config(cls, config: PreviewConfig) -> PreviewComposer:
        """Build a composer using the HTTP backend client and default compositor."""
        return cls(config)

    def compose(
        self,
        content: typ.Mapping[str, typ.Any],
        product: typ.Mapping[str, typ.Any] | None = None,
        *,
        theme: str | None = None,
        page_type: str = "product",
        hidden: cabc.Iterable[str] | None = None,
        order: cabc.Sequence[str] | None = None,
        base_url: str | None = None,
    ) -> PreviewDocument:
        """Return the preview page for ``content``.

        Parameters
        ----------
        content : Mapping[str, Any]
            AI content store. ``hidden_sections`` and ``section_order`` are
            read from it when ``hidden`` or ``order`` are not given.
        product : Mapping[str, Any], optional
            Scraped product record (``title``, ``price``, ``images``...).
        theme : str, optional
            Theme key; defaults to ``config.default_theme``.
        page_type : str, optional
            ``"product"`` or ``"home"``.
        hidden, order : optional
            Logical section names to hide, and the requested section order.
        base_url : str, optional
            Inserted as ``<base href>`` in the finished page.

        Raises
        ------
        UnknownPageTypeError
            If ``page_type`` is neither ``"product"`` nor ``"home"``.
        """
        template_file_for(page_type)
        content = refresh_rgb_fields(dict(content))
        theme_key = theme or self.config.default_theme
        facts = product_facts(content, product)
        hidden_names = _names(content.get("hidden_sections")) if hidden is None else list(hidden)
        order_names = _names(content.get("section_order")) if order is None else list(order)

        template = load_template(self.config.themes_path, theme_key, page_type)
        theme_settings = load_theme_settings(self.config.themes_path, theme_key)
        instances = resolve_instances(template, hidden_names, order_names)
        sections = compose_sections(
            instances,
            content,
            facts.images,
            self.compositor,
            product_title=facts.title,
        )
        logger.info(
            "composed %d of %d sections for theme %s (%s)",
            len(sections),
            len(template.order),
            theme_key,
            page_type,
        )
        request = RenderRequest(
            theme_path=self.config.theme_path(theme_key),
            sections=[section.to_payload() for section in sections],
            context=build_global_context(
                content, facts, theme_settings, page_type=page_type
            ),
        )
        outcome = self.manager.invoke(
            request,
            finish=functools.partial(
                finish,
                content=content,
                base_url=base_url,
                theme_settings=theme_settings,
                proxy_prefix=self.config.proxy_prefix,
            ),
            fallback=functools.partial(
                build_fallback,
                facts.title,
                facts.description,
                facts.price,
                list(facts.images),
                content.get("store_name"),
                content,
            ),
        )
        return PreviewDocument(html=outcome.html, used_fallback=outcome.used_fallback)

    def compose_edited(
        self,
        stored: typ.Mapping[str, typ.Any],
        edited: typ.Mapping[str, typ.Any],
        product: typ.Mapping[str, typ.Any] | None = None,
        *,
        base_url: str | None = None,
    ) -> PreviewDocument:
        """Preview unsaved editor changes layered over stored content.

        ``theme_key`` and ``page_type`` are read from ``edited``.
        """
        theme = edited.get("theme_key")
        page_type = edited.get("page_type")
        return self.compose(
            merge_edits(stored, edited),
            product,
            theme=theme if isinstance(theme, str) and theme else None,
            page_type=page_type if isinstance(page_type, str) and page_type else "product",
            base_url=base_url,
        )


__all__ = ["HTML_CONTENT_TYPE", "PreviewComposer", "PreviewDocument"]
