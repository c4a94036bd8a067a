"""Theme template documents and the loaders that read them from disk.

A theme stores one JSON template per page type (``templates/product.json``,
``templates/index.json``) listing section instances by id plus their render
order. This module parses those files into typed dataclasses. Missing or
malformed files are not errors: the preview must still render something, so
the loaders log the problem and return an empty template.
"""

from __future__ import annotations

import copy
import dataclasses as dc
import json
import logging
import typing as typ
from pathlib import Path

from ._constants import SETTINGS_DATA_PATH, TEMPLATE_FILES

logger = logging.getLogger(__name__)


class UnknownPageTypeError(ValueError):
    """Raised when a page type has no template file mapping."""


@dc.dataclass(slots=True)
class BlockInstance:
    """A block nested inside a section instance."""

    type: str
    settings: dict[str, typ.Any] = dc.field(default_factory=dict)
    disabled: bool = False


@dc.dataclass(slots=True)
class SectionInstance:
    """One concrete section occurrence inside a template.

    Attributes
    ----------
    id : str
        Template-specific instance id, often suffixed with a random token.
    type : str
        Stable section type; the reliable key for matching.
    settings : dict[str, Any]
        Section-level settings.
    blocks : dict[str, BlockInstance]
        Blocks keyed by block id.
    block_order : list[str]
        Block ids in render order.
    disabled : bool
        Whether the template author switched the section off.
    """

    id: str
    type: str
    settings: dict[str, typ.Any] = dc.field(default_factory=dict)
    blocks: dict[str, BlockInstance] = dc.field(default_factory=dict)
    block_order: list[str] = dc.field(default_factory=list)
    disabled: bool = False


@dc.dataclass(frozen=True, slots=True)
class TemplateDocument:
    """Section instances keyed by id together with their template order."""

    sections_by_id: typ.Mapping[str, SectionInstance] = dc.field(default_factory=dict)
    order: tuple[str, ...] = ()

    def instances(self) -> list[SectionInstance]:
        """Return instances in template order, skipping dangling ids."""
        return [
            self.sections_by_id[section_id]
            for section_id in self.order
            if section_id in self.sections_by_id
        ]

    @classmethod
    def from_mapping(cls, payload: typ.Mapping[str, typ.Any]) -> TemplateDocument:
        """Build a document from a decoded ``{"sections", "order"}`` mapping."""
        raw_sections = payload.get("sections") or {}
        raw_order = payload.get("order") or []
        sections: dict[str, SectionInstance] = {}
        if isinstance(raw_sections, dict):
            for section_id, raw in raw_sections.items():
                section = _build_section(str(section_id), raw)
                if section is not None:
                    sections[section.id] = section
        order = tuple(str(item) for item in raw_order) if isinstance(raw_order, list) else ()
        return cls(sections_by_id=sections, order=order)


def _build_section(section_id: str, raw: object) -> SectionInstance | None:
    match raw:
        case {"type": str() as section_type, **rest}:
            pass
        case _:
            return None
    raw_blocks = rest.get("blocks") or {}
    blocks: dict[str, BlockInstance] = {}
    if isinstance(raw_blocks, dict):
        for block_id, block in raw_blocks.items():
            match block:
                case {"type": str() as block_type, **block_rest}:
                    blocks[str(block_id)] = BlockInstance(
                        type=block_type,
                        settings=copy.deepcopy(dict(block_rest.get("settings") or {})),
                        disabled=bool(block_rest.get("disabled", False)),
                    )
                case _:
                    continue
    return SectionInstance(
        id=section_id,
        type=section_type,
        settings=copy.deepcopy(dict(rest.get("settings") or {})),
        blocks=blocks,
        block_order=[str(item) for item in rest.get("block_order") or []],
        disabled=bool(rest.get("disabled", False)),
    )


def template_file_for(page_type: str) -> str:
    """Return the template filename used for ``page_type``."""
    try:
        return TEMPLATE_FILES[page_type]
    except KeyError as exc:
        known = ", ".join(sorted(TEMPLATE_FILES))
        msg = f"Unknown page type '{page_type}'. Known page types: {known}"
        raise UnknownPageTypeError(msg) from exc


def _read_json(path: Path) -> dict[str, typ.Any] | None:
    if not path.exists():
        logger.warning("Theme file %s not found", path)
        return None
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read theme file %s: %s", path, exc)
        return None
    if not isinstance(loaded, dict):
        logger.warning("Theme file %s is not a JSON object", path)
        return None
    return loaded


def load_template(themes_path: Path, theme_key: str, page_type: str) -> TemplateDocument:
    """Load the template document for ``theme_key`` and ``page_type``.

    Parameters
    ----------
    themes_path : Path
        Directory containing one folder per theme.
    theme_key : str
        Theme folder name, for example ``"theme_v4"``.
    page_type : str
        ``"product"`` or ``"home"``.

    Returns
    -------
    TemplateDocument
        Parsed template, or an empty template when the file is missing or
        cannot be parsed.

    Raises
    ------
    UnknownPageTypeError
        If ``page_type`` has no template mapping.
    """
    path = themes_path / theme_key / "templates" / template_file_for(page_type)
    payload = _read_json(path)
    if payload is None:
        return TemplateDocument()
    return TemplateDocument.from_mapping(payload)


def load_theme_settings(themes_path: Path, theme_key: str) -> dict[str, typ.Any]:
    """Return the ``current`` block of the theme's ``settings_data.json``."""
    payload = _read_json(themes_path.joinpath(theme_key, *SETTINGS_DATA_PATH))
    if payload is None:
        return {}
    current = payload.get("current")
    return dict(current) if isinstance(current, dict) else {}


__all__ = [
    "BlockInstance",
    "SectionInstance",
    "TemplateDocument",
    "UnknownPageTypeError",
    "load_template",
    "load_theme_settings",
    "template_file_for",
]
