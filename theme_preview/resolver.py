"""Resolve the effective section order for a preview render.

The editor sends two lists of logical names: sections the user switched off
and the order the user dragged sections into. Neither list uses template
instance ids, so :func:`resolve` translates both through the alias table and
returns the instance ids that should actually be rendered, in order.

Examples
--------
>>> from theme_preview.template import TemplateDocument
>>> template = TemplateDocument.from_mapping(
...     {
...         "sections": {
...             "s1": {"type": "announcement-bar"},
...             "s2": {"type": "pdp_benefits_aB1"},
...         },
...         "order": ["s1", "s2"],
...     }
... )
>>> resolve(template, ["what-makes-us-different"], [])
['s1']
>>> resolve(template, [], ["what-makes-us-different"])
['s1', 's2']
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from ._constants import HEADER_TYPES
from .aliases import (
    HIDE_STRATEGIES,
    ORDER_STRATEGIES,
    TYPE_ALIASES,
    expand_logical_name,
    normalize_type,
    ranked_match,
)

if typ.TYPE_CHECKING:
    from .template import SectionInstance, TemplateDocument


def build_hidden_type_set(
    hidden_logical_names: cabc.Iterable[str],
    aliases: typ.Mapping[str, cabc.Sequence[str]] = TYPE_ALIASES,
) -> set[str]:
    """Expand hidden logical names into every type they may denote.

    The set holds the raw logical names (for exact id/type hits) as well as
    the normalized alias types.
    """
    hidden: set[str] = set()
    for name in hidden_logical_names:
        if not isinstance(name, str) or not name.strip():
            continue
        hidden.add(name)
        hidden.update(expand_logical_name(name, aliases))
    return hidden


def apply_requested_order(
    instances: cabc.Sequence[SectionInstance],
    ordered_logical_names: cabc.Sequence[str],
    aliases: typ.Mapping[str, cabc.Sequence[str]] = TYPE_ALIASES,
) -> list[SectionInstance]:
    """Return ``instances`` reordered to follow ``ordered_logical_names``.

    Each logical name claims the first unused instance that matches one of
    its candidates by the best available strategy: exact beats prefix beats
    substring across the whole template before a weaker strategy is tried.
    Unclaimed instances are appended in template order.
    """
    if not ordered_logical_names:
        return list(instances)

    used: set[int] = set()
    ordered: list[SectionInstance] = []
    for name in ordered_logical_names:
        if not isinstance(name, str) or not name.strip():
            continue
        index = _claim(instances, expand_logical_name(name, aliases), used)
        if index is not None:
            used.add(index)
            ordered.append(instances[index])

    ordered.extend(
        instance for index, instance in enumerate(instances) if index not in used
    )
    return ordered


def _claim(
    instances: cabc.Sequence[SectionInstance],
    candidates: cabc.Sequence[str],
    used: set[int],
) -> int | None:
    for strategy in ORDER_STRATEGIES:
        for candidate in candidates:
            for index, instance in enumerate(instances):
                if index in used:
                    continue
                if ranked_match(instance.type, candidate, (strategy,)):
                    return index
    return None


def is_hidden(instance: SectionInstance, hidden_types: cabc.Set[str]) -> bool:
    """Return True when ``instance`` is covered by ``hidden_types``."""
    if instance.id in hidden_types or instance.type in hidden_types:
        return True
    return any(
        ranked_match(subject, hidden, HIDE_STRATEGIES)
        for hidden in hidden_types
        for subject in (instance.id, instance.type)
    )


def prioritize_headers(
    instances: cabc.Sequence[SectionInstance],
    header_types: cabc.Collection[str] = HEADER_TYPES,
) -> list[SectionInstance]:
    """Stable-sort header-like sections ahead of everything else."""
    normalized_headers = {normalize_type(item) for item in header_types}
    return sorted(
        instances,
        key=lambda instance: normalize_type(instance.type) not in normalized_headers,
    )


def resolve_instances(
    template: TemplateDocument,
    hidden_logical_names: cabc.Iterable[str] = (),
    ordered_logical_names: cabc.Sequence[str] = (),
    *,
    aliases: typ.Mapping[str, cabc.Sequence[str]] = TYPE_ALIASES,
) -> list[SectionInstance]:
    """Return the section instances to render, in their effective order."""
    hidden_types = build_hidden_type_set(hidden_logical_names, aliases)
    ordered = apply_requested_order(template.instances(), ordered_logical_names, aliases)
    visible = [
        instance
        for instance in ordered
        if not instance.disabled and not is_hidden(instance, hidden_types)
    ]
    return prioritize_headers(visible)


def resolve(
    template: TemplateDocument,
    hidden_logical_names: cabc.Iterable[str] = (),
    ordered_logical_names: cabc.Sequence[str] = (),
    *,
    aliases: typ.Mapping[str, cabc.Sequence[str]] = TYPE_ALIASES,
) -> list[str]:
    """Return the effective order of instance ids for ``template``.

    Parameters
    ----------
    template : TemplateDocument
        Parsed theme template.
    hidden_logical_names : Iterable[str]
        Logical names the user switched off.
    ordered_logical_names : Sequence[str]
        Logical names in the order the user wants them; may be empty.
    aliases : Mapping[str, Sequence[str]], optional
        Alias table; defaults to :data:`~theme_preview.aliases.TYPE_ALIASES`.

    Returns
    -------
    list[str]
        Instance ids, a subset of ``template.order`` with headers first.
    """
    return [
        instance.id
        for instance in resolve_instances(
            template, hidden_logical_names, ordered_logical_names, aliases=aliases
        )
    ]


__all__ = [
    "apply_requested_order",
    "build_hidden_type_set",
    "is_hidden",
    "prioritize_headers",
    "resolve",
    "resolve_instances",
]
