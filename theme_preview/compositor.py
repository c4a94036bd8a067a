"""Hand surviving sections to the content compositor and tidy its output.

Writing AI copy into section settings and blocks is owned by a separate
content-mapping service. This module only defines the interface that
service must satisfy (:class:`ContentCompositor`), a conservative default
implementation used when none is injected, and the two fixups that cut across
every section: the store name always wins in header sections and the
product title always wins in product sections.
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_STORE_NAME, PLACEHOLDER_IMAGE
from .aliases import match_exact, normalize_type, ranked_match

if typ.TYPE_CHECKING:
    from .template import SectionInstance

Content = dict[str, typ.Any]
DistributedImages = dict[str, typ.Any]

HEADER_SECTION_TYPES = ("header", "navbar")
PRODUCT_SECTION_TYPES = (
    "featured-product",
    "pdp-main-product",
    "main-product",
    "main-product-custom",
)
HEADER_TITLE_BLOCKS = frozenset(
    {"navbar-title", "header-title", "heading-link", "header-heading", "title", "heading"}
)
PRODUCT_TITLE_BLOCKS = frozenset(
    {"product-title", "product-title-h2", "product--title", "title"}
)
EXACT_ONLY = (("exact", match_exact),)


class ContentCompositor(typ.Protocol):
    """Interface of the external service that writes AI content into sections."""

    def migrate(self, content: Content) -> Content:
        """Return ``content`` upgraded to the current field layout."""
        ...

    def distribute_images(
        self, content: Content, images: cabc.Sequence[str]
    ) -> DistributedImages:
        """Assign product images to the named image slots sections use."""
        ...

    def apply_to_settings(
        self,
        section_type: str,
        settings: dict[str, typ.Any],
        content: Content,
        images: DistributedImages,
    ) -> dict[str, typ.Any]:
        """Return section settings with AI content applied."""
        ...

    def apply_to_blocks(
        self,
        section_type: str,
        blocks: dict[str, dict[str, typ.Any]],
        content: Content,
        images: DistributedImages,
    ) -> dict[str, dict[str, typ.Any]]:
        """Return section blocks with AI content applied."""
        ...


class DefaultCompositor:
    """Compositor that fills required fields and otherwise passes sections through.

    It stands in for the content-mapping service in tests and command-line
    renders so a preview always has sane inputs.
    """

    def migrate(self, content: Content) -> Content:
        migrated = copy.deepcopy(dict(content))
        faq = migrated.get("faq")
        if isinstance(faq, list):
            for entry in faq:
                if isinstance(entry, dict) and entry.get("answer") and not entry.get("content"):
                    entry["content"] = entry["answer"]
        if not migrated.get("specialOffer"):
            migrated["specialOffer"] = "Limited Time: Free Shipping on All Orders!"
        if not isinstance(migrated.get("newsletter"), dict):
            migrated["newsletter"] = {
                "heading": "Join Our Community",
                "text": "Subscribe for exclusive offers, tips, and updates delivered to your inbox",
            }
        return migrated

    def distribute_images(
        self, content: Content, images: cabc.Sequence[str]
    ) -> DistributedImages:
        pool = [image for image in images if isinstance(image, str) and image]

        def pick(index: int) -> str:
            if not pool:
                return PLACEHOLDER_IMAGE
            return pool[min(index, len(pool) - 1)]

        def chosen(*keys: str) -> str | None:
            for key in keys:
                value = content.get(key)
                if isinstance(value, str) and value:
                    return value
            return None

        section_images = content.get("productSectionImage")
        if not isinstance(section_images, list) or not section_images:
            section_images = None
        hero_images = section_images or pool[:5]
        return {
            "featuredImage": pick(0),
            "landingPageImage": chosen("selectedHeroImage", "selectedLandingPageImage", "landingPageImage")
            or pick(0),
            "productSectionImage": section_images[0] if section_images else pick(1),
            "imageWithTextImage": chosen("imageWithTextImage") or pick(2),
            "statisticsImage": chosen("selectedClinicalImage", "clinicalImage", "statisticsImage")
            or pick(3),
            "timelineImage": chosen("timelineImage") or pick(4),
            "benefitsImage": chosen("selectedBenefitsImage", "benefitsImage") or pick(1),
            "benefitsImage2": chosen("selectedBenefitsImage2") or pick(2),
            "faqImage": chosen("faqImage") or pick(2),
            "comparisonOurImage": chosen("comparisonOurImage", "comparisonImage") or pick(0),
            "comparisonOthersImage": chosen("comparisonOthersImage") or pick(1),
            "heroImages": list(hero_images),
        }

    def apply_to_settings(
        self,
        section_type: str,
        settings: dict[str, typ.Any],
        content: Content,
        images: DistributedImages,
    ) -> dict[str, typ.Any]:
        return copy.deepcopy(settings)

    def apply_to_blocks(
        self,
        section_type: str,
        blocks: dict[str, dict[str, typ.Any]],
        content: Content,
        images: DistributedImages,
    ) -> dict[str, dict[str, typ.Any]]:
        return copy.deepcopy(blocks)


@dc.dataclass(slots=True)
class ComposedSection:
    """A section with content applied, in the shape the renderer expects."""

    id: str
    type: str
    settings: dict[str, typ.Any]
    blocks: dict[str, dict[str, typ.Any]]
    block_order: list[str]

    def to_payload(self) -> dict[str, typ.Any]:
        """Return the JSON-ready mapping sent to the rendering backend."""
        return dc.asdict(self)


def _is_section_kind(section_type: str, kinds: cabc.Sequence[str]) -> bool:
    # Exact only: "header-with-marquee" is a testimonial strip, not a header.
    return any(ranked_match(section_type, kind, EXACT_ONLY) for kind in kinds)


def _block_payload(instance: SectionInstance) -> dict[str, dict[str, typ.Any]]:
    return {
        block_id: {
            "type": block.type,
            "settings": copy.deepcopy(block.settings),
            "disabled": block.disabled,
        }
        for block_id, block in instance.blocks.items()
    }


def _overwrite_block_text(
    blocks: dict[str, dict[str, typ.Any]],
    block_types: cabc.Set[str],
    value: str,
    keys: cabc.Sequence[str],
) -> None:
    for block in blocks.values():
        if not isinstance(block, dict):
            continue
        if normalize_type(str(block.get("type", ""))) not in block_types:
            continue
        settings = block.setdefault("settings", {})
        for key in keys:
            settings[key] = value


def propagate_store_name(section: ComposedSection, store_name: str) -> None:
    """Force the store name into a header section's title fields."""
    if not _is_section_kind(section.type, HEADER_SECTION_TYPES):
        return
    section.settings["title"] = store_name
    section.settings["heading"] = store_name
    _overwrite_block_text(
        section.blocks,
        HEADER_TITLE_BLOCKS,
        store_name,
        ("title", "heading", "text", "link_text"),
    )


def propagate_product_title(section: ComposedSection, product_title: str) -> None:
    """Force the product title into a product section's title blocks."""
    if not product_title or not _is_section_kind(section.type, PRODUCT_SECTION_TYPES):
        return
    _overwrite_block_text(
        section.blocks,
        PRODUCT_TITLE_BLOCKS,
        product_title,
        ("title", "heading", "text", "h2"),
    )


def compose_sections(
    instances: cabc.Sequence[SectionInstance],
    content: typ.Mapping[str, typ.Any],
    images: cabc.Sequence[str],
    compositor: ContentCompositor | None = None,
    *,
    product_title: str = "",
) -> list[ComposedSection]:
    """Apply content to each resolved section and run the cross-cutting fixups.

    Parameters
    ----------
    instances : Sequence[SectionInstance]
        Sections in effective order, already filtered by the resolver.
    content : Mapping[str, Any]
        AI content store.
    images : Sequence[str]
        Product image URLs.
    compositor : ContentCompositor, optional
        Content-mapping service; defaults to :class:`DefaultCompositor`.
    product_title : str, optional
        Title propagated into product sections; skipped when empty.

    Returns
    -------
    list[ComposedSection]
        One composed section per instance, order preserved.
    """
    service = compositor or DefaultCompositor()
    migrated = service.migrate(dict(content))
    distributed = service.distribute_images(migrated, list(images))
    store_name = migrated.get("store_name")
    if not isinstance(store_name, str) or not store_name.strip():
        store_name = DEFAULT_STORE_NAME

    composed: list[ComposedSection] = []
    for instance in instances:
        settings = service.apply_to_settings(
            instance.type, copy.deepcopy(instance.settings), migrated, distributed
        )
        blocks = service.apply_to_blocks(
            instance.type, _block_payload(instance), migrated, distributed
        )
        section = ComposedSection(
            id=instance.id,
            type=instance.type,
            settings=settings,
            blocks=blocks,
            block_order=list(instance.block_order),
        )
        propagate_store_name(section, store_name)
        propagate_product_title(section, product_title)
        composed.append(section)
    return composed


__all__ = [
    "ComposedSection",
    "ContentCompositor",
    "DefaultCompositor",
    "compose_sections",
    "propagate_product_title",
    "propagate_store_name",
]
