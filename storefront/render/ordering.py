"""Selection and ordering rules for rendered collections."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, TypeVar

from storefront.catalog.models import CatalogEntry

E = TypeVar("E", bound=CatalogEntry)


def by_sorting(entries: Iterable[E]) -> List[E]:
    """Ascending `sorting`, missing ranks last, catalog order kept among ties."""
    return sorted(entries, key=lambda entry: entry.sort_rank)


def selector_products(products: Sequence[E], category: str) -> List[E]:
    """Products of the panel category, sample variants excluded."""
    return by_sorting(
        p for p in products
        if p.category == category and not p.is_sample_variant
    )


def home_products(products: Sequence[E], category: str, limit: int = 4) -> List[E]:
    return by_sorting(p for p in products if p.category == category)[:limit]


def main_accessories(accessories: Sequence[E], allowed_ids: Sequence[str]) -> List[E]:
    """The curated accessories shown next to a product."""
    allowed = set(allowed_ids)
    return by_sorting(a for a in accessories if a.id in allowed)


def page_accessories(accessories: Sequence[E], category: str) -> List[E]:
    """Every accessory of the accessory category."""
    return by_sorting(a for a in accessories if a.category == category)


@dataclass(frozen=True)
class GallerySlide:
    url: str
    alt: str


def gallery_slides(product: CatalogEntry) -> List[GallerySlide]:
    """
    Image gallery order.

    Images sorted by sort order (missing as 0); the main image goes first
    unless the list already contains it. Images without a URL are dropped.
    """
    name = product.name or ""
    images = sorted(product.images, key=lambda image: image.order)
    slides: List[GallerySlide] = []

    if product.main_image and not any(image.url == product.main_image for image in images):
        slides.append(GallerySlide(url=product.main_image, alt=name))

    for image in images:
        if not image.url:
            continue
        alt = f"{name} - {image.type}" if image.type else name
        slides.append(GallerySlide(url=image.url, alt=alt))
    return slides


def thumbnail_url(entry: CatalogEntry) -> Optional[str]:
    """Selector tile image: dedicated slider image, else main image."""
    return entry.selection_slider_image or entry.main_image or None
