"""Current-product resolution from page context."""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from storefront.errors import ERROR_NO_PRODUCTS
from storefront.logging import get_logger, sanitize_string_for_logging

from .models import CatalogEntry, Sample, merge_sample
from .store import CatalogStore

logger = get_logger(__name__)

_PRODUCT_PATH = re.compile(r"/product/([^/]+)")


@dataclass(frozen=True)
class PageContext:
    """Navigation signal: `?product=` query value and `/product/<token>` path segment."""

    query_product: Optional[str] = None
    path_segment: Optional[str] = None
    path: str = "/"

    @classmethod
    def from_url(cls, url: str) -> "PageContext":
        parts = urlsplit(url)
        query = parse_qs(parts.query).get("product", [])
        match = _PRODUCT_PATH.search(parts.path)
        return cls(
            query_product=query[0] if query else None,
            path_segment=match.group(1) if match else None,
            path=parts.path or "/",
        )


class ProductResolver:
    """
    Picks the product a page should display.

    Token: query value, else path segment, else the default token. Lookup:
    products by slug/handle/id, then samples; a sample with a parent is
    merged over a copy of that parent. Nothing found falls back to the first
    product.
    """

    def __init__(self, store: CatalogStore, default_token: str = "brush") -> None:
        self.store = store
        self.default_token = default_token

    def token_for(self, context: PageContext) -> str:
        return context.query_product or context.path_segment or self.default_token

    def resolve_current(self, context: PageContext) -> Optional[CatalogEntry]:
        """Resolved product, or None only when the catalog has no products."""
        products = self.store.products
        if not products:
            logger.error(f"Cannot resolve product: {ERROR_NO_PRODUCTS}")
            return None

        token = self.token_for(context)
        logger.debug(f"Looking for product with slug: {sanitize_string_for_logging(token)}")

        entry = self.store.find_by_slug_or_id(token)
        if isinstance(entry, Sample) and entry.parent_product_id:
            parent = self.store.find_product_by_id(entry.parent_product_id)
            if parent is not None:
                entry = merge_sample(parent, entry)
            else:
                logger.warning(
                    f"Sample parent {sanitize_string_for_logging(entry.parent_product_id)} missing, "
                    "using sample as-is"
                )

        if entry is None:
            logger.warning(
                f"Product {sanitize_string_for_logging(token)} not found, using first product as fallback"
            )
            return products[0]

        logger.debug(f"Found product: {entry.name}")
        return entry
