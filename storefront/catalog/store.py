"""
Catalog Store

Loads the catalog document once per page session and answers identity,
slug and id lookups. Read-only after load.
"""

import json
from pathlib import Path
from typing import Dict, Optional, Tuple

import httpx
from pydantic import ValidationError

from storefront.errors import ERROR_CATALOG_INVALID, CatalogLoadError
from storefront.logging import get_logger, sanitize_string_for_logging

from .models import Accessory, Catalog, CatalogEntry, Product, Sample

logger = get_logger(__name__)

Identity = Tuple[str, str]


class CatalogStore:
    """
    Write-once holder of the session catalog.

    `load` either yields a complete catalog or raises CatalogLoadError;
    there is no partially loaded state.
    """

    def __init__(self) -> None:
        self._catalog: Optional[Catalog] = None
        self._by_identity: Dict[Identity, CatalogEntry] = {}

    @property
    def catalog(self) -> Optional[Catalog]:
        return self._catalog

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None

    @property
    def products(self) -> list[Product]:
        return self._catalog.products if self._catalog else []

    @property
    def samples(self) -> list[Sample]:
        return self._catalog.samples if self._catalog else []

    @property
    def accessories(self) -> list[Accessory]:
        return self._catalog.accessories if self._catalog else []

    def load(self, raw: bytes | str) -> Catalog:
        """
        Parse and index catalog bytes.

        Raises:
            CatalogLoadError: bytes are not a JSON object matching the catalog shape
        """
        if self._catalog is not None:
            logger.warning("Catalog already loaded, ignoring second load")
            return self._catalog

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            raise CatalogLoadError(f"{ERROR_CATALOG_INVALID}: {e}") from e

        if not isinstance(data, dict):
            raise CatalogLoadError(f"{ERROR_CATALOG_INVALID}: top level is not an object")

        try:
            catalog = Catalog.model_validate(data)
        except ValidationError as e:
            raise CatalogLoadError(f"{ERROR_CATALOG_INVALID}: {e.error_count()} validation errors") from e

        self._by_identity = self._index(catalog)
        self._catalog = catalog
        logger.info(
            f"Catalog loaded: {len(catalog.products)} products, "
            f"{len(catalog.samples)} samples, {len(catalog.accessories)} accessories"
        )
        return catalog

    def load_file(self, path: str | Path) -> Catalog:
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise CatalogLoadError(f"Cannot read catalog file {path}: {e}") from e
        return self.load(raw)

    async def fetch(self, url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0) -> Catalog:
        """
        Fetch the catalog over HTTP and load it.

        Raises:
            CatalogLoadError: transport error, non-2xx status or invalid document
        """
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=timeout) as own_client:
                    response = await own_client.get(url)
            else:
                response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise CatalogLoadError(f"Error loading catalog from {url}: {e}") from e
        return self.load(response.content)

    @staticmethod
    def _index(catalog: Catalog) -> Dict[Identity, CatalogEntry]:
        # Products before accessories; first occurrence of an identity wins
        index: Dict[Identity, CatalogEntry] = {}
        for entry in [*catalog.products, *catalog.accessories]:
            product_id, variant_id = entry.identity
            if not product_id or not variant_id:
                continue
            key = (product_id, variant_id)
            if key in index:
                logger.warning(
                    f"Duplicate catalog identity {sanitize_string_for_logging(product_id)}/"
                    f"{sanitize_string_for_logging(variant_id)}, keeping first"
                )
                continue
            index[key] = entry
        return index

    def find_by_identity(self, product_id: str, variant_id: str) -> Optional[CatalogEntry]:
        """Product or accessory with this (productId, variantId), products first."""
        if self._catalog is None:
            logger.error("Catalog not loaded")
            return None
        entry = self._by_identity.get((product_id, variant_id))
        if entry is None:
            logger.warning(
                f"Product not found: {sanitize_string_for_logging(product_id)}/"
                f"{sanitize_string_for_logging(variant_id)}"
            )
        return entry

    def find_by_slug_or_id(self, token: str) -> Optional[CatalogEntry]:
        """Products, then samples, matched by slug, handle or id."""
        for collection in (self.products, self.samples):
            for field in ("slug", "handle", "id"):
                match = next((entry for entry in collection if getattr(entry, field) == token), None)
                if match is not None:
                    return match
        return None

    def find_product_by_id(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)
