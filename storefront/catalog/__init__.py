"""Catalog package: models, store, and current-product resolver."""
from .models import Accessory, Catalog, CatalogEntry, CatalogImage, EntryKind, Product, Sample, merge_sample
from .resolver import PageContext, ProductResolver
from .store import CatalogStore

__all__ = [
    "Accessory",
    "Catalog",
    "CatalogEntry",
    "CatalogImage",
    "CatalogStore",
    "EntryKind",
    "PageContext",
    "Product",
    "ProductResolver",
    "Sample",
    "merge_sample",
]
