"""
Common Error Constants and Exceptions

Centralized error messages to avoid string duplication, plus the few
exception types that cross module boundaries.
"""

# Catalog errors
ERROR_CATALOG_UNAVAILABLE = "Catalog not loaded"
ERROR_CATALOG_INVALID = "Catalog document is invalid"
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_NO_PRODUCTS = "No products available in catalog"

# Cart errors
ERROR_MISSING_IDENTITY = "Missing product/variant identity"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"
ERROR_STORAGE_READ = "Error reading cart from storage"
ERROR_STORAGE_WRITE = "Error saving cart to storage"

# Page errors
ERROR_SLOT_NOT_FOUND = "Slot container not found"


class StorefrontError(Exception):
    """Base class for storefront errors."""


class CatalogLoadError(StorefrontError):
    """Catalog bytes could not be fetched, decoded or validated."""


class StorageError(StorefrontError):
    """Key-value store backend failed to read or write."""
