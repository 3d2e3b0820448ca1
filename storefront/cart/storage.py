"""Fail-soft cart persistence over a key-value store."""
import json

from storefront.db import KeyValueStore, StorageKeys
from storefront.errors import ERROR_STORAGE_READ, ERROR_STORAGE_WRITE
from storefront.logging import get_logger

from .models import Cart

logger = get_logger(__name__)


class CartStore:
    """
    Serializes the cart under a single key.

    Reads never fail: a missing key, a corrupted record or a backend fault
    all yield an empty cart. Writes log and swallow backend faults.
    """

    def __init__(self, store: KeyValueStore, key: str = StorageKeys.CART) -> None:
        self.store = store
        self.key = key

    def load(self) -> Cart:
        try:
            raw = self.store.get(self.key)
        except Exception as e:
            logger.error(f"{ERROR_STORAGE_READ}: {e}")
            return Cart()

        if not raw:
            return Cart()

        try:
            data = json.loads(raw)
            if not isinstance(data, dict) or not isinstance(data.get("items", []), list):
                raise TypeError("cart record is not an object with an items list")
            cart = Cart.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Corrupted cart data, starting empty: {e}")
            return Cart()

        # Quantity is never below 1 in a live cart; one line per identity
        merged = {}
        for item in cart.items:
            if item.quantity < 1:
                continue
            existing = merged.get(item.identity)
            if existing is None:
                merged[item.identity] = item
            else:
                existing.quantity += item.quantity
        cart.items = list(merged.values())
        return cart

    def save(self, cart: Cart) -> bool:
        try:
            self.store.set(self.key, json.dumps(cart.to_dict(), ensure_ascii=False))
            return True
        except Exception as e:
            logger.error(f"{ERROR_STORAGE_WRITE}: {e}")
            return False
