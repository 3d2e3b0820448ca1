"""Cart controller: the only writer of cart state."""
from decimal import Decimal
from typing import Optional, Protocol

from storefront.catalog.store import CatalogStore
from storefront.errors import ERROR_INVALID_QUANTITY, ERROR_PRODUCT_NOT_FOUND
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.money import DEFAULT_CURRENCY, format_price

from .models import Cart, CartItem
from .storage import CartStore

logger = get_logger(__name__)


class CartPresenter(Protocol):
    """Surface that shows the cart; re-rendered in full after every mutation."""

    def render_cart(self, cart: Cart) -> None: ...

    def render_badge(self, count: int) -> None: ...


class CartController:
    """
    Mutation API over the session cart.

    The cart is loaded once from the store and kept in memory; every mutation
    runs persist -> cart render -> badge render, synchronously. A failed
    persist is logged by the store and the in-memory cart stays authoritative.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        store: CartStore,
        presenter: Optional[CartPresenter] = None,
    ):
        self.catalog = catalog
        self.store = store
        self.presenter = presenter
        self._cart = store.load()

    @property
    def cart(self) -> Cart:
        """Detached snapshot of the current cart."""
        return self._cart.snapshot()

    def attach(self, presenter: CartPresenter) -> None:
        self.presenter = presenter

    def add_item(self, product_id: str, variant_id: str, quantity: int = 1) -> bool:
        """
        Add a product or bump the quantity of its existing line.

        Returns False without touching the cart when the identity is not in
        the catalog or the quantity is not a positive integer.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            logger.error(f"Cannot add product: {ERROR_INVALID_QUANTITY} (got {quantity!r})")
            return False

        product = self.catalog.find_by_identity(product_id, variant_id)
        if product is None:
            logger.error(
                f"Cannot add product {sanitize_string_for_logging(product_id)}/"
                f"{sanitize_string_for_logging(variant_id)}: {ERROR_PRODUCT_NOT_FOUND}"
            )
            return False

        existing = self._cart.find(product_id, variant_id)
        if existing:
            existing.quantity += quantity
        else:
            item = CartItem.from_product(product, quantity)
            # Cart lines are keyed by the requested identity
            item.product_id, item.variant_id = product_id, variant_id
            self._cart.items.append(item)

        self._commit()
        return True

    def remove_item(self, product_id: str, variant_id: str) -> bool:
        """Drop a line; removing an absent identity is a no-op that still succeeds."""
        self._cart.items = [
            item for item in self._cart.items
            if item.identity != (product_id, variant_id)
        ]
        self._commit()
        return True

    def update_quantity(self, product_id: str, variant_id: str, new_quantity: int) -> bool:
        """
        Overwrite a line's quantity; below 1 removes the line.

        Returns False when the identity is not in the cart.
        """
        item = self._cart.find(product_id, variant_id)
        if item is None:
            return False

        if new_quantity < 1:
            return self.remove_item(product_id, variant_id)

        item.quantity = int(new_quantity)
        self._commit()
        return True

    def count(self) -> int:
        return self._cart.total_items

    def total(self) -> Decimal:
        return self._cart.total

    @staticmethod
    def format_price(value, currency: str = DEFAULT_CURRENCY) -> str:
        return format_price(value, currency)

    def refresh(self) -> None:
        """Render cart and badge without persisting (initial paint, cart open)."""
        self._render()

    def _commit(self) -> None:
        self.store.save(self._cart)
        self._render()

    def _render(self) -> None:
        if self.presenter is None:
            return
        snapshot = self._cart.snapshot()
        try:
            self.presenter.render_cart(snapshot)
            self.presenter.render_badge(snapshot.total_items)
        except Exception:
            logger.exception("Cart render failed")
