"""
Integration Bridge - page events to cart commands

Page interactions are translated into `CartCommand`s and dispatched through
a fixed action table to the CartController, so the cart state machine can be
driven without any event wiring.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from bs4 import Tag

from storefront.cart.service import CartController
from storefront.config import Settings
from storefront.errors import ERROR_MISSING_IDENTITY
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.render.cart_view import CartView
from storefront.render.page import Page
from storefront.scheduler import Scheduler

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

QUANTITY_INPUT_CLASS = "cart-quantity-input"


class CartAction(str, Enum):
    """Cart commands the page can issue."""
    INCREASE = "increase"
    DECREASE = "decrease"
    DELETE = "delete"
    QUANTITY_CHANGED = "quantity_changed"
    SUBMIT_ADD_TO_CART = "submit_add_to_cart"


# Actions reachable through a clicked `data-action` control
CLICK_ACTIONS = (CartAction.INCREASE, CartAction.DECREASE, CartAction.DELETE)


@dataclass(frozen=True)
class CartCommand:
    action: CartAction
    product_id: Optional[str]
    variant_id: Optional[str]
    quantity: Optional[int] = None


def parse_quantity(value, default: Optional[int] = 1) -> Optional[int]:
    """
    Leading-integer parse of a quantity field.

    "3" -> 3, "2 pcs" -> 2; absent or non-numeric -> default.
    """
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else default


class IntegrationBridge:
    """Wires add-to-cart forms and cart controls to the CartController."""

    def __init__(
        self,
        controller: CartController,
        page: Page,
        settings: Settings,
        view: Optional[CartView] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.controller = controller
        self.page = page
        self.settings = settings
        self.view = view
        self.scheduler = scheduler
        self.bound_forms: List[Tag] = []
        self._handlers: Dict[CartAction, Callable[[CartCommand], bool]] = {
            CartAction.INCREASE: self._increase,
            CartAction.DECREASE: self._decrease,
            CartAction.DELETE: self._delete,
            CartAction.QUANTITY_CHANGED: self._quantity_changed,
            CartAction.SUBMIT_ADD_TO_CART: self._submit,
        }

    def bind(self) -> int:
        """Take over every add-to-cart form on the page; rebinding replaces earlier bindings."""
        self.bound_forms = self.page.bound("add_to_cart_form")
        for form in self.bound_forms:
            form["data-cart-bound"] = "true"
        logger.info(f"Bound {len(self.bound_forms)} add-to-cart forms")
        return len(self.bound_forms)

    def dispatch(self, command: CartCommand) -> bool:
        if not command.product_id or not command.variant_id:
            logger.error(f"Cart integration: {ERROR_MISSING_IDENTITY} for {command.action.value}")
            return False
        return self._handlers[command.action](command)

    # ------------------------------------------------------------------
    # Page events
    # ------------------------------------------------------------------

    def handle_submit(self, form: Tag) -> bool:
        """Add-to-cart form submission."""
        quantity_input = form.select_one(self.page.bindings["quantity_input"])
        quantity = parse_quantity(quantity_input.get("value") if quantity_input else None)
        if quantity is None or quantity < 1:
            quantity = 1
        return self.dispatch(
            CartCommand(
                CartAction.SUBMIT_ADD_TO_CART,
                form.get("data-product-id"),
                form.get("data-variant-id"),
                quantity,
            )
        )

    def handle_click(self, target: Tag) -> bool:
        """Delegated click: nearest element carrying a known `data-action`."""
        control = target if target.has_attr("data-action") else target.find_parent(attrs={"data-action": True})
        if control is None:
            return False
        try:
            action = CartAction(control["data-action"])
        except ValueError:
            return False
        if action not in CLICK_ACTIONS:
            return False
        return self.dispatch(
            CartCommand(action, control.get("data-product-id"), control.get("data-variant-id"))
        )

    def handle_change(self, target: Tag) -> bool:
        """Direct edit of a cart quantity field."""
        if QUANTITY_INPUT_CLASS not in target.get_attribute_list("class"):
            return False
        quantity = parse_quantity(target.get("value"), default=None)
        return self.dispatch(
            CartCommand(
                CartAction.QUANTITY_CHANGED,
                target.get("data-product-id"),
                target.get("data-variant-id"),
                quantity,
            )
        )

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------

    def _submit(self, command: CartCommand) -> bool:
        added = self.controller.add_item(command.product_id, command.variant_id, command.quantity or 1)
        if added:
            self._schedule_open()
        return added

    def _increase(self, command: CartCommand) -> bool:
        item = self.controller.cart.find(command.product_id, command.variant_id)
        if item is None:
            return False
        return self.controller.update_quantity(command.product_id, command.variant_id, item.quantity + 1)

    def _decrease(self, command: CartCommand) -> bool:
        item = self.controller.cart.find(command.product_id, command.variant_id)
        if item is None:
            return False
        if item.quantity > 1:
            return self.controller.update_quantity(command.product_id, command.variant_id, item.quantity - 1)
        return self.controller.remove_item(command.product_id, command.variant_id)

    def _delete(self, command: CartCommand) -> bool:
        return self.controller.remove_item(command.product_id, command.variant_id)

    def _quantity_changed(self, command: CartCommand) -> bool:
        if command.quantity is None:
            logger.warning(
                f"Ignoring non-numeric quantity for {sanitize_string_for_logging(command.product_id)}"
            )
            self.controller.refresh()
            return False
        return self.controller.update_quantity(command.product_id, command.variant_id, command.quantity)

    def _schedule_open(self) -> None:
        if self.view is None:
            return
        if self.scheduler is None:
            self.view.open_cart()
            return
        self.scheduler.settle("cart-open", self.settings.cart_open_delay, self.view.open_cart)
