"""
Cart presentation.

`render_cart_nodes` is a pure projection of a cart snapshot into detached
nodes; `CartView` puts those nodes into the page's cart slots and keeps the
empty state, total and badges in step.
"""

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from storefront.cart.models import Cart, CartItem
from storefront.i18n import get_text
from storefront.logging import get_logger
from storefront.money import format_price

from .page import Page, hide, show

logger = get_logger(__name__)


def _identity_attrs(item: CartItem) -> dict:
    return {"data-product-id": item.product_id, "data-variant-id": item.variant_id}


def render_cart_item(item: CartItem, soup: Optional[BeautifulSoup] = None) -> Tag:
    """One cart line with quantity controls and a delete link."""
    soup = soup or BeautifulSoup("", "html.parser")
    node = soup.new_tag("div", attrs={"class": "cart-item", **_identity_attrs(item)})

    node.append(soup.new_tag("img", attrs={"src": item.image or "", "alt": item.name or "", "class": "cart-item-image"}))

    info = soup.new_tag("div", attrs={"class": "cart-item-info"})
    name = soup.new_tag("div", attrs={"class": "cart-item-name"})
    name.string = item.name or ""
    info.append(name)

    if item.dimensions:
        option = soup.new_tag("div", attrs={"class": "cart-item-option"})
        option.string = item.dimensions.replace(" x ", "×").strip()
        info.append(option)

    price = soup.new_tag("div", attrs={"class": "cart-item-price"})
    price.string = f"{item.price_display} {item.currency}"
    info.append(price)

    controls = soup.new_tag("div", attrs={"class": "cart-quantity-controls"})
    decrease = soup.new_tag(
        "button", attrs={"type": "button", "class": "cart-qty-btn", "data-action": "decrease", **_identity_attrs(item)}
    )
    decrease.string = "−"
    controls.append(decrease)
    controls.append(
        soup.new_tag(
            "input",
            attrs={
                "type": "number",
                "class": "cart-quantity-input",
                "value": str(item.quantity),
                "min": "1",
                **_identity_attrs(item),
            },
        )
    )
    increase = soup.new_tag(
        "button", attrs={"type": "button", "class": "cart-qty-btn", "data-action": "increase", **_identity_attrs(item)}
    )
    increase.string = "+"
    controls.append(increase)
    info.append(controls)

    delete = soup.new_tag("a", attrs={"href": "#", "class": "cart-delete-link", "data-action": "delete", **_identity_attrs(item)})
    delete.string = get_text("delete")
    info.append(delete)

    node.append(info)
    return node


def render_cart_nodes(cart: Cart, soup: Optional[BeautifulSoup] = None) -> List[Tag]:
    """Nodes for every cart line, in cart order."""
    soup = soup or BeautifulSoup("", "html.parser")
    return [render_cart_item(item, soup) for item in cart.items]


class CartView:
    """CartPresenter over the page's cart slots."""

    def __init__(self, page: Page) -> None:
        self.page = page

    def render_cart(self, cart: Cart) -> None:
        container = self._canonical(self.page.slot("cart_list").container, self.page.bindings["cart_list_alt"])
        if container is None:
            logger.warning("Cart list container not found")
            return

        empty_state = self.page.bound_one("cart_empty")
        cart_form = self.page.bound_one("cart_form")
        if empty_state is not None:
            if cart.is_empty:
                show(empty_state)
                if cart_form is not None:
                    hide(cart_form)
            else:
                hide(empty_state)
                if cart_form is not None:
                    show(cart_form)

        container.clear()
        for node in render_cart_nodes(cart, self.page.soup):
            container.append(node)

        total_el = self._canonical(self.page.bindings["cart_total"], self.page.bindings["cart_total_alt"])
        if total_el is not None:
            total_el.string = format_price(cart.total)

    def _canonical(self, primary: str, alternate: str) -> Optional[Tag]:
        """Primary element when present, else the alternate; a duplicate alternate is hidden."""
        main = self.page.select_one(primary)
        alt = self.page.select_one(alternate)
        if main is not None and alt is not None:
            hide(alt)
        return main if main is not None else alt

    def render_badge(self, count: int) -> None:
        for badge in self.page.bound("cart_badge"):
            badge.string = str(count)

    def open_cart(self) -> None:
        surface = self.page.bound_one("cart_surface")
        if surface is not None:
            show(surface)
