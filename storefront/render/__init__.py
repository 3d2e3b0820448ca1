"""Render package: page slots, ordering rules, collection and cart rendering."""
from .cart_view import CartView, render_cart_item, render_cart_nodes
from .collections import CollectionRenderer
from .page import BINDINGS, DEFAULT_SLOTS, Page, SlotSpec, hide, is_hidden, show

__all__ = [
    "BINDINGS",
    "CartView",
    "CollectionRenderer",
    "DEFAULT_SLOTS",
    "Page",
    "SlotSpec",
    "hide",
    "is_hidden",
    "render_cart_item",
    "render_cart_nodes",
    "show",
]
