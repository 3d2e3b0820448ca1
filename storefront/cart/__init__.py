"""Cart package: models, storage, and controller."""
from .models import Cart, CartItem, short_dimensions
from .service import CartController, CartPresenter
from .storage import CartStore

__all__ = [
    "Cart",
    "CartController",
    "CartItem",
    "CartPresenter",
    "CartStore",
    "short_dimensions",
]
