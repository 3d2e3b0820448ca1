"""
Storefront Core Module

Client-side catalog binding and persistent cart for a static shop page:
- catalog: catalog document, identity/slug lookups, current-product resolver
- render: page slots, collection ordering and rendering, cart view
- cart: cart models, fail-soft persistence, cart controller
- bridge: page events to cart commands
- app: startup sequence

Note: Imports are lazy so that `storefront.logging` and `storefront.config`
load without pulling in the HTML and HTTP stacks.
"""

__all__ = [
    "AppContext",
    "Storefront",
    "build_context",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "AppContext":
        from storefront.context import AppContext
        return AppContext
    elif name == "build_context":
        from storefront.context import build_context
        return build_context
    elif name == "Storefront":
        from storefront.app import Storefront
        return Storefront
    raise AttributeError(f"module 'storefront' has no attribute '{name}'")
