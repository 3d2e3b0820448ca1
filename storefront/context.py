"""
Application context.

Built once per page session and handed to every component; nothing looks up
the catalog or the cart through module globals.
"""

from dataclasses import dataclass
from typing import Optional

from storefront.bridge import IntegrationBridge
from storefront.cart.service import CartController
from storefront.cart.storage import CartStore
from storefront.catalog.resolver import ProductResolver
from storefront.catalog.store import CatalogStore
from storefront.config import Settings, get_settings
from storefront.db import KeyValueStore, get_store
from storefront.render.cart_view import CartView
from storefront.render.collections import CollectionRenderer, WidgetRefresher
from storefront.render.page import Page
from storefront.scheduler import Scheduler


@dataclass
class AppContext:
    settings: Settings
    page: Page
    catalog: CatalogStore
    resolver: ProductResolver
    renderer: CollectionRenderer
    cart_store: CartStore
    view: CartView
    scheduler: Optional[Scheduler] = None
    # Set during startup, in this order
    cart: Optional[CartController] = None
    bridge: Optional[IntegrationBridge] = None

    @property
    def cart_ready(self) -> bool:
        return self.cart is not None


def build_context(
    page: Page,
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    scheduler: Optional[Scheduler] = None,
    refresher: Optional[WidgetRefresher] = None,
) -> AppContext:
    """Wire the session's components; the cart and bridge are attached at startup."""
    settings = settings or get_settings()
    catalog = CatalogStore()
    return AppContext(
        settings=settings,
        page=page,
        catalog=catalog,
        resolver=ProductResolver(catalog, default_token=settings.default_product_token),
        renderer=CollectionRenderer(page, catalog, settings, scheduler=scheduler, refresher=refresher),
        cart_store=CartStore(store if store is not None else get_store(settings), settings.cart_storage_key),
        view=CartView(page),
        scheduler=scheduler,
    )
