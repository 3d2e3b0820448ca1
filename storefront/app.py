"""
Storefront bootstrap.

Startup order: catalog load -> page population -> cart init -> (after a
short delay) bridge wiring. The catalog load is the only asynchronous step;
a failed load leaves every slot untouched but keeps the cart usable.
"""

from enum import Enum
from typing import Optional

from storefront.bridge import IntegrationBridge
from storefront.cart.service import CartController
from storefront.config import Settings, get_settings
from storefront.context import AppContext, build_context
from storefront.db import KeyValueStore
from storefront.errors import CatalogLoadError
from storefront.logging import get_logger
from storefront.render.collections import WidgetRefresher
from storefront.render.page import Page
from storefront.scheduler import Scheduler

logger = get_logger(__name__)

# Slots whose placeholders are hidden before the product page is populated
PRODUCT_PAGE_SLOTS = ("gallery", "variant_selector", "product_selector", "accessories")


class PageKind(str, Enum):
    PRODUCT = "product"
    ACCESSORIES = "accessories"
    HOME = "home"
    OTHER = "other"


def detect_page_kind(ctx: AppContext) -> PageKind:
    """Classify the page by URL path, then by which slots it exposes."""
    page = ctx.page
    path = page.context.path.lower()
    filename = path.rstrip("/").split("/")[-1] if path.strip("/") else ""

    if (
        "detail_product" in path
        or "product/" in path
        or page.bound_one("product_name") is not None
    ):
        return PageKind.PRODUCT
    if "zubehoer" in path or page.select_one(page.slot("accessories_page").container) is not None:
        return PageKind.ACCESSORIES
    if path == "/" or filename == "" or "index" in filename:
        return PageKind.HOME
    return PageKind.OTHER


class Storefront:
    """Drives one page session."""

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx

    async def start(self, raw_catalog: Optional[bytes] = None) -> bool:
        """Load, populate, init the cart and schedule bridge wiring. Returns whether the catalog loaded."""
        loaded = await self.load_catalog(raw_catalog)
        if loaded:
            self.populate()
        else:
            logger.error("Failed to load catalog, page left unpopulated")

        self.init_cart()

        if self.ctx.scheduler is None:
            self.init_bridge()
        else:
            self.ctx.scheduler.later(self.ctx.settings.bridge_init_delay, self.init_bridge)
        return loaded

    async def load_catalog(self, raw_catalog: Optional[bytes] = None) -> bool:
        catalog = self.ctx.catalog
        source = self.ctx.settings.catalog_url
        try:
            if raw_catalog is not None:
                catalog.load(raw_catalog)
            elif source.startswith(("http://", "https://")):
                await catalog.fetch(source)
            else:
                catalog.load_file(source)
        except CatalogLoadError as e:
            logger.error(f"Error loading catalog: {e}")
            return False
        return True

    def populate(self) -> PageKind:
        kind = detect_page_kind(self.ctx)
        if kind == PageKind.PRODUCT:
            self.populate_product_page()
        elif kind == PageKind.ACCESSORIES:
            self.ctx.renderer.render_accessories_page()
        elif kind == PageKind.HOME:
            self.populate_home_page()
        else:
            logger.info(f"No population for page {self.ctx.page.url}")
        return kind

    def populate_product_page(self) -> None:
        renderer = self.ctx.renderer
        # Placeholders go first so layout is the same with or without data
        for slot_name in PRODUCT_PAGE_SLOTS:
            renderer.hide_empty_states(slot_name)

        product = self.ctx.resolver.resolve_current(self.ctx.page.context)
        if product is None:
            return

        logger.info(f"Populating product page for: {product.name}")
        renderer.bind_product_fields(product)
        renderer.render_gallery(product)
        renderer.render_variant_selector(product)
        renderer.render_product_selector(product)
        renderer.render_accessories()

    def populate_home_page(self) -> None:
        self.ctx.renderer.render_home_slider()
        self.ctx.renderer.render_marketing()

    def init_cart(self) -> CartController:
        """Load the persisted cart and paint the cart slots."""
        if self.ctx.cart is None:
            self.ctx.cart = CartController(self.ctx.catalog, self.ctx.cart_store, self.ctx.view)
        self.ctx.cart.refresh()
        return self.ctx.cart

    def init_bridge(self, retry: bool = True) -> Optional[IntegrationBridge]:
        """
        Bind add-to-cart forms once the cart system is up.

        When the cart is not ready yet one delayed re-check is made.
        """
        if not self.ctx.cart_ready:
            if retry and self.ctx.scheduler is not None:
                logger.warning("Cart integration: cart not ready, retrying once")
                self.ctx.scheduler.later(self.ctx.settings.cart_init_retry_delay, self.init_bridge, False)
            else:
                logger.warning("Cart integration: cart not ready, bridge not wired")
            return None

        bridge = IntegrationBridge(
            self.ctx.cart,
            self.ctx.page,
            self.ctx.settings,
            view=self.ctx.view,
            scheduler=self.ctx.scheduler,
        )
        bridge.bind()
        self.ctx.bridge = bridge
        return bridge


async def run(
    page: Page,
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    raw_catalog: Optional[bytes] = None,
    refresher: Optional[WidgetRefresher] = None,
) -> Storefront:
    """Start a page session on the running loop with deferred callbacks enabled."""
    settings = settings or get_settings()
    ctx = build_context(
        page,
        settings=settings,
        store=store,
        scheduler=Scheduler.from_settings(settings),
        refresher=refresher,
    )
    storefront = Storefront(ctx)
    await storefront.start(raw_catalog)
    return storefront
