"""
Collection Renderer

Binds catalog data into page slots. Every render is a full replace: the
canonical wrapper is cleared and rebuilt, duplicate wrappers are hidden and
empty-state placeholders are hidden on every attempt. Carousel slots get a
deferred, best-effort widget refresh afterwards.
"""

from typing import Callable, Iterable, Optional, TypeVar

from bs4 import Tag

from storefront.catalog.models import CatalogEntry
from storefront.catalog.store import CatalogStore
from storefront.config import Settings
from storefront.errors import ERROR_SLOT_NOT_FOUND
from storefront.i18n import accessory_description, display_name, get_text
from storefront.logging import get_logger
from storefront.money import DEFAULT_CURRENCY, display_price
from storefront.scheduler import Scheduler

from . import ordering
from .page import Page, hide, is_hidden, set_style

logger = get_logger(__name__)

T = TypeVar("T")
NodeBuilder = Callable[[T], Optional[Tag]]
WidgetRefresher = Callable[[Tag], None]

# How far up from the accessories slot hidden ancestors are revealed
_REVEAL_DEPTH = 5


class CollectionRenderer:
    """Projects catalog collections into the slots of one page."""

    def __init__(
        self,
        page: Page,
        catalog: CatalogStore,
        settings: Settings,
        scheduler: Optional[Scheduler] = None,
        refresher: Optional[WidgetRefresher] = None,
    ) -> None:
        self.page = page
        self.catalog = catalog
        self.settings = settings
        self.scheduler = scheduler
        self.refresher = refresher

    # ------------------------------------------------------------------
    # Generic slot binding
    # ------------------------------------------------------------------

    def hide_empty_states(self, slot_name: str) -> Optional[Tag]:
        """Hide a slot's placeholders; returns the slot root when present."""
        spec = self.page.slot(slot_name)
        root = self.page.select_one(spec.container)
        if root is None:
            return None
        for placeholder in root.select(spec.empty):
            hide(placeholder)
        return root

    def render_slot(self, slot_name: str, items: Iterable[T], build: NodeBuilder) -> int:
        """
        Replace a slot's children with one node per item.

        Items whose builder returns None (or raises) are skipped. Returns the
        number of nodes attached.
        """
        spec = self.page.slot(slot_name)
        root = self.hide_empty_states(slot_name)
        if root is None:
            logger.warning(f"{ERROR_SLOT_NOT_FOUND}: {slot_name}")
            return 0

        wrappers = root.select(spec.items) or [root]
        target = wrappers[-1]
        for duplicate in wrappers[:-1]:
            hide(duplicate)

        placeholders = set(map(id, root.select(spec.empty)))
        for child in list(target.children):
            if id(child) not in placeholders:
                child.extract()

        rendered = 0
        for item in items:
            try:
                node = build(item)
            except Exception as e:
                logger.warning(f"Skipping malformed item in {slot_name}: {e}")
                continue
            if node is None:
                continue
            target.append(node)
            rendered += 1

        logger.debug(f"Rendered {rendered} nodes into {slot_name}")
        if spec.carousel:
            self._schedule_refresh(slot_name, root)
        return rendered

    def _schedule_refresh(self, slot_name: str, container: Tag) -> None:
        if self.refresher is None:
            return
        if self.scheduler is None:
            self._refresh(container)
            return
        self.scheduler.settle(
            ("refresh", slot_name), self.settings.widget_refresh_delay, self._refresh, container
        )

    def _refresh(self, container: Tag) -> None:
        try:
            self.refresher(container)
        except Exception as e:
            logger.warning(f"Could not refresh slider widget: {e}")

    # ------------------------------------------------------------------
    # Product detail page
    # ------------------------------------------------------------------

    def bind_product_fields(self, product: CatalogEntry) -> None:
        """Write single-value product fields and the main add-to-cart form identity."""
        for el in self.page.bound("product_name"):
            el.string = product.name or ""

        price_text = display_price(product.price, product.currency, get_text("price_default"))
        for el in self.page.bound("price"):
            el.string = price_text

        for el in self.page.bound("variant_label"):
            el.string = product.name or ""

        if product.description:
            for el in self.page.bound("description"):
                el.string = product.description

        if product.dimensions:
            for el in self.page.bound("dimensions"):
                el.string = get_text("size_per_panel", dimensions=product.dimensions)

        for form in self.page.bound("product_form"):
            if product.product_id:
                form["data-product-id"] = product.product_id
            if product.variant_id:
                form["data-variant-id"] = product.variant_id
            form["data-entry-id"] = product.id or product.slug or ""

    def render_gallery(self, product: CatalogEntry) -> int:
        slides = ordering.gallery_slides(product)
        if not slides:
            self.hide_empty_states("gallery")
            logger.warning(f"No images found for product: {product.name}")
            return 0
        return self.render_slot("gallery", slides, self._gallery_node)

    def _gallery_node(self, slide: ordering.GallerySlide) -> Tag:
        node = self.page.new_tag("div", {"class": "gallery-slide", "role": "listitem"})
        node.append(self.page.new_tag("img", {"src": slide.url, "alt": slide.alt, "loading": "lazy"}))
        return node

    def render_variant_selector(self, product: CatalogEntry) -> int:
        """Tiles for every panel product, current one marked active."""
        products = ordering.selector_products(self.catalog.products, self.settings.panel_category)
        products = [p for p in products if ordering.thumbnail_url(p) and p.slug]
        if not products:
            self.hide_empty_states("variant_selector")
            logger.warning("No products found for variant selector")
            return 0
        return self.render_slot(
            "variant_selector",
            enumerate(products, 1),
            lambda pair: self._selector_node(pair[1], product, pair[0], len(products)),
        )

    def render_product_selector(self, product: CatalogEntry) -> int:
        """Desktop product slider with position labels."""
        products = ordering.selector_products(self.catalog.products, self.settings.panel_category)
        products = [p for p in products if ordering.thumbnail_url(p) and p.slug]
        if not products:
            self.hide_empty_states("product_selector")
            logger.warning("No products available for product selector slider")
            return 0
        return self.render_slot(
            "product_selector",
            enumerate(products, 1),
            lambda pair: self._selector_node(pair[1], product, pair[0], len(products)),
        )

    def _selector_node(
        self, entry: CatalogEntry, current: CatalogEntry, position: int, total: int
    ) -> Optional[Tag]:
        thumb = ordering.thumbnail_url(entry)
        if not thumb or not entry.slug:
            return None
        active = entry.slug == current.slug

        slide = self.page.new_tag(
            "div",
            {
                "class": "selector-slide is-active" if active else "selector-slide",
                "role": "group",
                "aria-label": f"{position} / {total}",
            },
        )
        link_attrs = {
            "href": self.settings.product_url(entry.slug),
            "class": "selector-link active" if active else "selector-link",
        }
        if active:
            link_attrs["aria-current"] = "page"
        link = self.page.new_tag("a", link_attrs)
        link.append(
            self.page.new_tag(
                "img", {"src": thumb, "alt": entry.name or "", "width": "95", "loading": "lazy"}
            )
        )
        checkmark = self.page.new_tag("div", {"class": "checkmark"})
        set_style(checkmark, "display", "flex" if active else "none")
        link.append(checkmark)
        slide.append(link)
        return slide

    def render_accessories(self) -> int:
        """Curated accessories next to the product."""
        accessories = ordering.main_accessories(
            self.catalog.accessories, self.settings.main_accessory_ids
        )
        root = self.hide_empty_states("accessories")
        if root is None:
            logger.warning("Accessories container not found")
            return 0
        if not accessories:
            logger.warning("No main accessories found after filtering")
            return 0

        rendered = self.render_slot("accessories", accessories, self._accessory_card)
        self._reveal(root)
        return rendered

    def _accessory_card(self, accessory: CatalogEntry) -> Optional[Tag]:
        if not accessory.main_image:
            return None
        card = self.page.new_tag("div", {"class": "accessory-item", "role": "listitem"})
        card.append(
            self.page.new_tag(
                "img", {"src": accessory.main_image, "alt": accessory.name or "", "loading": "lazy"}
            )
        )
        info = self.page.new_tag("div", {"class": "accessory-info"})
        info.append(self.page.new_tag("h2", text=accessory.name or ""))
        info.append(self.page.new_tag("div", {"class": "accessory-description"}, accessory.description or ""))
        info.append(self.page.new_tag("div", {"class": "accessory-price"}, self._price_label(accessory)))
        card.append(info)
        card.append(self._add_to_cart_form(accessory))
        return card

    def _reveal(self, root: Tag) -> None:
        parent = root.parent
        depth = 0
        while isinstance(parent, Tag) and depth < _REVEAL_DEPTH:
            if parent.name != "[document]" and is_hidden(parent):
                set_style(parent, "display", None)
            parent = parent.parent
            depth += 1

    # ------------------------------------------------------------------
    # Accessories page
    # ------------------------------------------------------------------

    def render_accessories_page(self) -> int:
        """Every accessory of the accessory category, unfiltered by identity."""
        accessories = ordering.page_accessories(
            self.catalog.accessories, self.settings.accessory_category
        )
        if not accessories:
            self.hide_empty_states("accessories_page")
            logger.warning("No accessories data found")
            return 0
        return self.render_slot("accessories_page", accessories, self._accessory_tile)

    def _accessory_tile(self, accessory: CatalogEntry) -> Optional[Tag]:
        if not accessory.main_image:
            return None
        tile = self.page.new_tag("div", {"class": "addon-item", "role": "listitem"})
        wrap = self.page.new_tag("div", {"class": "addon-wrap"})
        set_style(wrap, "background-image", f"url({accessory.main_image})")
        set_style(wrap, "background-size", "cover")
        set_style(wrap, "background-position", "center")

        description = accessory.description or accessory_description(accessory.id)
        wrap.append(self.page.new_tag("div", {"class": "addon-name"}, display_name(accessory.name)))
        wrap.append(self.page.new_tag("div", {"class": "addon-description"}, description))
        wrap.append(self.page.new_tag("div", {"class": "addon-price"}, self._price_label(accessory)))
        wrap.append(self._add_to_cart_form(accessory))
        tile.append(wrap)
        return tile

    # ------------------------------------------------------------------
    # Home page
    # ------------------------------------------------------------------

    def render_home_slider(self) -> int:
        products = ordering.home_products(
            self.catalog.products, self.settings.panel_category, self.settings.home_slider_limit
        )
        if not products:
            self.hide_empty_states("home_slider")
            logger.warning("No products for home slider")
            return 0
        return self.render_slot("home_slider", products, self._home_slide)

    def _home_slide(self, product: CatalogEntry) -> Optional[Tag]:
        if not product.main_image or not product.slug:
            return None
        hover = product.hover_image or product.main_image
        slide = self.page.new_tag("div", {"class": "home-slide", "role": "listitem"})
        link = self.page.new_tag("a", {"href": self.settings.product_url(product.slug), "class": "home-slide-link"})

        images = self.page.new_tag("div", {"class": "home-slide-images"})
        images.append(
            self.page.new_tag("img", {"src": product.main_image, "alt": product.name or "", "loading": "lazy"})
        )
        hover_img = self.page.new_tag(
            "img", {"src": hover, "alt": product.name or "", "loading": "lazy", "class": "hover-image"}
        )
        set_style(hover_img, "opacity", "0")
        images.append(hover_img)
        link.append(images)

        text = self.page.new_tag("div", {"class": "home-slide-text"})
        text.append(self.page.new_tag("h3", text=product.name or ""))
        text.append(self.page.new_tag("h4", text=product.description or ""))
        price = product.price or "€220.00"
        text.append(self.page.new_tag("h3", {"class": "home-slide-price"}, f"{price} {product.currency or DEFAULT_CURRENCY}"))
        link.append(text)

        slide.append(link)
        return slide

    def render_marketing(self) -> None:
        """
        Marketing copy from designated catalog entries.

        Hero text falls back to a fixed default; the slogan is left as authored
        when the entry or field is missing.
        """
        hero_entry = self.catalog.find_product_by_id(self.settings.hero_product_id)
        hero_text = (hero_entry.special_field_text if hero_entry else None) or get_text("hero_default")
        for el in self.page.bound("hero_text"):
            el.string = hero_text

        slogan_entry = self.catalog.find_product_by_id(self.settings.slogan_product_id)
        if slogan_entry and slogan_entry.special_field_slogan:
            for el in self.page.bound("slogan"):
                el.string = slogan_entry.special_field_slogan

        self.rewrite_product_links()

    def rewrite_product_links(self) -> int:
        """Point `data-product-link` anchors at the product page of the named product."""
        rewritten = 0
        for link in self.page.bound("product_link"):
            token = (link.get("data-product-link") or "").lower()
            if not token or link.name != "a":
                continue
            match = next(
                (
                    p for p in self.catalog.products
                    if (p.name or "").lower() == token or (p.id or "").lower() == token
                ),
                None,
            )
            if match and match.slug:
                link["href"] = self.settings.product_url(match.slug)
                rewritten += 1
        return rewritten

    # ------------------------------------------------------------------
    # Shared node parts
    # ------------------------------------------------------------------

    @staticmethod
    def _price_label(entry: CatalogEntry) -> str:
        return f"{entry.price or ''} {entry.currency or DEFAULT_CURRENCY}".strip()

    def _add_to_cart_form(self, entry: CatalogEntry) -> Tag:
        form = self.page.new_tag(
            "form",
            {
                "class": "add-to-cart-form",
                "data-add-to-cart": "accessory",
                "data-product-id": entry.product_id or "",
                "data-variant-id": entry.variant_id or "",
                "data-entry-id": entry.id or "",
            },
        )
        form.append(
            self.page.new_tag("input", {"type": "submit", "class": "add-to-cart-button", "value": get_text("add_to_cart")})
        )
        return form
