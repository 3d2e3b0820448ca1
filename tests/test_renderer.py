"""
Tests for CollectionRenderer slot binding
"""

import json
from unittest.mock import Mock

import pytest

from storefront.catalog import CatalogStore, Product
from storefront.render import CollectionRenderer, Page, SlotSpec, is_hidden


@pytest.fixture
def renderer(product_page, catalog_store, settings):
    return CollectionRenderer(product_page, catalog_store, settings)


@pytest.fixture
def brush(catalog_store):
    return catalog_store.find_product_by_id("brush")


def canonical(page, slot_name):
    """Last item wrapper of a slot."""
    spec = page.slot(slot_name)
    return page.select_one(spec.container).select(spec.items)[-1]


class TestRenderSlot:
    """Tests for the generic slot replace."""

    def test_gallery_replaces_canonical_wrapper(self, renderer, product_page, brush):
        rendered = renderer.render_gallery(brush)

        target = canonical(product_page, "gallery")
        images = [img["src"] for img in target.select("img")]
        assert rendered == 4
        assert images[0] == "https://cdn.example/brush.webp"
        assert len(images) == 4

    def test_legacy_wrapper_hidden(self, renderer, product_page, brush):
        renderer.render_gallery(brush)

        legacy = product_page.select_one('[data-slot="image-gallery"] .legacy')
        assert is_hidden(legacy)
        assert legacy.select_one(".hardcoded") is not None

    def test_empty_state_hidden(self, renderer, product_page, brush):
        renderer.render_gallery(brush)

        empty = product_page.select_one('[data-slot="image-gallery"] [data-slot-empty]')
        assert is_hidden(empty)

    def test_rerender_replaces(self, renderer, product_page, brush):
        """Rendering twice yields the same nodes, not duplicates."""
        renderer.render_gallery(brush)
        first = str(canonical(product_page, "gallery"))
        renderer.render_gallery(brush)

        assert str(canonical(product_page, "gallery")) == first
        assert len(canonical(product_page, "gallery").select(".gallery-slide")) == 4

    def test_empty_gallery_hides_placeholder(self, renderer, product_page):
        assert renderer.render_gallery(Product(name="Bare")) == 0

        empty = product_page.select_one('[data-slot="image-gallery"] [data-slot-empty]')
        assert is_hidden(empty)

    def test_missing_slot(self, catalog_store, settings):
        renderer = CollectionRenderer(Page("<div></div>"), catalog_store, settings)
        assert renderer.render_slot("gallery", [1, 2], lambda item: None) == 0

    def test_malformed_item_skipped(self, renderer, product_page):
        def build(item):
            if item == "bad":
                raise ValueError("broken entry")
            return product_page.new_tag("span", text=item)

        assert renderer.render_slot("accessories", ["a", "bad", "b"], build) == 2
        assert [s.string for s in canonical(product_page, "accessories").select("span")] == ["a", "b"]

    def test_slot_root_used_without_wrappers(self, catalog_store, settings):
        page = Page('<div data-slot="accessories"><p>old</p></div>')
        renderer = CollectionRenderer(page, catalog_store, settings)

        renderer.render_slot("accessories", ["x"], lambda item: page.new_tag("span", text=item))

        root = page.select_one('[data-slot="accessories"]')
        assert root.select_one("p") is None
        assert root.select_one("span").string == "x"

    def test_custom_slot_vocabulary(self, catalog_store, settings, brush):
        page = Page(
            '<ul class="gallery-list"></ul>',
            slots={"gallery": SlotSpec("gallery", ".gallery-list", items="li.wrap")},
        )
        renderer = CollectionRenderer(page, catalog_store, settings)

        assert renderer.render_gallery(brush) == 4
        assert len(page.select(".gallery-list img")) == 4


class TestWidgetRefresh:
    """Tests for the deferred slider refresh."""

    def test_immediate_refresh_without_scheduler(self, product_page, catalog_store, settings, brush):
        refresher = Mock()
        renderer = CollectionRenderer(product_page, catalog_store, settings, refresher=refresher)

        renderer.render_gallery(brush)

        refresher.assert_called_once_with(product_page.select_one('[data-slot="image-gallery"]'))

    def test_refresh_failure_swallowed(self, product_page, catalog_store, settings, brush):
        refresher = Mock(side_effect=RuntimeError("slider gone"))
        renderer = CollectionRenderer(product_page, catalog_store, settings, refresher=refresher)

        assert renderer.render_gallery(brush) == 4

    def test_refresh_settled_through_scheduler(self, product_page, catalog_store, settings, brush):
        scheduler = Mock()
        renderer = CollectionRenderer(
            product_page, catalog_store, settings, scheduler=scheduler, refresher=Mock()
        )

        renderer.render_gallery(brush)

        key, delay = scheduler.settle.call_args.args[:2]
        assert key == ("refresh", "gallery")
        assert delay == settings.widget_refresh_delay

    def test_non_carousel_slot_not_refreshed(self, product_page, catalog_store, settings):
        refresher = Mock()
        renderer = CollectionRenderer(product_page, catalog_store, settings, refresher=refresher)

        renderer.render_accessories()

        refresher.assert_not_called()


class TestProductFields:
    """Tests for single-value product bindings."""

    def test_bind_fields(self, renderer, product_page, brush):
        renderer.bind_product_fields(brush)

        assert product_page.bound_one("product_name").string == "Brush"
        assert product_page.bound_one("price").string == "€220.00 EUR"
        assert product_page.bound_one("variant_label").string == "Brush"
        assert product_page.bound_one("description").string == "Brushed stone panel"
        assert product_page.bound_one("dimensions").string == "Size per panel - 240 x 60 x 2 cm (1.44m²)"

    def test_form_identity(self, renderer, product_page, brush):
        renderer.bind_product_fields(brush)

        form = product_page.bound_one("product_form")
        assert form["data-product-id"] == "p-brush"
        assert form["data-variant-id"] == "v-brush"
        assert form["data-entry-id"] == "brush"

    def test_missing_optional_fields_keep_authored_text(self, renderer, product_page, catalog_store):
        renderer.bind_product_fields(catalog_store.find_product_by_id("gaia"))

        assert product_page.bound_one("description").string == "Old description"
        assert product_page.bound_one("price").string == "€250.00 EUR"

    def test_price_default(self, renderer, product_page):
        renderer.bind_product_fields(Product(name="Unpriced"))
        assert product_page.bound_one("price").string == "€220.00 EUR"


class TestSelectors:
    """Tests for variant and product selector tiles."""

    def test_variant_selector(self, renderer, product_page, brush):
        assert renderer.render_variant_selector(brush) == 4

        slides = canonical(product_page, "variant_selector").select(".selector-slide")
        assert [s["aria-label"] for s in slides] == ["1 / 4", "2 / 4", "3 / 4", "4 / 4"]
        active = [s for s in slides if "is-active" in s["class"]]
        assert len(active) == 1
        link = active[0].select_one("a")
        assert link["href"] == "detail_product.html?product=brush"
        assert link["aria-current"] == "page"

    def test_selector_uses_slider_image(self, renderer, product_page, brush):
        renderer.render_product_selector(brush)

        sources = [img["src"] for img in product_page.select('[data-slot="product-selector"] img')]
        assert "https://cdn.example/gaia-tile.webp" in sources
        assert "https://cdn.example/brush-sample.webp" not in sources

    def test_checkmark_only_on_active(self, renderer, product_page, brush):
        renderer.render_variant_selector(brush)

        marks = product_page.select('[data-slot="variant-selector"] .checkmark')
        assert sum(not is_hidden(mark) for mark in marks) == 1

    def test_labels_count_only_rendered_tiles(self, product_page, catalog_data, settings):
        """Panels without an image or slug do not inflate the position labels."""
        catalog_data["products"].append({"id": "bare", "slug": "bare", "name": "Bare", "category": "AKUROCK Akustikpaneele"})
        catalog_data["products"].append({"id": "nameless", "mainImage": "https://cdn.example/x.webp", "category": "AKUROCK Akustikpaneele"})
        store = CatalogStore()
        store.load(json.dumps(catalog_data).encode("utf-8"))
        renderer = CollectionRenderer(product_page, store, settings)

        assert renderer.render_product_selector(store.find_product_by_id("brush")) == 4

        slides = canonical(product_page, "product_selector").select(".selector-slide")
        assert [s["aria-label"] for s in slides] == ["1 / 4", "2 / 4", "3 / 4", "4 / 4"]


class TestAccessories:
    """Tests for product-page and accessories-page rendering."""

    def test_allow_list(self, renderer, product_page):
        assert renderer.render_accessories() == 3

        names = [h.string for h in product_page.select('[data-slot="accessories"] h2')]
        assert names == ["Schrauben weiß", "Wandkleber", "Schrauben schwarz"]

    def test_hidden_ancestor_revealed(self, renderer, product_page):
        renderer.render_accessories()
        assert not is_hidden(product_page.select_one(".accessories-section"))

    def test_visible_ancestor_display_kept(self, catalog_store, settings):
        page = Page(
            '<div class="grid" style="display: flex">'
            '<section style="display: none">'
            '<div data-slot="accessories"><div data-slot-items></div></div>'
            '</section></div>'
        )

        assert CollectionRenderer(page, catalog_store, settings).render_accessories() == 3

        assert "display: flex" in page.select_one(".grid")["style"]
        assert not is_hidden(page.select_one("section"))

    def test_accessory_form(self, renderer, product_page):
        renderer.render_accessories()

        form = product_page.select_one('[data-slot="accessories"] form')
        assert form["data-add-to-cart"] == "accessory"
        assert form["data-product-id"] == "a-screw-w"
        assert form["data-variant-id"] == "av-screw-w"
        assert form.select_one('input[type="submit"]')["value"] == "Add to Cart"

    def test_accessories_page_translations(self, accessories_page, catalog_store, settings):
        renderer = CollectionRenderer(accessories_page, catalog_store, settings)

        assert renderer.render_accessories_page() == 4

        names = [n.string for n in accessories_page.select(".addon-name")]
        descriptions = [d.string for d in accessories_page.select(".addon-description")]
        assert names == ["Screws white", "Cartridge press", "Wall glue", "Screws black"]
        assert descriptions == ["50 pcs.", "1 pc.", "470g cartridge / 1 panel", "Black wall screws"]
        assert accessories_page.select_one(".hardcoded") is None

    def test_accessories_page_background(self, accessories_page, catalog_store, settings):
        CollectionRenderer(accessories_page, catalog_store, settings).render_accessories_page()

        wrap = accessories_page.select_one(".addon-wrap")
        assert "background-image: url(https://cdn.example/screws-white.webp)" in wrap["style"]


class TestHomePage:
    """Tests for the home slider and marketing copy."""

    @pytest.fixture
    def home_renderer(self, home_page, catalog_store, settings):
        return CollectionRenderer(home_page, catalog_store, settings)

    def test_home_slider_limit(self, home_renderer, home_page):
        assert home_renderer.render_home_slider() == 4

        wrappers = home_page.select('[data-slot="home-slider"] [data-slot-items]')
        assert is_hidden(wrappers[0])
        assert len(wrappers[1].select(".home-slide")) == 4

    def test_home_slide_content(self, home_renderer, home_page):
        home_renderer.render_home_slider()

        slide = home_page.select(".home-slide")[1]
        assert slide.select_one("a")["href"] == "detail_product.html?product=yami"
        hover = slide.select_one("img.hover-image")
        assert hover["src"] == "https://cdn.example/yami.webp"
        assert "opacity: 0" in hover["style"]
        assert slide.select_one(".home-slide-price").string == "€240.00 EUR"

    def test_marketing_copy(self, home_renderer, home_page):
        home_renderer.render_marketing()

        assert home_page.bound_one("hero_text").string == "Stone that listens."
        assert home_page.bound_one("slogan").string == "Modern and calm."

    def test_marketing_defaults(self, home_page, settings):
        store = CatalogStore()
        store.load(b'{"products": [{"id": "brush"}]}')
        CollectionRenderer(home_page, store, settings).render_marketing()

        assert home_page.bound_one("hero_text").string.startswith("More than just an acoustic panel")
        assert home_page.bound_one("slogan").string == "Authored slogan"

    def test_product_links(self, home_renderer, home_page):
        assert home_renderer.rewrite_product_links() == 2

        links = home_page.select("a[data-product-link]")
        assert [a["href"] for a in links] == [
            "detail_product.html?product=yami",
            "detail_product.html?product=gaia",
        ]
        assert not home_page.select_one("div[data-product-link]").has_attr("href")
