"""Pytest configuration and fixtures"""
import json
import os

import pytest

# Set test environment variables
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("CART_BACKEND", "memory")

from storefront.catalog import CatalogStore
from storefront.config import Settings
from storefront.db import MemoryStore
from storefront.render import Page

PANEL = "AKUROCK Akustikpaneele"
ACCESSORY = "AKUROCK Zubehör"


@pytest.fixture
def catalog_data():
    """Catalog document with products, samples and accessories"""
    return {
        "products": [
            {
                "id": "brush",
                "slug": "brush",
                "handle": "brush-panel",
                "productId": "p-brush",
                "variantId": "v-brush",
                "name": "Brush",
                "price": "€220.00",
                "priceValue": 220.0,
                "currency": "EUR",
                "dimensions": "240 x 60 x 2 cm (1.44m²)",
                "mainImage": "https://cdn.example/brush.webp",
                "hover_image": "https://cdn.example/brush-hover.webp",
                "images": [
                    {"url": "https://cdn.example/brush-closeup.webp", "sort_order": 3, "type": "closeup"},
                    {"url": "https://cdn.example/brush-panel.webp", "sort_order": 1, "type": "panel"},
                    {"url": "https://cdn.example/brush-install.webp", "type": "installation"},
                ],
                "category": PANEL,
                "sorting": 2,
                "description": "Brushed stone panel",
                "special_field_text": "Stone that listens.",
                "color": "#d9d4cc",
            },
            {
                "id": "yami",
                "slug": "yami",
                "productId": "p-yami",
                "variantId": "v-yami",
                "name": "Yami",
                "price": "€240.00",
                "priceValue": 240.0,
                "currency": "EUR",
                "dimensions": "240 x 60 x 2.3 cm (1.44m²)",
                "mainImage": "https://cdn.example/yami.webp",
                "images": [
                    {"url": "https://cdn.example/yami.webp", "sort_order": 1, "type": "panel"},
                    {"url": "", "sort_order": 2, "type": "broken"},
                ],
                "category": PANEL,
                "sorting": 1,
                "special_field_slogan": "Modern and calm.",
            },
            {
                "id": "whisper",
                "slug": "whisper",
                "productId": "p-whisper",
                "variantId": "v-whisper",
                "name": "Whisper",
                "price": "€230.00",
                "priceValue": 230.0,
                "mainImage": "https://cdn.example/whisper.webp",
                "category": PANEL,
            },
            {
                "id": "gaia",
                "slug": "gaia",
                "productId": "p-gaia",
                "variantId": "v-gaia",
                "name": "Gaia",
                "price": "€250.00",
                "mainImage": "https://cdn.example/gaia.webp",
                "selection_slider_image": "https://cdn.example/gaia-tile.webp",
                "category": PANEL,
                "sorting": 2,
            },
            {
                "id": "brush-sample",
                "slug": "brush-sample-tile",
                "productId": "p-brush-s",
                "variantId": "v-brush-s",
                "name": "Brush Sample",
                "price": "€9.90",
                "mainImage": "https://cdn.example/brush-sample.webp",
                "category": PANEL,
                "sorting": 0,
            },
        ],
        "samples": [
            {
                "id": "yami-sample",
                "slug": "yami-sample",
                "parent_product_id": "yami",
                "productId": "p-yami-s",
                "variantId": "v-yami-s",
                "name": "Yami Sample",
                "price": "€9.90",
                "priceValue": 9.9,
            },
            {
                "id": "orphan-sample",
                "slug": "orphan-sample",
                "parent_product_id": "missing",
                "name": "Orphan Sample",
            },
        ],
        "accessories": [
            {
                "id": "wandkleber",
                "productId": "a-glue",
                "variantId": "av-glue",
                "name": "Wandkleber",
                "price": "€19.90",
                "priceValue": 19.9,
                "mainImage": "https://cdn.example/glue.webp",
                "category": ACCESSORY,
                "sorting": 3,
            },
            {
                "id": "schrauben-weiss",
                "productId": "a-screw-w",
                "variantId": "av-screw-w",
                "name": "Schrauben weiß",
                "price": "€12.00",
                "priceValue": 12.0,
                "mainImage": "https://cdn.example/screws-white.webp",
                "category": ACCESSORY,
                "sorting": 1,
            },
            {
                "id": "kartuschenpresse",
                "productId": "a-press",
                "variantId": "av-press",
                "name": "Kartuschenpresse",
                "price": "€15.00",
                "mainImage": "https://cdn.example/press.webp",
                "category": ACCESSORY,
                "sorting": 2,
            },
            {
                "id": "wandschrauben-schwarz",
                "productId": "a-screw-b",
                "variantId": "av-screw-b",
                "name": "Schrauben schwarz",
                "price": "€12.00",
                "description": "Black wall screws",
                "mainImage": "https://cdn.example/screws-black.webp",
                "category": ACCESSORY,
            },
            {
                "id": "felt-swatch",
                "productId": "a-felt",
                "variantId": "av-felt",
                "name": "Felt swatch",
                "price": "€0.00",
                "mainImage": "https://cdn.example/felt.webp",
                "category": "AKUROCK Muster",
                "sorting": 1,
            },
        ],
    }


@pytest.fixture
def catalog_bytes(catalog_data):
    return json.dumps(catalog_data).encode("utf-8")


@pytest.fixture
def catalog_store(catalog_bytes):
    """Loaded catalog store"""
    store = CatalogStore()
    store.load(catalog_bytes)
    return store


@pytest.fixture
def settings():
    """Settings with short delays for async tests"""
    return Settings(
        widget_refresh_delay=0.01,
        cart_open_delay=0.01,
        bridge_init_delay=0.01,
        cart_init_retry_delay=0.01,
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


PRODUCT_PAGE_HTML = """
<html><body>
  <h1 data-bind="product-name">Placeholder</h1>
  <div data-bind="price">€0.00 EUR</div>
  <div data-bind="variant-label"></div>
  <p data-bind="description">Old description</p>
  <div data-bind="dimensions"></div>
  <form data-add-to-cart="product" data-product-id="" data-variant-id="">
    <input name="quantity" type="number" value="2">
    <input type="submit" value="Add to Cart">
  </form>

  <div data-slot="image-gallery">
    <div data-slot-items class="legacy"><div class="hardcoded">old slide</div></div>
    <div data-slot-items></div>
    <div data-slot-empty>No images</div>
  </div>
  <div data-slot="variant-selector">
    <div data-slot-items></div>
    <div data-slot-empty>No variants</div>
  </div>
  <div data-slot="product-selector"><div data-slot-items></div></div>
  <section class="accessories-section" style="display: none">
    <div data-slot="accessories">
      <div data-slot-items><div class="hardcoded">old accessory</div></div>
      <div data-slot-empty>No accessories</div>
    </div>
  </section>

  <div data-slot="cart-surface" style="display: none">
    <div data-slot="cart-empty">Your cart is empty</div>
    <form data-slot="cart-form">
      <div data-slot="cart-list"></div>
      <div data-slot="cart-total"></div>
    </form>
  </div>
  <span data-slot="cart-badge">0</span>
  <span data-slot="cart-badge">0</span>
</body></html>
"""

HOME_PAGE_HTML = """
<html><body>
  <h1 data-bind="hero-text">Authored hero</h1>
  <p data-bind="slogan">Authored slogan</p>
  <a data-product-link="Yami" href="#">Yami</a>
  <a data-product-link="gaia" href="#">Gaia</a>
  <div data-product-link="Brush">not a link</div>
  <div data-slot="home-slider">
    <div data-slot-items style="display: flex"></div>
    <div data-slot-items></div>
    <div data-slot-empty>Nothing here</div>
  </div>
  <div data-slot="cart-list"></div>
  <span data-slot="cart-badge">0</span>
</body></html>
"""

ACCESSORIES_PAGE_HTML = """
<html><body>
  <div data-slot="accessories-page">
    <div data-slot-items><div class="hardcoded">old</div></div>
    <div data-slot-empty>No accessories</div>
  </div>
  <div data-slot="cart-list"></div>
  <span data-slot="cart-badge">0</span>
</body></html>
"""


@pytest.fixture
def product_page():
    return Page(PRODUCT_PAGE_HTML, url="/detail_product.html?product=brush")


@pytest.fixture
def home_page():
    return Page(HOME_PAGE_HTML, url="/index.html")


@pytest.fixture
def accessories_page():
    return Page(ACCESSORIES_PAGE_HTML, url="/zubehoer.html")
