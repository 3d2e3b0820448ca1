"""
Page document and slot vocabulary.

The page shell is an HTML document; logical slots are located by CSS
selector. The default vocabulary uses neutral `data-slot` / `data-bind`
attributes and can be replaced per page.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from storefront.catalog.resolver import PageContext


@dataclass(frozen=True)
class SlotSpec:
    """
    A named insertion point.

    container: selector for the slot root
    items: selector for candidate item wrappers inside the root; the last
        match is canonical, when none match the root itself is used
    empty: selector for the slot's empty-state placeholder(s)
    carousel: the slot is driven by a slider widget needing a refresh
    """
    name: str
    container: str
    items: str = "[data-slot-items]"
    empty: str = "[data-slot-empty]"
    carousel: bool = False


DEFAULT_SLOTS: Dict[str, SlotSpec] = {
    spec.name: spec
    for spec in (
        SlotSpec("gallery", '[data-slot="image-gallery"]', carousel=True),
        SlotSpec("variant_selector", '[data-slot="variant-selector"]', carousel=True),
        SlotSpec("product_selector", '[data-slot="product-selector"]', carousel=True),
        SlotSpec("accessories", '[data-slot="accessories"]'),
        SlotSpec("accessories_page", '[data-slot="accessories-page"]'),
        SlotSpec("home_slider", '[data-slot="home-slider"]', carousel=True),
        SlotSpec("cart_list", '[data-slot="cart-list"]'),
    )
}

# Single-value field bindings
BINDINGS: Dict[str, str] = {
    "product_name": '[data-bind="product-name"]',
    "price": '[data-bind="price"]',
    "variant_label": '[data-bind="variant-label"]',
    "description": '[data-bind="description"]',
    "dimensions": '[data-bind="dimensions"]',
    "hero_text": '[data-bind="hero-text"]',
    "slogan": '[data-bind="slogan"]',
    "product_link": "[data-product-link]",
    "add_to_cart_form": "form[data-add-to-cart]",
    "product_form": 'form[data-add-to-cart="product"]',
    "quantity_input": 'input[name="quantity"]',
    "cart_empty": '[data-slot="cart-empty"]',
    "cart_form": '[data-slot="cart-form"]',
    "cart_list_alt": '[data-slot="cart-list-alt"]',
    "cart_total": '[data-slot="cart-total"]',
    "cart_total_alt": '[data-slot="cart-total-alt"]',
    "cart_badge": '[data-slot="cart-badge"]',
    "cart_surface": '[data-slot="cart-surface"]',
}


def _parse_style(style: str) -> Dict[str, str]:
    rules = {}
    for declaration in style.split(";"):
        if ":" in declaration:
            prop, value = declaration.split(":", 1)
            rules[prop.strip().lower()] = value.strip()
    return rules


def set_style(tag: Tag, prop: str, value: Optional[str]) -> None:
    """Set (or with None, remove) one inline style property."""
    rules = _parse_style(tag.get("style", ""))
    if value is None:
        rules.pop(prop, None)
    else:
        rules[prop] = value
    if rules:
        tag["style"] = "; ".join(f"{k}: {v}" for k, v in rules.items())
    elif "style" in tag.attrs:
        del tag["style"]


def hide(tag: Tag) -> None:
    set_style(tag, "display", "none")


def show(tag: Tag, display: str = "block") -> None:
    set_style(tag, "display", display)


def is_hidden(tag: Tag) -> bool:
    return _parse_style(tag.get("style", "")).get("display") == "none"


class Page:
    """Parsed page shell plus the URL it is served under."""

    def __init__(
        self,
        html: str | BeautifulSoup,
        url: str = "/",
        slots: Optional[Dict[str, SlotSpec]] = None,
        bindings: Optional[Dict[str, str]] = None,
    ) -> None:
        self.soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "html.parser")
        self.url = url
        self.slots = {**DEFAULT_SLOTS, **(slots or {})}
        self.bindings = {**BINDINGS, **(bindings or {})}

    @classmethod
    def from_file(cls, path: str | Path, url: str = "/", **kwargs) -> "Page":
        return cls(Path(path).read_text(encoding="utf-8"), url=url, **kwargs)

    @property
    def context(self) -> PageContext:
        return PageContext.from_url(self.url)

    def slot(self, name: str) -> SlotSpec:
        return self.slots[name]

    def select(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def bound(self, binding: str) -> List[Tag]:
        """All elements for a field binding."""
        return self.soup.select(self.bindings[binding])

    def bound_one(self, binding: str) -> Optional[Tag]:
        return self.soup.select_one(self.bindings[binding])

    def new_tag(self, name: str, attrs: Optional[dict] = None, text: Optional[str] = None) -> Tag:
        tag = self.soup.new_tag(name, attrs=dict(attrs or {}))
        if text is not None:
            tag.string = text
        return tag

    def html(self) -> str:
        return str(self.soup)
