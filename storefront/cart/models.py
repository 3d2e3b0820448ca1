"""Cart models with Decimal-based pricing."""
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import List, Optional, Tuple

from storefront.catalog.models import CatalogEntry
from storefront.money import DEFAULT_CURRENCY, parse_price_text, to_decimal, to_float

_AREA_SUFFIX = re.compile(r"\(.*?\)")
_DECIMAL_MEASURE = re.compile(r" x \d+\.\d+ x \d+\.\d+ cm")
_INTEGER_MEASURE = re.compile(r" x \d+ x \d+ cm")


def short_dimensions(text: Optional[str]) -> str:
    """
    Short display form of a dimensions text.

    "240 x 60 x 2 cm (1.44m²)" -> "240"; when stripping the measurement
    suffix leaves nothing, the area-stripped text is kept.
    """
    display = _AREA_SUFFIX.sub("", text or "").strip()
    short = _INTEGER_MEASURE.sub("", _DECIMAL_MEASURE.sub("", display)).strip()
    return short or display


@dataclass
class CartItem:
    """Single cart line: a snapshot of the product taken when it was added."""
    product_id: str
    variant_id: str
    name: str
    price: Decimal
    quantity: int = 1
    product_slug: str = ""
    price_display: str = ""
    currency: str = DEFAULT_CURRENCY
    image: str = ""
    dimensions: str = ""

    def __post_init__(self):
        self.price = to_decimal(self.price)
        self.quantity = int(self.quantity)

    @property
    def identity(self) -> Tuple[str, str]:
        return (self.product_id, self.variant_id)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_product(cls, product: CatalogEntry, quantity: int = 1) -> "CartItem":
        """Capture the display fields of a catalog entry."""
        price = (
            to_decimal(product.price_value)
            if product.price_value
            else parse_price_text(product.price)
        )
        first_image = next((img.url for img in product.images if img.url), "")
        return cls(
            product_id=product.product_id or "",
            variant_id=product.variant_id or "",
            product_slug=product.slug or product.id or "",
            name=product.name or "",
            price=price,
            price_display=product.price or f"€{to_float(product.price_value or 0):g}.00",
            currency=product.currency or DEFAULT_CURRENCY,
            image=product.main_image or first_image or "",
            dimensions=short_dimensions(product.dimensions or product.size or product.alt_text),
            quantity=quantity,
        )

    def to_dict(self) -> dict:
        """Persisted record shape."""
        return {
            "productId": self.product_id,
            "variantId": self.variant_id,
            "productSlug": self.product_slug,
            "name": self.name,
            "price": to_float(self.price),
            "priceDisplay": self.price_display,
            "currency": self.currency,
            "image": self.image,
            "dimensions": self.dimensions,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        return cls(
            product_id=data["productId"],
            variant_id=data["variantId"],
            product_slug=data.get("productSlug", ""),
            name=data.get("name", ""),
            price=to_decimal(data.get("price", 0)),
            price_display=data.get("priceDisplay", ""),
            currency=data.get("currency", DEFAULT_CURRENCY),
            image=data.get("image", ""),
            dimensions=data.get("dimensions", ""),
            quantity=int(data["quantity"]),
        )


@dataclass
class Cart:
    """Ordered cart lines, insertion order preserved."""
    items: List[CartItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_items(self) -> int:
        """Sum of quantities."""
        return sum(item.quantity for item in self.items)

    @property
    def total(self) -> Decimal:
        """Sum of price x quantity at add-time prices."""
        return sum((item.line_total for item in self.items), Decimal("0"))

    def find(self, product_id: str, variant_id: str) -> Optional[CartItem]:
        return next(
            (item for item in self.items if item.identity == (product_id, variant_id)),
            None,
        )

    def snapshot(self) -> "Cart":
        """Detached copy for renderers."""
        return Cart(items=[replace(item) for item in self.items])

    def to_dict(self) -> dict:
        return {"items": [item.to_dict() for item in self.items]}

    @classmethod
    def from_dict(cls, data: dict) -> "Cart":
        return cls(items=[CartItem.from_dict(item) for item in data.get("items", [])])
