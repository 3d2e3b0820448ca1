"""
Catalog Models - Pydantic schemas for the CMS catalog document

The catalog JSON has three collections (`products`, `samples`,
`accessories`) whose entries share one loose shape. Entries are modelled as a
tagged variant over `EntryKind`; unknown fields are kept so a sample overlay
carries everything the CMS exported.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from storefront.config import SORTING_SENTINEL


class EntryKind(str, Enum):
    """Which catalog collection an entry came from."""
    PRODUCT = "product"
    SAMPLE = "sample"
    ACCESSORY = "accessory"


class CatalogImage(BaseModel):
    """One entry of a product's structured image list."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    url: Optional[str] = None
    sort_order: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("sort_order", "sortOrder")
    )
    type: Optional[str] = None

    @property
    def order(self) -> float:
        """Sort key; missing order sorts as 0."""
        return self.sort_order or 0


class CatalogEntry(BaseModel):
    """Fields common to products, samples and accessories."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    kind: EntryKind = EntryKind.PRODUCT

    id: Optional[str] = None
    slug: Optional[str] = None
    handle: Optional[str] = None
    product_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("productId", "product_id")
    )
    variant_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("variantId", "variant_id")
    )

    name: Optional[str] = None
    price: Optional[str] = None  # preformatted, e.g. "€220.00"
    price_value: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("priceValue", "price_value")
    )
    currency: Optional[str] = None

    dimensions: Optional[str] = None
    size: Optional[str] = None
    alt_text: Optional[str] = None

    main_image: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("mainImage", "main_image")
    )
    hover_image: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("hover_image", "hoverImage")
    )
    selection_slider_image: Optional[str] = None
    images: List[CatalogImage] = Field(default_factory=list)

    category: Optional[str] = None
    sorting: Optional[float] = None
    description: Optional[str] = None

    # Marketing copy
    special_field_text: Optional[str] = None
    special_field_slogan: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("images", mode="before")
    @classmethod
    def _images_or_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def identity(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.product_id, self.variant_id)

    @property
    def sort_rank(self) -> float:
        """`sorting` ascending; entries without a rank go last."""
        return SORTING_SENTINEL if self.sorting is None else self.sorting

    @property
    def is_sample_variant(self) -> bool:
        return self.kind == EntryKind.SAMPLE or "-sample" in (self.id or "")

    def matches_token(self, token: str) -> bool:
        """Slug, alternate handle or id equals the token."""
        return token in (self.slug, self.handle, self.id)

    def explicit_fields(self) -> dict:
        """Fields present in the source document (extras included)."""
        data = self.model_dump()
        keys = set(self.model_fields_set) | set(self.model_extra or {})
        return {key: data[key] for key in keys if key in data}


class Product(CatalogEntry):
    kind: EntryKind = EntryKind.PRODUCT


class Accessory(CatalogEntry):
    kind: EntryKind = EntryKind.ACCESSORY


class Sample(CatalogEntry):
    """A product variant that may point at its parent product."""
    kind: EntryKind = EntryKind.SAMPLE

    parent_product_id: Optional[str] = None


def merge_sample(parent: CatalogEntry, sample: Sample) -> Sample:
    """
    Overlay a sample onto a copy of its parent.

    Every field the sample document declares wins; everything else is taken
    from the parent. Neither input is modified.
    """
    merged = parent.model_dump()
    merged.update(sample.explicit_fields())
    merged["kind"] = EntryKind.SAMPLE
    return Sample.model_validate(merged)


class Catalog(BaseModel):
    """The whole catalog document."""
    model_config = ConfigDict(extra="ignore")

    products: List[Product] = Field(default_factory=list)
    samples: List[Sample] = Field(default_factory=list)
    accessories: List[Accessory] = Field(default_factory=list)

    @field_validator("products", "samples", "accessories", mode="before")
    @classmethod
    def _collection_or_empty(cls, value: Any) -> Any:
        return [] if value is None else value
