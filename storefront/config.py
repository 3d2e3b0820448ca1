"""
Storefront Settings

All tunables come from environment variables with defaults matching the
live page. Components receive a `Settings` instance through the application
context rather than reading the environment themselves.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.environ.get(name)
    if not value:
        return default
    return tuple(part.strip() for part in value.split(",") if part.strip())


# Catalog tokens
PANEL_CATEGORY = "AKUROCK Akustikpaneele"
ACCESSORY_CATEGORY = "AKUROCK Zubehör"
MAIN_ACCESSORY_IDS = ("schrauben-weiss", "wandschrauben-schwarz", "wandkleber")
DEFAULT_PRODUCT_TOKEN = "brush"
HERO_PRODUCT_ID = "brush"
SLOGAN_PRODUCT_ID = "yami"

# Sorting sentinel for entries without a `sorting` rank
SORTING_SENTINEL = 999


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for one page session."""

    # Catalog source
    catalog_url: str = "data/mock-cms-data.json"

    # Cart persistence
    cart_storage_key: str = "stonearts-cart"
    cart_backend: str = "memory"  # memory | file | redis
    cart_file_path: str = ".storefront/storage.json"
    redis_url: str = ""
    redis_token: str = ""

    # Deferred callback delays (seconds)
    widget_refresh_delay: float = 0.1
    cart_open_delay: float = 0.1
    bridge_init_delay: float = 0.3
    cart_init_retry_delay: float = 0.5
    settle_coalesce: bool = True

    # Catalog vocabulary
    panel_category: str = PANEL_CATEGORY
    accessory_category: str = ACCESSORY_CATEGORY
    main_accessory_ids: Tuple[str, ...] = field(default=MAIN_ACCESSORY_IDS)
    default_product_token: str = DEFAULT_PRODUCT_TOKEN
    hero_product_id: str = HERO_PRODUCT_ID
    slogan_product_id: str = SLOGAN_PRODUCT_ID
    home_slider_limit: int = 4
    product_page: str = "detail_product.html"

    def product_url(self, slug: str) -> str:
        return f"{self.product_page}?product={slug}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            catalog_url=os.environ.get("CATALOG_URL", cls.catalog_url),
            cart_storage_key=os.environ.get("CART_STORAGE_KEY", cls.cart_storage_key),
            cart_backend=os.environ.get("CART_BACKEND", cls.cart_backend).lower(),
            cart_file_path=os.environ.get("CART_FILE_PATH", cls.cart_file_path),
            redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
            redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
            widget_refresh_delay=_env_float("WIDGET_REFRESH_DELAY", cls.widget_refresh_delay),
            cart_open_delay=_env_float("CART_OPEN_DELAY", cls.cart_open_delay),
            bridge_init_delay=_env_float("BRIDGE_INIT_DELAY", cls.bridge_init_delay),
            cart_init_retry_delay=_env_float("CART_INIT_RETRY_DELAY", cls.cart_init_retry_delay),
            settle_coalesce=_env_bool("SETTLE_COALESCE", cls.settle_coalesce),
            panel_category=os.environ.get("PANEL_CATEGORY", PANEL_CATEGORY),
            accessory_category=os.environ.get("ACCESSORY_CATEGORY", ACCESSORY_CATEGORY),
            main_accessory_ids=_env_list("MAIN_ACCESSORY_IDS", MAIN_ACCESSORY_IDS),
            default_product_token=os.environ.get("DEFAULT_PRODUCT_TOKEN", DEFAULT_PRODUCT_TOKEN),
            hero_product_id=os.environ.get("HERO_PRODUCT_ID", HERO_PRODUCT_ID),
            slogan_product_id=os.environ.get("SLOGAN_PRODUCT_ID", SLOGAN_PRODUCT_ID),
            home_slider_limit=_env_int("HOME_SLIDER_LIMIT", cls.home_slider_limit),
            product_page=os.environ.get("PRODUCT_PAGE", cls.product_page),
        )


@lru_cache
def get_settings() -> Settings:
    """Settings from the process environment (cached)."""
    return Settings.from_env()
