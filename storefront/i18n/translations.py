"""Static string substitution tables"""

from typing import Any

SUPPORTED_LANGUAGES = {
    "en": "English",
}

DEFAULT_LANGUAGE = "en"

# Catalog names are authored in German; the storefront displays English.
_DISPLAY_NAMES: dict[str, dict[str, str]] = {
    "en": {
        "Schrauben weiß": "Screws white",
        "Schrauben schwarz": "Screws black",
        "Wandkleber": "Wall glue",
        "Kartuschenpresse": "Cartridge press",
        "Lattenschrauben": "Slatted screws",
        "Nano-Versiegelung": "Nano-sealing",
        "Acoustic Felt": "Acoustic Felt",
    },
}

# Pack-size descriptions for accessories lacking a catalog description, by accessory id
_ACCESSORY_DESCRIPTIONS: dict[str, dict[str, str]] = {
    "en": {
        "schrauben-weiss": "50 pcs.",
        "wandschrauben-schwarz": "50 pcs.",
        "wandkleber": "470g cartridge / 1 panel",
        "kartuschenpresse": "1 pc.",
        "lattenschrauben": "50 pcs.",
        "nano-versiegelung": "250ml",
        "acoustic-felt": "60% Upcycled Pet Polyester",
    },
}

_TEXTS: dict[str, dict[str, str]] = {
    "en": {
        "hero_default": "More than just an acoustic panel, a symphony of stone and design.",
        "price_default": "€220.00 EUR",
        "size_per_panel": "Size per panel - {dimensions}",
        "add_to_cart": "Add to Cart",
        "delete": "Delete",
    },
}


def get_text(key: str, lang: str = DEFAULT_LANGUAGE, default: str | None = None, **kwargs: Any) -> str:
    """
    Get a fixed UI string by key.

    Args:
        key: Text key (e.g., "hero_default")
        lang: Language code
        default: Returned when key is unknown (instead of the key itself)
        **kwargs: Variables to format into the string
    """
    table = _TEXTS.get(lang) or _TEXTS[DEFAULT_LANGUAGE]
    text = table.get(key)
    if text is None:
        return default if default is not None else key
    if kwargs:
        try:
            return text.format(**kwargs)
        except (KeyError, IndexError):
            return text
    return text


def display_name(name: str | None, lang: str = DEFAULT_LANGUAGE) -> str:
    """Translated display name, or the catalog name unchanged."""
    if not name:
        return ""
    return _DISPLAY_NAMES.get(lang, {}).get(name, name)


def accessory_description(accessory_id: str | None, lang: str = DEFAULT_LANGUAGE) -> str:
    """Fallback description for an accessory id ("" when none)."""
    if not accessory_id:
        return ""
    return _ACCESSORY_DESCRIPTIONS.get(lang, {}).get(accessory_id, "")
