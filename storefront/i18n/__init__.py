# Static string substitution
from .translations import SUPPORTED_LANGUAGES, accessory_description, display_name, get_text

__all__ = ["SUPPORTED_LANGUAGES", "accessory_description", "display_name", "get_text"]
