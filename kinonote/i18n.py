"""
Message catalog for user-facing strings.

Translations live in YAML files under ``locales/``. A catalog is an explicit
object bound to one language; there is no process-wide current language.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"
DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = {"en": "English", "ru": "Русский"}


@lru_cache(maxsize=None)
def load_translations(language: str) -> Dict[str, Any]:
    """Load the translation tree for a language."""
    locale_file = LOCALES_DIR / f"{language}.yaml"
    with open(locale_file, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def supported_languages() -> List[Dict[str, str]]:
    """Return supported languages as code/name pairs."""
    return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES.items()]


class MessageCatalog:
    """Looks up messages by dotted key, e.g. ``utils.unknownMovie``."""

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        if language not in SUPPORTED_LANGUAGES:
            logger.warning(f"Unsupported language '{language}', falling back to {DEFAULT_LANGUAGE}")
            language = DEFAULT_LANGUAGE
        self.language = language
        self.translations = load_translations(language)

    def lookup(self, key: str) -> str:
        """Return the message for ``key``, or the key itself when unknown."""
        value: Any = self.translations
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                logger.warning(f"Translation key not found: {key}")
                return key

        return value if isinstance(value, str) else key

    def lookup_with_params(self, key: str, params: Mapping[str, Any]) -> str:
        """Return the message for ``key`` with ``{name}`` parameters filled in."""
        translation = self.lookup(key)
        for name, value in params.items():
            translation = re.sub(r"\{" + re.escape(str(name)) + r"\}", lambda _m: str(value), translation)
        return translation
