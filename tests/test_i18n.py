"""
Tests for the message catalog.
"""

import pytest

from kinonote.i18n import MessageCatalog, load_translations, supported_languages


class TestMessageCatalog:
    """Lookups by dotted key."""

    def test_lookup(self):
        assert MessageCatalog().lookup("utils.unknownMovie") == "Unknown Movie"
        assert MessageCatalog("ru").lookup("utils.copyPrefix") == "Копия"

    def test_unknown_key_returns_key(self):
        catalog = MessageCatalog()
        assert catalog.lookup("utils.noSuchKey") == "utils.noSuchKey"
        assert catalog.lookup("nothing") == "nothing"

    def test_section_key_returns_key(self):
        assert MessageCatalog().lookup("utils") == "utils"

    def test_lookup_with_params(self):
        message = MessageCatalog().lookup_with_params("errorHandler.unknownStatusError", {"status": 418})
        assert "(code 418)" in message

    def test_params_are_inserted_literally(self):
        message = MessageCatalog().lookup_with_params("provider.nothingFound", {"query": "a\\1 $b"})
        assert message == 'Nothing found for query "a\\1 $b".'

    def test_unsupported_language_falls_back(self):
        catalog = MessageCatalog("de")
        assert catalog.language == "en"
        assert catalog.lookup("utils.copyPrefix") == "Copy"

    def test_catalogs_are_independent(self):
        en, ru = MessageCatalog("en"), MessageCatalog("ru")
        assert en.lookup("cli.tokenValid") != ru.lookup("cli.tokenValid")

    def test_supported_languages(self):
        codes = [language["code"] for language in supported_languages()]
        assert codes == ["en", "ru"]


@pytest.mark.parametrize("language", ["en", "ru"])
def test_locales_define_the_same_keys(language):
    def keys(tree, prefix=""):
        for key, value in tree.items():
            if isinstance(value, dict):
                yield from keys(value, f"{prefix}{key}.")
            else:
                yield f"{prefix}{key}"

    assert set(keys(load_translations(language))) == set(keys(load_translations("en")))
