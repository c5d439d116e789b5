# tests/test_identifiers.py
"""
Tests for display-name extraction.
"""

import textwrap

from interface_shims import Definition
from interface_shims.identifiers import UNKNOWN_NAME, IdentifierExtractor, extract_declared_name
from tests.fixtures.game.potion import Potion


class Shield:
    pass


class TestExtractDeclaredName:

    def test_first_class_statement(self):
        src = textwrap.dedent("""\
            # @interface
            class CanBlock:
                class Inner:
                    pass
        """)
        assert extract_declared_name(src) == "CanBlock"

    def test_decorated_class(self):
        assert extract_declared_name("@decorate\nclass Wrapped:\n    pass\n") == "Wrapped"

    def test_no_declaration(self):
        assert extract_declared_name("x = 1\n") is None

    def test_class_word_inside_identifier_is_ignored(self):
        assert extract_declared_name("subclass_count = 2\n") is None


class TestIdentifierExtractor:

    def test_name_from_source(self):
        extractor = IdentifierExtractor()
        assert extractor.display_name(Definition(Potion)) == "Potion"

    def test_strict_and_lenient_agree_when_found(self):
        extractor = IdentifierExtractor()
        definition = Definition(Shield)
        assert extractor.display_name(definition, strict=True) == "Shield"
        assert extractor.display_name(definition) == "Shield"

    def test_fallback_to_key_when_no_declaration(self):
        extractor = IdentifierExtractor()
        definition = Definition(Shield)
        definition._source = "shield = object()\n"
        assert extractor.display_name(definition) == definition.key

    def test_strict_returns_empty_when_no_declaration(self):
        extractor = IdentifierExtractor()
        definition = Definition(Shield)
        definition._source = "shield = object()\n"
        assert extractor.display_name(definition, strict=True) == ""
        # a lenient lookup afterwards still gets the fallback
        assert extractor.display_name(definition) == definition.key

    def test_unknown_without_source_and_not_cached(self):
        extractor = IdentifierExtractor()
        definition = Definition(type("SourcelessShield", (), {}))
        assert extractor.display_name(definition) == UNKNOWN_NAME
        assert extractor.display_name(definition, strict=True) == UNKNOWN_NAME
        assert len(extractor) == 0

    def test_cache_hits_are_reported(self):
        hits = []
        extractor = IdentifierExtractor(on_hit=lambda: hits.append(1))
        definition = Definition(Potion)
        extractor.display_name(definition)
        extractor.display_name(definition)
        extractor.display_name(definition, strict=True)
        assert len(hits) == 2
        assert len(extractor) == 1
