# tests/test_names.py
"""
Tests for the Name Registry.
"""

import logging

import pytest

from interface_shims import UnknownInterfaceNameError
from interface_shims.discovery import DiscoveryScanner, ModuleLoader
from interface_shims.identifiers import IdentifierExtractor
from interface_shims.names import NameRegistry
from interface_shims.resolver import EntityResolver
from tests.conftest import NAMED
from tests.fixtures.named.heals import Heals


def _registry():
    resolver = EntityResolver()
    registry = NameRegistry(DiscoveryScanner(), ModuleLoader(), resolver, IdentifierExtractor())
    return registry, resolver


class TestBuild:

    def test_marked_classes_are_registered(self):
        registry, resolver = _registry()
        registry.build([NAMED])
        assert registry.built
        assert list(registry) == ["Heals"]
        assert registry.resolve("Heals") is resolver.definition_of(Heals)

    def test_unmarked_and_implementer_classes_are_ignored(self):
        registry, _ = _registry()
        registry.build([NAMED])
        assert "NotAnInterface" not in registry
        assert "Herb" not in registry

    def test_second_build_is_a_no_op(self, write_unit, tmp_path):
        registry, _ = _registry()
        registry.build([NAMED])
        write_unit("later/shielded.py", """\
            # @interface
            class Shielded:
                def block(self):
                    ...
        """)
        registry.build([tmp_path])
        assert len(registry) == 1

    def test_duplicate_name_keeps_first(self, write_unit, tmp_path, caplog):
        write_unit("a/first.py", """\
            # @interface
            class Glows:
                def glow(self):
                    ...
        """)
        write_unit("b/second.py", """\
            # @interface
            class Glows:
                def shine(self):
                    ...
        """)
        registry, _ = _registry()
        with caplog.at_level(logging.WARNING, logger="interface_shims.names"):
            registry.build([tmp_path / "a", tmp_path / "b"])
        assert "keeping the first" in caplog.text
        kept = registry.get("Glows")
        assert kept is not None
        assert kept.members.methods == ("glow",)

    def test_unloadable_candidate_is_skipped(self, write_unit, tmp_path, caplog):
        write_unit("pack/broken.py", "def oops(:\n")
        write_unit("pack/lit.py", """\
            # @interface
            class Lit:
                def light(self):
                    ...
        """)
        registry, _ = _registry()
        with caplog.at_level(logging.WARNING, logger="interface_shims.names"):
            registry.build([tmp_path / "pack"])
        assert "broken.py" in caplog.text
        assert "Lit" in registry

    def test_candidate_exiting_at_import_is_skipped(self, write_unit, tmp_path, caplog):
        write_unit("pack/script.py", "import sys\nsys.exit('no args')\n")
        write_unit("pack/lit.py", """\
            # @interface
            class Lit:
                def light(self):
                    ...
        """)
        registry, _ = _registry()
        with caplog.at_level(logging.WARNING, logger="interface_shims.names"):
            registry.build([tmp_path / "pack"])
        assert "SystemExit: no args" in caplog.text
        assert registry.built
        assert "Lit" in registry


class TestLookup:

    def test_unknown_name_raises(self):
        registry, _ = _registry()
        registry.build([NAMED])
        with pytest.raises(UnknownInterfaceNameError, match="Glows") as info:
            registry.resolve("Glows", "Herb")
        assert "Herb" in str(info.value)

    def test_get_and_items(self):
        registry, _ = _registry()
        registry.build([NAMED])
        assert registry.get("Nope") is None
        [(name, definition)] = registry.items()
        assert name == "Heals"
        assert definition.key == "tests.fixtures.named.heals:Heals"
