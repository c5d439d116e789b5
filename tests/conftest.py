# tests/conftest.py
"""
Shared fixtures: engines bound to the on-disk fixture namespaces, and a
helper that writes throw-away source units under ``tmp_path``.
"""

import textwrap
from pathlib import Path

import pytest

from interface_shims import InterfaceEngine, Settings

FIXTURES = Path(__file__).resolve().parent / "fixtures"
GAME = FIXTURES / "game"
BROKEN = FIXTURES / "broken"
NAMED = FIXTURES / "named"


def make_engine(*roots, **options):
    """Engine over *roots* (default: the game fixtures) with *options*."""
    dirs = tuple(roots) or (GAME,)
    return InterfaceEngine(Settings(validate_dirs=dirs, **options))


@pytest.fixture
def engine():
    return make_engine()


@pytest.fixture
def write_unit(tmp_path):
    """Write ``relpath`` under tmp_path with dedented *source*; return its path."""

    def _write(relpath, source=""):
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write
