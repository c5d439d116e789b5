"""
interface_shims/identifiers.py
==============================

Best-effort display names for diagnostics and for Name Registry keys.

The name is recovered from the definition's source text, never from the
class object, so that a definition opting into name-based resolution is
registered under the name its source actually declares.  Nothing here
affects whether a conformance check passes.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional

from .definition import Definition

__all__ = ["IdentifierExtractor", "UNKNOWN_NAME", "extract_declared_name"]

UNKNOWN_NAME = "Unknown"

_NAME_DECLARATION = re.compile(r"^[ \t]*class[ \t]+([A-Za-z_][A-Za-z0-9_]*)", re.MULTILINE)


def extract_declared_name(source: str) -> Optional[str]:
    """Return the first ``class <Name>`` declared in *source*, if any."""
    match = _NAME_DECLARATION.search(source)
    return match.group(1) if match else None


class IdentifierExtractor:
    """Memoized ``displayName(def, strict)``.

    The cache stores the *extracted* name (or ``None``) per definition, so
    strict and lenient lookups share one scan without leaking each
    other's fallback.
    """

    def __init__(self, on_hit: Optional[Callable[[], None]] = None) -> None:
        self._cache: Dict[Definition, Optional[str]] = {}
        self._on_hit = on_hit

    def display_name(self, definition: Definition, strict: bool = False) -> str:
        """
        Parameters
        ----------
        definition:
            Definition to name.
        strict:
            When ``True`` an unrecoverable name yields ``""`` instead of the
            definition's path-like key.
        """
        if definition in self._cache:
            if self._on_hit is not None:
                self._on_hit()
            extracted = self._cache[definition]
        else:
            source = definition.source
            if source is None:
                # absence of source is never cached
                return UNKNOWN_NAME
            extracted = extract_declared_name(source)
            self._cache[definition] = extracted

        if extracted:
            return extracted
        return "" if strict else definition.key

    def __len__(self) -> int:
        return len(self._cache)
