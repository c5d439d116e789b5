"""
interface_shims/capabilities.py
===============================

Capability Registry: the interfaces a definition *claims*, resolved to
definitions and memoized per definition.

Entries of an ``implements`` declaration may be

* a class or a :class:`Definition`: used as-is;
* a string: looked up in the :class:`NameRegistry`, built on first need.

A string entry while ``allow_string_classes`` is off, or a name the
registry does not know, is a configuration mistake and always raises,
whatever validation mode the caller asked for.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from .conformance import EngineStats
from .definition import Definition
from .discovery import PathLike
from .errors import StringResolutionDisabledError, UnresolvableEntityError
from .identifiers import IdentifierExtractor
from .names import NameRegistry
from .resolver import EntityResolver

__all__ = ["CapabilityRegistry"]

_log = logging.getLogger(__name__)


class CapabilityRegistry:

    def __init__(
        self,
        resolver: EntityResolver,
        identifiers: IdentifierExtractor,
        names: NameRegistry,
        allow_string_classes: bool = False,
        roots: Sequence[PathLike] = (),
        stats: Optional[EngineStats] = None,
    ) -> None:
        self.resolver = resolver
        self.identifiers = identifiers
        self.names = names
        self.allow_string_classes = allow_string_classes
        self.roots = tuple(roots)
        self.stats = stats if stats is not None else EngineStats()
        self._cache: Dict[Definition, Tuple[Definition, ...]] = {}

    def declared_interfaces(self, definition: Definition) -> Tuple[Definition, ...]:
        """Interfaces *definition* declares, in declaration order, deduplicated."""
        cached = self._cache.get(definition)
        if cached is not None:
            self.stats.capability_hits += 1
            return cached

        resolved: Dict[Definition, None] = {}
        for entry in definition.declared:
            resolved.setdefault(self.resolve_entry(entry, definition), None)
        interfaces = tuple(resolved)
        self._cache[definition] = interfaces
        _log.debug("%s declares %d interface(s)", definition.key, len(interfaces))
        return interfaces

    def resolve_entry(self, entry: Any, implementer: Optional[Definition] = None) -> Definition:
        """Resolve one declaration (or requested interface) to a definition."""
        if isinstance(entry, str):
            return self._by_name(entry, implementer)
        if isinstance(entry, (Definition, type)):
            return self.resolver.resolve(entry)
        raise UnresolvableEntityError(entry)

    def declares_now(self, definition: Definition, interface: Definition) -> bool:
        """Re-read the live declaration, bypassing the cache."""
        return any(
            self.resolve_entry(entry, definition) is interface
            for entry in definition.declared
        )

    def _by_name(self, name: str, implementer: Optional[Definition]) -> Definition:
        who = self.identifiers.display_name(implementer) if implementer is not None else ""
        if not self.allow_string_classes:
            raise StringResolutionDisabledError(name, who)
        if not self.names.built:
            self.names.build(self.roots)
        return self.names.resolve(name, who)

    def __len__(self) -> int:
        return len(self._cache)
