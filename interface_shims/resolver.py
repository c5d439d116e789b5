"""
interface_shims/resolver.py
===========================

Entity Resolver: any runtime value → its owning :class:`Definition`.

One definition is interned per class, so identity of the returned object
is stable for the lifetime of the resolver and can key every other cache.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from .definition import Definition
from .errors import UnresolvableEntityError

__all__ = ["EntityResolver"]


class EntityResolver:

    def __init__(self) -> None:
        # id(cls) -> (cls, definition); the class is held so its id stays unique
        self._interned: Dict[int, Tuple[type, Definition]] = {}

    def resolve(self, value: Any) -> Definition:
        """Return the definition for *value*.

        *value* may be a :class:`Definition` (returned as-is), a class, or an
        instance of a class.  ``None`` and anything whose type lives in
        ``builtins`` has no definition.
        """
        if isinstance(value, Definition):
            return value
        cls = value if isinstance(value, type) else type(value)
        if value is None or cls.__module__ == "builtins":
            raise UnresolvableEntityError(value)
        return self.definition_of(cls)

    def definition_of(self, cls: type) -> Definition:
        slot = self._interned.get(id(cls))
        if slot is not None:
            return slot[1]
        definition = Definition(cls)
        self._interned[id(cls)] = (cls, definition)
        return definition

    def __len__(self) -> int:
        return len(self._interned)
