"""
interface_shims/definition.py
═════════════════════════════

The :class:`Definition`, canonical identity of one class, and the runtime
member inspection that the conformance check compares.

A definition knows three things about its class, each computed on demand:

  * the **source text** (``inspect.getsource`` plus the comment block just
    above the ``class`` statement); classes built with ``type()`` have none;
  * the raw **"implements" declaration**, the ``implements`` class attribute;
  * the **member set**: event, method and field names visible on the class,
    walking the MRO but stopping short of ``object``.

Definitions compare and hash by identity.  The Entity Resolver interns one
per class, so ``Definition`` objects can be used directly as cache keys.
"""

from __future__ import annotations

import abc
import inspect
import re
import sys
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .events import Event

__all__ = [
    "IMPLEMENTS_ATTR",
    "INTERFACE_MARKER",
    "MemberKind",
    "MemberSet",
    "Definition",
    "collect_members",
    "looks_like_path",
    "read_source",
]

IMPLEMENTS_ATTR = "implements"

# Opt-in marker for name-based resolution, e.g. ``# @interface``.
INTERFACE_MARKER = re.compile(r"#\s*@interface\b")

_PATH_LIKE = re.compile(r"[/\\:]|\.py$")

# Bases whose attributes are abc/typing bookkeeping, never members.
_MACHINERY_BASES = (object, abc.ABC, typing.Generic, typing.Protocol)

# Injected into every ABC or Protocol subclass by abc and typing.
_MACHINERY_NAMES = frozenset({
    "_abc_impl",
    "_abc_registry",
    "_abc_cache",
    "_abc_negative_cache",
    "_abc_negative_cache_version",
    "_is_protocol",
    "_is_runtime_protocol",
})


class MemberKind(Enum):
    """Kinds of members, in the order conformance compares them."""
    EVENT = "event"
    METHOD = "method"
    FIELD = "field"


@dataclass(frozen=True)
class MemberSet:
    """Ordered member names of a class, grouped by kind."""
    events: Tuple[str, ...] = ()
    methods: Tuple[str, ...] = ()
    fields: Tuple[str, ...] = ()

    def of(self, kind: MemberKind) -> Tuple[str, ...]:
        if kind is MemberKind.EVENT:
            return self.events
        if kind is MemberKind.METHOD:
            return self.methods
        return self.fields

    def __iter__(self) -> Iterator[Tuple[MemberKind, str]]:
        for kind in MemberKind:
            for name in self.of(kind):
                yield kind, name

    def __len__(self) -> int:
        return len(self.events) + len(self.methods) + len(self.fields)


# ═════════════════════════════════════════════════════════════════════════
#  SOURCE & MEMBER INSPECTION
# ═════════════════════════════════════════════════════════════════════════

def read_source(cls: type) -> Optional[str]:
    """Return the source of *cls*, prefixed by its leading comments.

    ``None`` when the class has no retrievable source (built at run time,
    defined interactively, or its file is gone).
    """
    try:
        body = inspect.getsource(cls)
    except (OSError, TypeError):
        return None
    comments = inspect.getcomments(cls) or ""
    return comments + body


def looks_like_path(name: str) -> bool:
    """True for synthetic entries such as ``"res/items/potion.py"``."""
    return bool(_PATH_LIKE.search(name))


def _is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


if sys.version_info >= (3, 14):
    import annotationlib

    def _annotation_names(klass: type) -> List[str]:
        return list(annotationlib.get_annotations(
            klass, format=annotationlib.Format.FORWARDREF))
else:
    def _annotation_names(klass: type) -> List[str]:
        return list(inspect.get_annotations(klass))


def _classify(value: Any) -> MemberKind:
    if isinstance(value, Event):
        return MemberKind.EVENT
    if isinstance(value, (staticmethod, classmethod)) or inspect.isfunction(value):
        return MemberKind.METHOD
    if isinstance(value, property):
        return MemberKind.FIELD
    if inspect.isroutine(value):
        return MemberKind.METHOD
    return MemberKind.FIELD


def _is_declaration(value: Any) -> bool:
    """An ``implements`` attribute that is a method or property declares nothing."""
    return not (inspect.isroutine(value) or isinstance(value, property))


def _skip_name(name: str) -> bool:
    return _is_dunder(name) or name in _MACHINERY_NAMES


def collect_members(cls: type) -> MemberSet:
    """Inspect *cls* and every base except ``object``.

    Base-class members come first; a subclass redefining a name under a
    different kind wins.  Dunder names, the ``implements`` declaration and
    the bookkeeping that :mod:`abc` and :mod:`typing` add to ABCs and
    Protocols are never members.
    """
    kinds: Dict[str, MemberKind] = {}
    for klass in reversed(cls.__mro__):
        if klass in _MACHINERY_BASES:
            continue
        for name in _annotation_names(klass):
            if not _skip_name(name) and name != IMPLEMENTS_ATTR:
                kinds[name] = MemberKind.FIELD
        for name, value in vars(klass).items():
            if _skip_name(name):
                continue
            if name == IMPLEMENTS_ATTR and _is_declaration(value):
                continue
            kinds[name] = _classify(value)

    grouped: Dict[MemberKind, List[str]] = {kind: [] for kind in MemberKind}
    for name, kind in kinds.items():
        grouped[kind].append(name)
    return MemberSet(
        events=tuple(grouped[MemberKind.EVENT]),
        methods=tuple(grouped[MemberKind.METHOD]),
        fields=tuple(grouped[MemberKind.FIELD]),
    )


# ═════════════════════════════════════════════════════════════════════════
#  DEFINITION
# ═════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Definition:
    """
    Canonical identity for one class.

    Attributes
    ----------
    target : the class object itself
    key    : path-like identity key, ``"<module>:<qualname>"``
    """
    target: type
    _source: Optional[str] = field(default=None, init=False, repr=False)
    _members: Optional[MemberSet] = field(default=None, init=False, repr=False)

    @property
    def key(self) -> str:
        return f"{self.target.__module__}:{self.target.__qualname__}"

    @property
    def name(self) -> str:
        return self.target.__name__

    @property
    def source(self) -> Optional[str]:
        # Only a found source is memoized; absence is re-checked each time.
        if self._source is None:
            self._source = read_source(self.target)
        return self._source

    @property
    def has_source(self) -> bool:
        return self.source is not None

    @property
    def has_marker(self) -> bool:
        source = self.source
        return source is not None and INTERFACE_MARKER.search(source) is not None

    @property
    def declared(self) -> Tuple[Any, ...]:
        """Raw entries of the ``implements`` attribute, in declaration order."""
        raw = getattr(self.target, IMPLEMENTS_ATTR, None)
        if raw is None or not _is_declaration(raw):
            return ()
        if isinstance(raw, (list, tuple)):
            return tuple(raw)
        return (raw,)

    @property
    def members(self) -> MemberSet:
        if self._members is None:
            self._members = collect_members(self.target)
        return self._members

    @property
    def location(self) -> Tuple[str, int]:
        """``(file, line)`` of the class statement, ``("", 0)`` if unknown."""
        try:
            path = inspect.getsourcefile(self.target) or ""
            _, line = inspect.getsourcelines(self.target)
        except (OSError, TypeError):
            return "", 0
        return path, line

    def __repr__(self) -> str:
        return f"Definition({self.key})"
