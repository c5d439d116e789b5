"""
interface_shims/conformance.py
══════════════════════════════

Member-level conformance of one (definition, interface) pair.

Algorithm
─────────

  1. cached pair                → cached boolean, never re-raised
  2. interface has no source    → True  (it declares nothing)
  3. implementer has no source  → False / ImplementerWithoutSourceError
  4. compare events, then methods, then fields (path-like fields skipped);
     the first missing member   → False / MissingMemberError
  5. everything present         → True

The boolean is cached *before* any error is raised.  A pair that failed
once under :attr:`OnFailure.RAISE_FATAL` therefore answers ``False``
without raising on every later call: the decision to halt belongs to the
call that discovered the gap.  Callers that need a raise on every failing
call must not rely on this cache for escalation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .definition import Definition, MemberKind, looks_like_path
from .errors import ImplementerWithoutSourceError, MissingMemberError
from .identifiers import IdentifierExtractor

__all__ = ["OnFailure", "EngineStats", "ConformanceValidator"]

_log = logging.getLogger(__name__)


class OnFailure(Enum):
    """What a failed check does on the path that computes it."""
    RETURN_FALSE = "return"
    RAISE_FATAL = "raise"

    @classmethod
    def coerce(cls, value: "OnFailure | str | bool") -> "OnFailure":
        """Accept the enum, its string value, or ``True`` meaning raise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.RAISE_FATAL if value else cls.RETURN_FALSE
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"on_missing_member must be 'return' or 'raise', got {value!r}"
            ) from None


@dataclass
class EngineStats:
    """Counters for the engine's caches; useful in tests and ``--verbose`` runs."""
    member_checks: int = 0
    conformance_hits: int = 0
    capability_hits: int = 0
    identifier_hits: int = 0


class ConformanceValidator:
    """Memoized ``conforms(def, interface, on_failure)``."""

    def __init__(
        self,
        identifiers: IdentifierExtractor,
        stats: Optional[EngineStats] = None,
    ) -> None:
        self.identifiers = identifiers
        self.stats = stats if stats is not None else EngineStats()
        self._cache: Dict[Tuple[Definition, Definition], bool] = {}

    def cached(self, definition: Definition, interface: Definition) -> Optional[bool]:
        return self._cache.get((definition, interface))

    def conforms(
        self,
        definition: Definition,
        interface: Definition,
        on_failure: OnFailure = OnFailure.RETURN_FALSE,
    ) -> bool:
        pair = (definition, interface)
        if pair in self._cache:
            self.stats.conformance_hits += 1
            return self._cache[pair]

        _log.debug("checking %s against %s", definition.key, interface.key)

        if not interface.has_source:
            self._cache[pair] = True
            return True

        if not definition.has_source:
            self._cache[pair] = False
            if on_failure is OnFailure.RAISE_FATAL:
                raise ImplementerWithoutSourceError(
                    self._name(definition), self._name(interface))
            return False

        missing = self._first_missing(definition, interface)
        if missing is None:
            self._cache[pair] = True
            return True

        self._cache[pair] = False
        kind, member = missing
        if on_failure is OnFailure.RAISE_FATAL:
            raise MissingMemberError(
                self._name(definition), kind.value, member, self._name(interface))
        _log.debug("%s lacks %s '%s' of %s", definition.key, kind.value, member, interface.key)
        return False

    def _first_missing(
        self, definition: Definition, interface: Definition
    ) -> Optional[Tuple[MemberKind, str]]:
        self.stats.member_checks += 1
        required = interface.members
        present = definition.members
        for kind in MemberKind:
            have = set(present.of(kind))
            for name in required.of(kind):
                if kind is MemberKind.FIELD and looks_like_path(name):
                    continue
                if name not in have:
                    return kind, name
        return None

    def _name(self, definition: Definition) -> str:
        return self.identifiers.display_name(definition)

    def __len__(self) -> int:
        return len(self._cache)

