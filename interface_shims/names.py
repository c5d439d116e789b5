"""
interface_shims/names.py
════════════════════════

Optional Name Registry: declared public name → :class:`Definition`.

Lets an implementer write ``implements = ["CanHeal"]`` instead of importing
``CanHeal``.  Building the registry imports *every* module under the
configured roots, so it is opt-in (``allow_string_classes``) and is built
at most once; a second :meth:`NameRegistry.build` is a no-op.

Only classes whose source carries the opt-in marker are recorded::

    # @interface
    class CanHeal:
        healed = Event("amount")

        def heal(self, amount): ...
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .definition import Definition
from .discovery import DiscoveryScanner, ModuleLoader, PathLike, classes_in
from .errors import CandidateLoadError, UnknownInterfaceNameError
from .identifiers import IdentifierExtractor
from .resolver import EntityResolver

__all__ = ["NameRegistry"]

_log = logging.getLogger(__name__)


class NameRegistry:

    def __init__(
        self,
        scanner: DiscoveryScanner,
        loader: ModuleLoader,
        resolver: EntityResolver,
        identifiers: IdentifierExtractor,
    ) -> None:
        self.scanner = scanner
        self.loader = loader
        self.resolver = resolver
        self.identifiers = identifiers
        self._names: Dict[str, Definition] = {}
        self._built = False

    @property
    def built(self) -> bool:
        return self._built

    def build(self, roots: Iterable[PathLike]) -> None:
        """Scan *roots*, import every candidate, record marked classes.

        Candidates that fail to import are logged and skipped.
        """
        if self._built:
            _log.debug("name registry already built; ignoring rebuild")
            return

        for path in self.scanner.scan_all(roots):
            try:
                module = self.loader.load(path)
            except CandidateLoadError as exc:
                _log.warning("%s; skipping", exc)
                continue
            for cls in classes_in(module):
                self._consider(self.resolver.definition_of(cls))

        self._built = True
        _log.info("name registry built with %d interface(s)", len(self._names))

    def _consider(self, definition: Definition) -> None:
        if not definition.has_marker:
            return
        name = self.identifiers.display_name(definition, strict=True)
        if not name:
            _log.debug("%s is marked but declares no name; skipped", definition.key)
            return
        current = self._names.get(name)
        if current is not None and current is not definition:
            _log.warning(
                "interface name '%s' declared by both %s and %s; keeping the first",
                name, current.key, definition.key,
            )
            return
        self._names[name] = definition
        _log.debug("registered interface '%s' -> %s", name, definition.key)

    def resolve(self, name: str, implementer: str = "") -> Definition:
        definition = self._names.get(name)
        if definition is None:
            raise UnknownInterfaceNameError(name, implementer)
        return definition

    def get(self, name: str) -> Optional[Definition]:
        return self._names.get(name)

    def items(self) -> List[Tuple[str, Definition]]:
        return list(self._names.items())

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)
