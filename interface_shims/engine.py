"""
interface_shims/engine.py
═════════════════════════

The public surface: :class:`InterfaceEngine` and a default instance.

Data flow
─────────

  implements(value, interfaces)
      │
      ▼
  EntityResolver ──▶ CapabilityRegistry ──▶ (NameRegistry, for string names)
                            │
                            ▼
                     ConformanceValidator ──▶ IdentifierExtractor (messages)

Every cache lives on the engine instance and is append-only; build a new
engine (or call :func:`configure`) to start from scratch.  Nothing here
takes a lock: the engine expects one thread to drive scanning and
validation.

Undeclared vs. incomplete
─────────────────────────
A definition that does not *declare* an interface answers ``False`` for
it and never raises, whatever ``on_missing_member`` says: the interface
is "not applicable" to it.  Only a definition that declares an interface
and then fails to provide one of its members can raise.  Existing call
sites rely on this asymmetry, so it is kept on purpose.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .capabilities import CapabilityRegistry
from .config import Settings, load_settings
from .conformance import ConformanceValidator, EngineStats, OnFailure
from .definition import Definition
from .diagnostics import Diagnostic
from .discovery import DiscoveryScanner, FileSystem, ModuleLoader, PathLike, classes_in
from .errors import CandidateLoadError, DeclarationMismatchError, InterfaceShimsError
from .identifiers import IdentifierExtractor
from .names import NameRegistry
from .resolver import EntityResolver

__all__ = [
    "InterfaceEngine",
    "ValidationReport",
    "get_engine",
    "configure",
    "implements",
    "implementations",
]

_log = logging.getLogger(__name__)

OnMissing = Union[OnFailure, str, bool, None]


@dataclass
class ValidationReport:
    """Outcome of a startup pass or an audit."""
    units: int = 0
    checked: List[str] = field(default_factory=list)
    load_errors: List[CandidateLoadError] = field(default_factory=list)

    @property
    def skipped(self) -> List[Path]:
        return [Path(err.path) for err in self.load_errors]


def _as_list(interfaces: Any) -> List[Any]:
    if isinstance(interfaces, (list, tuple)):
        return list(interfaces)
    return [interfaces]


class InterfaceEngine:
    """Explicit service state for the conformance engine.

    Parameters
    ----------
    settings:
        Engine settings; defaults to :class:`Settings()`.
    filesystem:
        "List entries under a path" collaborator for discovery; defaults to
        :class:`~interface_shims.discovery.OsFileSystem`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        filesystem: Optional[FileSystem] = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self.stats = EngineStats()
        self.resolver = EntityResolver()
        self.identifiers = IdentifierExtractor(on_hit=self._identifier_hit)
        self.scanner = DiscoveryScanner(filesystem)
        self.loader = ModuleLoader()
        self.names = NameRegistry(self.scanner, self.loader, self.resolver, self.identifiers)
        self.capabilities = CapabilityRegistry(
            self.resolver,
            self.identifiers,
            self.names,
            allow_string_classes=self.settings.allow_string_classes,
            roots=self.settings.validate_dirs,
            stats=self.stats,
        )
        self.validator = ConformanceValidator(self.identifiers, self.stats)

    def _identifier_hit(self) -> None:
        self.stats.identifier_hits += 1

    # ── public contract ──────────────────────────────────────────────

    def implements(
        self,
        value: Any,
        interfaces: Any,
        validate: Optional[bool] = None,
        on_missing_member: OnMissing = None,
    ) -> bool:
        """Does *value* satisfy every interface in *interfaces*?

        Parameters
        ----------
        value:
            An instance, a class, or a :class:`Definition`.
        interfaces:
            One interface or a list of them; classes, definitions, or
            public names when string resolution is enabled.
        validate:
            Check members, not only the declaration.  Defaults to
            ``strict_validation``.
        on_missing_member:
            ``"return"`` or ``"raise"`` (or :class:`OnFailure`).  Defaults to
            ``"raise"`` under ``runtime_validation``, else ``"return"``.

        Raises
        ------
        UnresolvableEntityError, ConfigurationError
            Always, whatever the mode.
        ConformanceError
            Only under ``"raise"``, only for a declared interface.
        """
        if validate is None:
            validate = self.settings.default_validate
        if on_missing_member is None:
            on_failure = self.settings.default_on_failure
        else:
            on_failure = OnFailure.coerce(on_missing_member)

        requested = _as_list(interfaces)
        definition = self.resolver.resolve(value)
        declared = self.capabilities.declared_interfaces(definition)
        if not declared:
            return False

        for entry in requested:
            interface = self.capabilities.resolve_entry(entry)
            if interface not in declared:
                # undeclared: never escalated, see module docstring
                return False
            if validate:
                if not self.validator.conforms(definition, interface, on_failure):
                    return False
            elif on_failure is OnFailure.RAISE_FATAL:
                if not self.capabilities.declares_now(definition, interface):
                    raise DeclarationMismatchError(
                        self.display_name(definition), self.display_name(interface))
        return True

    def implementations(
        self,
        values: Iterable[Any],
        interfaces: Any,
        validate: bool = False,
        on_missing_member: OnMissing = None,
    ) -> List[Any]:
        """Elements of *values* that implement *interfaces*, order preserved."""
        requested = _as_list(interfaces)
        return [
            value for value in values
            if self.implements(value, requested, validate, on_missing_member)
        ]

    def display_name(self, value: Any) -> str:
        return self.identifiers.display_name(self.resolver.resolve(value))

    def describe(self, value: Any) -> Dict[str, Any]:
        """Summary of a definition's declarations and their (lenient) conformance."""
        definition = self.resolver.resolve(value)
        interfaces = self.capabilities.declared_interfaces(definition)
        return {
            "name": self.display_name(definition),
            "key": definition.key,
            "has_source": definition.has_source,
            "interfaces": [self.display_name(i) for i in interfaces],
            "conforms": {
                self.display_name(i): self.validator.conforms(
                    definition, i, OnFailure.RETURN_FALSE)
                for i in interfaces
            },
        }

    # ── startup pass ─────────────────────────────────────────────────

    def startup(self) -> Optional[ValidationReport]:
        """Host start hook.

        Builds the Name Registry when string names are allowed, then runs
        :meth:`validate_all` unless validation is deferred to run time.
        """
        if self.settings.allow_string_classes:
            self.names.build(self.settings.validate_dirs)
        if self.settings.runtime_validation:
            return None
        return self.validate_all()

    def validate_all(self, roots: Optional[Sequence[PathLike]] = None) -> ValidationReport:
        """Check every discovered class that declares interfaces.

        The first gap raises; a report is returned only for a clean tree.
        """
        report = ValidationReport()
        _log.info("startup validation over %s", self._roots_label(roots))
        for definition, declared in self._declaring(roots, report):
            self.implements(
                definition,
                list(declared),
                validate=self.settings.default_validate,
                on_missing_member=OnFailure.RAISE_FATAL,
            )
            report.checked.append(definition.key)
        _log.info(
            "startup validation done: %d unit(s), %d implementer(s) checked",
            report.units, len(report.checked),
        )
        return report

    def audit(
        self, roots: Optional[Sequence[PathLike]] = None
    ) -> Tuple[ValidationReport, List[Diagnostic]]:
        """Like :meth:`validate_all`, but every error becomes a diagnostic."""
        report = ValidationReport()
        diagnostics: List[Diagnostic] = []
        for path in self.scanner.scan_all(self._roots(roots)):
            module = self._load(path, report)
            if module is None:
                diagnostics.append(Diagnostic.from_error(report.load_errors[-1]))
                continue
            for cls in classes_in(module):
                definition = self.resolver.definition_of(cls)
                diagnostics.extend(self._audit_one(definition, report))
        return report, diagnostics

    def _audit_one(self, definition: Definition, report: ValidationReport) -> List[Diagnostic]:
        try:
            declared = self.capabilities.declared_interfaces(definition)
        except InterfaceShimsError as exc:
            return [Diagnostic.from_error(exc, definition)]
        if not declared:
            return []
        found: List[Diagnostic] = []
        for interface in declared:
            try:
                self.implements(
                    definition,
                    interface,
                    validate=self.settings.default_validate,
                    on_missing_member=OnFailure.RAISE_FATAL,
                )
            except InterfaceShimsError as exc:
                found.append(Diagnostic.from_error(exc, definition))
        report.checked.append(definition.key)
        return found

    # ── helpers ──────────────────────────────────────────────────────

    def _roots(self, roots: Optional[Sequence[PathLike]]) -> Sequence[PathLike]:
        return self.settings.validate_dirs if roots is None else roots

    def _roots_label(self, roots: Optional[Sequence[PathLike]]) -> str:
        return ", ".join(str(r) for r in self._roots(roots))

    def _load(self, path: Path, report: ValidationReport) -> Any:
        try:
            module = self.loader.load(path)
        except CandidateLoadError as exc:
            _log.warning("%s; skipping", exc)
            report.load_errors.append(exc)
            return None
        report.units += 1
        return module

    def _declaring(
        self, roots: Optional[Sequence[PathLike]], report: ValidationReport
    ) -> Iterator[Tuple[Definition, Tuple[Definition, ...]]]:
        for path in self.scanner.scan_all(self._roots(roots)):
            module = self._load(path, report)
            if module is None:
                continue
            for cls in classes_in(module):
                definition = self.resolver.definition_of(cls)
                declared = self.capabilities.declared_interfaces(definition)
                if declared:
                    yield definition, declared


# ═════════════════════════════════════════════════════════════════════════
#  DEFAULT INSTANCE
# ═════════════════════════════════════════════════════════════════════════

_default_engine: Optional[InterfaceEngine] = None


def get_engine() -> InterfaceEngine:
    """The process-wide engine, created from :func:`load_settings` on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = InterfaceEngine(load_settings())
    return _default_engine


def configure(
    settings: Optional[Settings] = None,
    filesystem: Optional[FileSystem] = None,
) -> InterfaceEngine:
    """Replace the default engine with a fresh one built from *settings*."""
    global _default_engine
    _default_engine = InterfaceEngine(settings, filesystem)
    return _default_engine


def implements(
    value: Any,
    interfaces: Any,
    validate: Optional[bool] = None,
    on_missing_member: OnMissing = None,
) -> bool:
    """:meth:`InterfaceEngine.implements` on the default engine."""
    return get_engine().implements(value, interfaces, validate, on_missing_member)


def implementations(
    values: Iterable[Any],
    interfaces: Any,
    validate: bool = False,
    on_missing_member: OnMissing = None,
) -> List[Any]:
    """:meth:`InterfaceEngine.implementations` on the default engine."""
    return get_engine().implementations(values, interfaces, validate, on_missing_member)
