"""
interface_shims — Structural interfaces for plain Python classes
================================================================

Classes *claim* interfaces with an ``implements`` class attribute; the
engine checks, at run time and by member name only, that the claim holds.
Every answer is memoized for the lifetime of the engine.

Core modules
------------
definition
    ``Definition`` identity, source lookup and member inspection.
events
    ``Event`` descriptor for declaring events on a class body.
resolver
    Any value → its owning ``Definition``.
capabilities
    Resolves ``implements`` declarations, memoized per definition.
conformance
    Member-level check of one (definition, interface) pair.
identifiers
    Display names recovered from source text.
discovery
    Recursive scanning of namespace roots and module loading.
names
    Optional public-name → interface registry.
engine
    ``InterfaceEngine``, the default instance and the startup pass.
config / errors / diagnostics
    Settings, error taxonomy and report records.

Quick start
-----------
>>> from interface_shims import Event, implements
>>> class CanHeal:
...     healed = Event("amount")
...     def heal(self, amount): ...
>>> class Potion:
...     implements = [CanHeal]
...     healed = Event("amount")
...     def heal(self, amount): ...
>>> implements(Potion(), CanHeal)     # doctest: +SKIP
True

Package layout
--------------
::

    interface_shims/
    ├── __init__.py            ← this file
    ├── __main__.py / cli.py   ← ``interface-shims`` command
    ├── engine.py
    ├── capabilities.py
    ├── conformance.py
    ├── resolver.py
    ├── names.py
    ├── discovery.py
    ├── identifiers.py
    ├── definition.py
    ├── events.py
    ├── config.py
    ├── diagnostics.py
    └── errors.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING, Dict, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__license__ = "MIT"
__all__: List[str] = []          # populated by _import_names below

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Re-export registry: module_name -> names bound at package level
# ---------------------------------------------------------------------------

_CORE_MODULES: Dict[str, List[str]] = {
    "errors": [
        "ErrorCode",
        "InterfaceShimsError",
        "ConformanceError",
        "MissingMemberError",
        "ImplementerWithoutSourceError",
        "DeclarationMismatchError",
        "UnresolvableEntityError",
        "ConfigurationError",
        "StringResolutionDisabledError",
        "UnknownInterfaceNameError",
        "ScanAccessError",
        "CandidateLoadError",
    ],
    "events": [
        "Event",
        "BoundEvent",
    ],
    "definition": [
        "Definition",
        "MemberKind",
        "MemberSet",
    ],
    "conformance": [
        "OnFailure",
        "EngineStats",
        "ConformanceValidator",
    ],
    "config": [
        "Settings",
        "load_settings",
    ],
    "diagnostics": [
        "Diagnostic",
        "DiagnosticSeverity",
        "SourceLocation",
    ],
    "discovery": [
        "DiscoveryScanner",
        "ModuleLoader",
        "OsFileSystem",
    ],
    "engine": [
        "InterfaceEngine",
        "ValidationReport",
        "get_engine",
        "configure",
        "implements",
        "implementations",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"interface_shims: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            raise AttributeError(
                f"interface_shims.{module_rel_name} does not export '{name}'"
            )
        setattr(current_module, name, obj)
        __all__.append(name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names

__all__ += ["__version__"]

if TYPE_CHECKING:
    from .errors import (
        ErrorCode as ErrorCode,
        InterfaceShimsError as InterfaceShimsError,
        ConformanceError as ConformanceError,
        MissingMemberError as MissingMemberError,
        ImplementerWithoutSourceError as ImplementerWithoutSourceError,
        DeclarationMismatchError as DeclarationMismatchError,
        UnresolvableEntityError as UnresolvableEntityError,
        ConfigurationError as ConfigurationError,
        StringResolutionDisabledError as StringResolutionDisabledError,
        UnknownInterfaceNameError as UnknownInterfaceNameError,
        ScanAccessError as ScanAccessError,
        CandidateLoadError as CandidateLoadError,
    )
    from .events import Event as Event, BoundEvent as BoundEvent
    from .definition import (
        Definition as Definition,
        MemberKind as MemberKind,
        MemberSet as MemberSet,
    )
    from .conformance import (
        OnFailure as OnFailure,
        EngineStats as EngineStats,
        ConformanceValidator as ConformanceValidator,
    )
    from .config import Settings as Settings, load_settings as load_settings
    from .diagnostics import (
        Diagnostic as Diagnostic,
        DiagnosticSeverity as DiagnosticSeverity,
        SourceLocation as SourceLocation,
    )
    from .discovery import (
        DiscoveryScanner as DiscoveryScanner,
        ModuleLoader as ModuleLoader,
        OsFileSystem as OsFileSystem,
    )
    from .engine import (
        InterfaceEngine as InterfaceEngine,
        ValidationReport as ValidationReport,
        get_engine as get_engine,
        configure as configure,
        implements as implements,
        implementations as implementations,
    )
