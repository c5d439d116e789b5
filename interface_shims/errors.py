"""
interface_shims/errors.py
═════════════════════════

Error taxonomy for the conformance engine.

Hierarchy
─────────

  InterfaceShimsError (base)
  ├── ConformanceError               fatal conformance halts
  │   ├── MissingMemberError         claimed interface, member absent
  │   ├── ImplementerWithoutSourceError
  │   └── DeclarationMismatchError
  ├── UnresolvableEntityError        value has no owning definition
  ├── ConfigurationError             build / settings mistakes
  │   ├── StringResolutionDisabledError
  │   └── UnknownInterfaceNameError
  ├── ScanAccessError                root cannot be listed (logged, skipped)
  └── CandidateLoadError             module cannot be imported (logged, skipped)

An *undeclared* capability has an error code but no exception class: a
definition that never claimed an interface simply does not satisfy it.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Optional


@unique
class ErrorCode(Enum):
    """Stable identifiers, usable as diagnostic ``error_id`` values."""

    UNDECLARED_CAPABILITY = "IFACE-1001"
    MISSING_MEMBER = "IFACE-1002"
    IMPLEMENTER_WITHOUT_SOURCE = "IFACE-1003"
    DECLARATION_MISMATCH = "IFACE-1004"
    UNRESOLVABLE_ENTITY = "IFACE-2001"
    CONFIGURATION = "IFACE-3000"
    STRING_RESOLUTION_DISABLED = "IFACE-3001"
    UNKNOWN_INTERFACE_NAME = "IFACE-3002"
    SCAN_ACCESS = "IFACE-4001"
    CANDIDATE_LOAD = "IFACE-4002"

    @property
    def is_fatal(self) -> bool:
        """Codes that are only ever surfaced by raising."""
        return self not in (
            ErrorCode.UNDECLARED_CAPABILITY,
            ErrorCode.SCAN_ACCESS,
            ErrorCode.CANDIDATE_LOAD,
        )


class InterfaceShimsError(Exception):
    """Base class for every error raised by :mod:`interface_shims`."""

    code: ErrorCode = ErrorCode.CONFIGURATION

    def __init__(self, message: str, *, code: Optional[ErrorCode] = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


# ═════════════════════════════════════════════════════════════════════════
#  CONFORMANCE
# ═════════════════════════════════════════════════════════════════════════

class ConformanceError(InterfaceShimsError):
    """A claimed interface is not honoured by its implementer."""

    code = ErrorCode.MISSING_MEMBER

    def __init__(self, message: str, implementer: str, interface: str) -> None:
        self.implementer = implementer
        self.interface = interface
        super().__init__(message)


class MissingMemberError(ConformanceError):
    """The implementer lacks an event, method or field the interface requires."""

    code = ErrorCode.MISSING_MEMBER

    def __init__(self, implementer: str, kind: str, member: str, interface: str) -> None:
        self.kind = kind
        self.member = member
        super().__init__(
            f"{implementer} does not implement the {kind} '{member}' "
            f"on the interface {interface}",
            implementer,
            interface,
        )


class ImplementerWithoutSourceError(ConformanceError):
    code = ErrorCode.IMPLEMENTER_WITHOUT_SOURCE

    def __init__(self, implementer: str, interface: str) -> None:
        super().__init__(
            f"{implementer} has no source to check against the interface {interface}",
            implementer,
            interface,
        )


class DeclarationMismatchError(ConformanceError):
    code = ErrorCode.DECLARATION_MISMATCH

    def __init__(self, implementer: str, interface: str) -> None:
        super().__init__(
            f"{implementer} no longer declares the interface {interface}",
            implementer,
            interface,
        )


# ═════════════════════════════════════════════════════════════════════════
#  RESOLUTION / CONFIGURATION
# ═════════════════════════════════════════════════════════════════════════

class UnresolvableEntityError(InterfaceShimsError):
    """The value is not a class instance, a class, or a ``Definition``."""

    code = ErrorCode.UNRESOLVABLE_ENTITY

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"cannot resolve {value!r} (type {type(value).__name__}) to a definition"
        )


class ConfigurationError(InterfaceShimsError):
    code = ErrorCode.CONFIGURATION


class StringResolutionDisabledError(ConfigurationError):
    """A declaration names an interface by string but string resolution is off."""

    code = ErrorCode.STRING_RESOLUTION_DISABLED

    def __init__(self, name: str, implementer: str = "") -> None:
        self.name = name
        where = f" (declared by {implementer})" if implementer else ""
        super().__init__(
            f"interface '{name}'{where} is referenced by name but "
            f"allow_string_classes is disabled"
        )


class UnknownInterfaceNameError(ConfigurationError):
    code = ErrorCode.UNKNOWN_INTERFACE_NAME

    def __init__(self, name: str, implementer: str = "") -> None:
        self.name = name
        where = f" (declared by {implementer})" if implementer else ""
        super().__init__(
            f"no interface named '{name}'{where} was found in the name registry; "
            f"is it marked with '# @interface' and under validate_dirs?"
        )


# ═════════════════════════════════════════════════════════════════════════
#  DISCOVERY
# ═════════════════════════════════════════════════════════════════════════

class ScanAccessError(InterfaceShimsError):
    code = ErrorCode.SCAN_ACCESS

    def __init__(self, path: Any, reason: str = "") -> None:
        self.path = path
        detail = f": {reason}" if reason else ""
        super().__init__(f"cannot list {path}{detail}")


class CandidateLoadError(InterfaceShimsError):
    code = ErrorCode.CANDIDATE_LOAD

    def __init__(self, path: Any, reason: str = "") -> None:
        self.path = path
        detail = f": {reason}" if reason else ""
        super().__init__(f"cannot import {path}{detail}")
