"""
interface_shims/diagnostics.py
══════════════════════════════

Diagnostic model for conformance reports.

Errors raised by the engine are turned into :class:`Diagnostic` records by
:meth:`Diagnostic.from_error`, located at the implementer's ``class``
statement when its source is known, and rendered either GCC-style for
terminals and editors or as one JSON object per line for tooling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .definition import Definition
from .errors import ConformanceError, InterfaceShimsError, MissingMemberError

__all__ = ["DiagnosticSeverity", "SourceLocation", "Diagnostic"]


class DiagnosticSeverity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


@dataclass(frozen=True)
class SourceLocation:
    """A specific point in source code."""
    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.column:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single finding.

    Attributes
    ----------
    error_id     : ``ErrorCode`` value, e.g. ``"IFACE-1002"``
    message      : human-readable description
    severity     : DiagnosticSeverity
    location     : primary source location
    checker_name : component that produced it
    evidence     : machine-readable details (implementer, interface, member)
    """
    error_id: str
    message: str
    severity: DiagnosticSeverity
    location: SourceLocation = field(default_factory=SourceLocation)
    checker_name: str = "conformance"
    evidence: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(
        cls,
        exc: InterfaceShimsError,
        definition: Optional[Definition] = None,
    ) -> "Diagnostic":
        evidence: Dict[str, Any] = {}
        if isinstance(exc, ConformanceError):
            evidence["implementer"] = exc.implementer
            evidence["interface"] = exc.interface
        if isinstance(exc, MissingMemberError):
            evidence["kind"] = exc.kind
            evidence["member"] = exc.member

        location = SourceLocation()
        if definition is not None:
            evidence.setdefault("key", definition.key)
            path, line = definition.location
            location = SourceLocation(file=path, line=line)

        return cls(
            error_id=exc.code.value,
            message=exc.message,
            severity=DiagnosticSeverity.ERROR if exc.code.is_fatal else DiagnosticSeverity.WARNING,
            location=location,
            checker_name=type(exc).__name__,
            evidence=evidence,
        )

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "file": self.location.file,
            "linenr": self.location.line,
            "column": self.location.column,
            "severity": self.severity.value,
            "message": self.message,
            "errorId": self.error_id,
            "checker": self.checker_name,
            "evidence": dict(self.evidence),
        }

    def to_json_str(self) -> str:
        """Single-line JSON string."""
        return json.dumps(self.to_json_dict(), sort_keys=True)

    def to_gcc_format(self) -> str:
        """GCC-style diagnostic string: file:line: severity: message [id]."""
        where = str(self.location) if self.location.file else "<unknown>"
        return f"{where}: {self.severity.value}: {self.message} [{self.error_id}]"
