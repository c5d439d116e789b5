"""
interface_shims/discovery.py
════════════════════════════

Finding and importing candidate source units.

  ┌───────────────┐  list_entries  ┌──────────────────┐   load   ┌──────────────┐
  │ DiscoveryScan │ ─────────────▶ │ FileSystem       │          │ ModuleLoader │
  │  scan / all   │ ◀───────────── │ (OsFileSystem)   │          │ → classes_in │
  └───────────────┘   Entry list   └──────────────────┘          └──────────────┘

The scanner never aborts on a root it cannot read: the collaborator raises
:class:`ScanAccessError`, the scanner logs it and carries on with whatever
else it was asked to scan.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import keyword
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Union

from .errors import CandidateLoadError, ScanAccessError

__all__ = [
    "Entry",
    "FileSystem",
    "OsFileSystem",
    "DiscoveryScanner",
    "ModuleLoader",
    "classes_in",
]

_log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_PSEUDO_ENTRIES = frozenset({".", ".."})

# Build and test-harness entry points run code at import; never candidates.
_NEVER_CANDIDATES = frozenset({"setup.py", "conftest.py"})


@dataclass(frozen=True)
class Entry:
    """One directory entry as reported by a :class:`FileSystem`."""
    name: str
    path: Path
    is_dir: bool


class FileSystem(Protocol):
    """The "list entries under a path" capability the scanner consumes."""

    def list_entries(self, path: Path) -> List[Entry]:
        """Return the entries directly under *path*.

        Raises :class:`ScanAccessError` when *path* cannot be listed.
        """
        ...


class OsFileSystem:
    """:class:`FileSystem` backed by :func:`os.scandir`, sorted by name."""

    def list_entries(self, path: Path) -> List[Entry]:
        try:
            with os.scandir(path) as it:
                entries = [
                    Entry(e.name, Path(e.path), e.is_dir(follow_symlinks=True))
                    for e in it
                ]
        except OSError as exc:
            raise ScanAccessError(path, exc.strerror or str(exc)) from exc
        entries.sort(key=lambda e: e.name)
        return entries


# ═════════════════════════════════════════════════════════════════════════
#  SCANNER
# ═════════════════════════════════════════════════════════════════════════

class DiscoveryScanner:
    """Recursively list candidate source units under namespace roots."""

    def __init__(self, filesystem: Optional[FileSystem] = None, suffix: str = ".py") -> None:
        self.filesystem: FileSystem = filesystem if filesystem is not None else OsFileSystem()
        self.suffix = suffix

    def scan(self, root: PathLike, recursive: bool = True) -> List[Path]:
        """List files ending in :attr:`suffix` under *root*.

        ``setup.py`` and ``conftest.py`` are never listed.  An inaccessible
        *root* (or sub-directory) is logged and contributes nothing.
        """
        try:
            entries = self.filesystem.list_entries(Path(root))
        except ScanAccessError as exc:
            _log.warning("%s; skipping", exc)
            return []

        found: List[Path] = []
        for entry in entries:
            if entry.name in _PSEUDO_ENTRIES:
                continue
            if entry.is_dir:
                if recursive and self._descend_into(entry.name):
                    found.extend(self.scan(entry.path, recursive=True))
            elif entry.name.endswith(self.suffix) and entry.name not in _NEVER_CANDIDATES:
                found.append(entry.path)
        return found

    def scan_all(self, roots: Iterable[PathLike], recursive: bool = True) -> List[Path]:
        """Scan every root; paths reachable from two roots are listed once."""
        seen: Dict[Path, None] = {}
        for root in roots:
            for path in self.scan(root, recursive=recursive):
                seen.setdefault(path, None)
        return list(seen)

    @staticmethod
    def _descend_into(name: str) -> bool:
        return name != "__pycache__" and not name.startswith(".")


# ═════════════════════════════════════════════════════════════════════════
#  LOADER
# ═════════════════════════════════════════════════════════════════════════

def classes_in(module: ModuleType) -> List[type]:
    """Classes defined by *module* itself, in definition order."""
    return [
        obj for obj in vars(module).values()
        if isinstance(obj, type) and obj.__module__ == module.__name__
    ]


class ModuleLoader:
    """Import discovered files, memoized per resolved path.

    A file below an entry of ``sys.path`` is imported under its dotted name
    so its classes are the very objects the rest of the program imports.
    Anything else is loaded under a synthetic module name.

    A candidate that raises at import time, ``SystemExit`` included, is
    reported as :class:`CandidateLoadError`.
    """

    def __init__(self) -> None:
        self._modules: Dict[Path, ModuleType] = {}
        # resolved __file__ -> module, grown as sys.modules grows
        self._by_file: Dict[Path, ModuleType] = {}
        self._indexed: Set[str] = set()

    def load(self, path: PathLike) -> ModuleType:
        resolved = Path(path).resolve()
        module = self._modules.get(resolved)
        if module is not None:
            return module

        module = self._already_imported(resolved)
        if module is None:
            dotted = self.dotted_name(resolved)
            if dotted is not None:
                module = self._import(dotted, resolved)
            else:
                module = self._exec_file(resolved)
        self._modules[resolved] = module
        return module

    @staticmethod
    def dotted_name(path: Path, search_path: Optional[Sequence[str]] = None) -> Optional[str]:
        """Shortest importable dotted name for *path*, or ``None``."""
        best: Optional[List[str]] = None
        for entry in (sys.path if search_path is None else search_path):
            base = Path(entry or os.getcwd()).resolve()
            try:
                rel = path.relative_to(base)
            except ValueError:
                continue
            parts = list(rel.with_suffix("").parts)
            if parts and parts[-1] == "__init__":
                parts.pop()
            if not parts or not all(p.isidentifier() and not keyword.iskeyword(p) for p in parts):
                continue
            if best is None or len(parts) < len(best):
                best = parts
        return ".".join(best) if best else None

    def _already_imported(self, path: Path) -> Optional[ModuleType]:
        for name, module in list(sys.modules.items()):
            if name in self._indexed:
                continue
            self._indexed.add(name)
            filename = getattr(module, "__file__", None)
            if isinstance(filename, str):
                self._by_file.setdefault(Path(filename).resolve(), module)

        module = self._by_file.get(path)
        if module is not None and sys.modules.get(module.__name__) is not module:
            # dropped from sys.modules since it was indexed
            del self._by_file[path]
            return None
        return module

    @staticmethod
    def _import(name: str, path: Path) -> ModuleType:
        try:
            return importlib.import_module(name)
        except (Exception, SystemExit) as exc:
            raise CandidateLoadError(path, _describe(exc)) from exc

    @staticmethod
    def _exec_file(path: Path) -> ModuleType:
        digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
        name = f"_interface_shims_unit_{path.stem}_{digest}"
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise CandidateLoadError(path, "no import spec")
        module = importlib.util.module_from_spec(spec)
        # inspect.getsource finds class sources through sys.modules
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except (Exception, SystemExit) as exc:
            sys.modules.pop(name, None)
            raise CandidateLoadError(path, _describe(exc)) from exc
        return module

    def __len__(self) -> int:
        return len(self._modules)


def _describe(exc: BaseException) -> str:
    if isinstance(exc, SystemExit):
        return f"exited at import (SystemExit: {exc.code})"
    return f"{type(exc).__name__}: {exc}"
