"""
interface_shims/config.py
=========================

Engine settings.

Resolution order used by :func:`load_settings`:

  1. an explicit JSON file path
  2. ``$INTERFACE_SHIMS_CONFIG``
  3. ``./interface_shims.json`` if it exists
  4. built-in defaults

then per-key environment overrides (``INTERFACE_SHIMS_RUNTIME_VALIDATION``,
``INTERFACE_SHIMS_STRICT_VALIDATION``, ``INTERFACE_SHIMS_ALLOW_STRING_CLASSES``,
``INTERFACE_SHIMS_VALIDATE_DIRS``) are applied on top.

Example ``interface_shims.json``::

    {
        "runtime_validation": false,
        "strict_validation": true,
        "allow_string_classes": true,
        "validate_dirs": ["game/items", "game/actors"]
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .conformance import OnFailure
from .errors import ConfigurationError

__all__ = ["Settings", "load_settings", "CONFIG_FILENAME", "ENV_PREFIX"]

CONFIG_FILENAME = "interface_shims.json"
ENV_PREFIX = "INTERFACE_SHIMS_"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def _project_root() -> Tuple[Path, ...]:
    return (Path.cwd(),)


@dataclass(frozen=True)
class Settings:
    """
    Attributes
    ----------
    runtime_validation   : skip the startup pass; check on first use and raise
    strict_validation    : default ``validate`` for ``implements``
    allow_string_classes : build the Name Registry and accept string names
    validate_dirs        : roots for discovery and the Name Registry
    """
    runtime_validation: bool = False
    strict_validation: bool = True
    allow_string_classes: bool = False
    validate_dirs: Tuple[Path, ...] = field(default_factory=_project_root)

    @property
    def default_validate(self) -> bool:
        return self.strict_validation

    @property
    def default_on_failure(self) -> OnFailure:
        if self.runtime_validation:
            return OnFailure.RAISE_FATAL
        return OnFailure.RETURN_FALSE

    # ── constructors ─────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional["Settings"] = None) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown setting(s): {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, raw in data.items():
            if key == "validate_dirs":
                values[key] = _as_dirs(raw)
            else:
                if not isinstance(raw, bool):
                    raise ConfigurationError(
                        f"setting '{key}' must be a boolean, got {raw!r}")
                values[key] = raw
        return replace(base if base is not None else cls(), **values)

    @classmethod
    def from_file(cls, path: "os.PathLike[str] | str") -> "Settings":
        p = Path(path).expanduser()
        try:
            with open(p, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except OSError as exc:
            raise ConfigurationError(f"cannot read settings file {p}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"settings file {p} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"settings file {p} must hold a JSON object")
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["Settings"] = None,
    ) -> "Settings":
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in ("runtime_validation", "strict_validation", "allow_string_classes"):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = _parse_bool(ENV_PREFIX + name.upper(), raw)
        dirs = env.get(ENV_PREFIX + "VALIDATE_DIRS")
        if dirs:
            values["validate_dirs"] = [d for d in dirs.split(os.pathsep) if d]
        return cls.from_dict(values, base=base)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runtime_validation": self.runtime_validation,
            "strict_validation": self.strict_validation,
            "allow_string_classes": self.allow_string_classes,
            "validate_dirs": [str(d) for d in self.validate_dirs],
        }


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


def _as_dirs(raw: Any) -> Tuple[Path, ...]:
    if isinstance(raw, (str, os.PathLike)):
        raw = [raw]
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ConfigurationError("validate_dirs must be a path or a non-empty list of paths")
    dirs = []
    for item in raw:
        if not isinstance(item, (str, os.PathLike)):
            raise ConfigurationError(f"validate_dirs entry must be a path, got {item!r}")
        dirs.append(Path(item).expanduser().resolve())
    return tuple(dirs)


def load_settings(
    path: "os.PathLike[str] | str | None" = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve settings from file and environment (see module docstring)."""
    env = os.environ if environ is None else environ
    if path is None:
        path = env.get(ENV_PREFIX + "CONFIG") or None
    if path is None and Path(CONFIG_FILENAME).is_file():
        path = CONFIG_FILENAME
    base = Settings.from_file(path) if path is not None else Settings()
    return Settings.from_env(env, base=base)
