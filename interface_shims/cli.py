"""
interface_shims/cli.py
======================

``interface-shims`` command line.

Usage
-----
    interface-shims [-v] [--config FILE] <command> [options]

Commands
--------
    check   Audit every class under the roots; report conformance gaps
    scan    List the candidate source files under the roots
    names   Build the Name Registry and list its entries
    info    Show what one class declares and whether it conforms
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
import textwrap
from typing import Any, Optional, Sequence

from . import __version__
from .config import Settings, load_settings
from .diagnostics import DiagnosticSeverity
from .engine import InterfaceEngine
from .errors import ConfigurationError, InterfaceShimsError

__all__ = ["build_parser", "main"]

_log = logging.getLogger("interface_shims")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_VIOLATION: int = 3


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``interface_shims`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("interface_shims")
    root.setLevel(level)
    root.addHandler(handler)


def _settings(args: argparse.Namespace, **overrides: Any) -> Settings:
    settings = load_settings(args.config)
    values = dict(overrides)
    if getattr(args, "dirs", None):
        values["validate_dirs"] = args.dirs
    if values:
        settings = Settings.from_dict(values, base=settings)
    return settings


def _load_target(target: str) -> Any:
    """Import ``package.module:Class.Nested``."""
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ConfigurationError(f"target must look like 'module:Class', got {target!r}")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


# ===========================================================================
# Commands
# ===========================================================================

def cmd_check(args: argparse.Namespace) -> int:
    engine = InterfaceEngine(_settings(args))
    report, diagnostics = engine.audit()
    out = sys.stdout
    for diag in diagnostics:
        out.write((diag.to_json_str() if args.json else diag.to_gcc_format()) + "\n")

    errors = [d for d in diagnostics if d.severity is DiagnosticSeverity.ERROR]
    if not args.json:
        _log.info(
            "%d unit(s) loaded, %d implementer(s) checked, %d problem(s)",
            report.units, len(report.checked), len(diagnostics),
        )
    return EXIT_VIOLATION if errors else EXIT_OK


def cmd_scan(args: argparse.Namespace) -> int:
    engine = InterfaceEngine(_settings(args))
    for path in engine.scanner.scan_all(engine.settings.validate_dirs):
        sys.stdout.write(f"{path}\n")
    return EXIT_OK


def cmd_names(args: argparse.Namespace) -> int:
    engine = InterfaceEngine(_settings(args, allow_string_classes=True))
    engine.names.build(engine.settings.validate_dirs)
    for name, definition in sorted(engine.names.items()):
        sys.stdout.write(f"{name}\t{definition.key}\n")
    return EXIT_OK


def cmd_info(args: argparse.Namespace) -> int:
    engine = InterfaceEngine(_settings(args))
    try:
        target = _load_target(args.target)
    except (ImportError, AttributeError) as exc:
        _log.error("cannot load %s: %s", args.target, exc)
        return EXIT_INFRA
    json.dump(engine.describe(target), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return EXIT_OK


# ===========================================================================
# Parser
# ===========================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``interface-shims`` CLI."""
    parser = argparse.ArgumentParser(
        prog="interface-shims",
        description="Structural interface checks for plain Python classes.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s check game/
              %(prog)s check --json game/items game/actors
              %(prog)s names game/
              %(prog)s info game.items.potion:Potion
        """),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="JSON settings file (default: $INTERFACE_SHIMS_CONFIG or ./interface_shims.json)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # ── check ────────────────────────────────────────────────────────────
    p_check = subparsers.add_parser(
        "check",
        help="Report conformance gaps under the roots",
        description=(
            "Import every module under the roots and check each class that "
            "declares interfaces. Exits 3 when a gap is found."
        ),
    )
    p_check.add_argument("dirs", nargs="*", metavar="DIR",
                         help="Roots to scan (default: validate_dirs)")
    p_check.add_argument("--json", action="store_true", default=False,
                         help="Emit one JSON object per diagnostic")
    p_check.set_defaults(func=cmd_check)

    # ── scan ─────────────────────────────────────────────────────────────
    p_scan = subparsers.add_parser("scan", help="List candidate source files")
    p_scan.add_argument("dirs", nargs="*", metavar="DIR")
    p_scan.set_defaults(func=cmd_scan)

    # ── names ────────────────────────────────────────────────────────────
    p_names = subparsers.add_parser("names", help="List interfaces registered by name")
    p_names.add_argument("dirs", nargs="*", metavar="DIR")
    p_names.set_defaults(func=cmd_names)

    # ── info ─────────────────────────────────────────────────────────────
    p_info = subparsers.add_parser("info", help="Describe one class")
    p_info.add_argument("target", help="module:Class")
    p_info.set_defaults(func=cmd_info)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Returns
    -------
    int
        Exit code (0 = clean, 2 = configuration problem, 3 = violations).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    _configure_logging(args.verbose)
    try:
        return args.func(args)
    except ConfigurationError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    except InterfaceShimsError as exc:
        _log.error("%s", exc)
        return EXIT_ERROR
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        return 130
