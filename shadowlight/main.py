#!/usr/bin/env python3
"""shadowlight/main.py — CLI entry-point.

Usage examples
--------------
    # Report shadowed bindings in specific files (globs accepted)
    shadowlight light -F src/main.rs 'src/**/*.rs'

    # Walk a directory; only files with shadowing are reported
    shadowlight light -d crates/

    # Machine-readable output, non-zero exit when anything is shadowed
    shadowlight light -d . --format json --strict

    # Attribute bindings the way cargo-light did
    shadowlight light -d . --scope-mode last-opened --flat-patterns

    # Show how a file was understood (debugging aid)
    shadowlight parse src/lib.rs --format json

Exit codes
----------
    0   Success.
    1   Shadowing found and ``--strict`` given.
    2   Infrastructure failure (a named file could not be read or
        analysed, bad arguments; for ``parse``, the file
        could not be read or parsed).
    130 Interrupted.

The module doubles as ``python -m shadowlight`` via the companion
``shadowlight/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence, TextIO

from shadowlight import __version__
from shadowlight.config import AnalysisConfig, ScopeMode
from shadowlight.discovery import expand_file_args
from shadowlight.driver import FileResult, read_source, run_directory, run_files
from shadowlight.errors import ConfigError, SourceParseError, SourceReadError
from shadowlight.parser import parse_source
from shadowlight.report import render, render_json, render_outline
from shadowlight.visitor import OutlineVisitor

_log = logging.getLogger("shadowlight")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``shadowlight`` logger.

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
    handler.set_name("shadowlight-cli")
    root = logging.getLogger("shadowlight")
    for old in [h for h in root.handlers if h.get_name() == "shadowlight-cli"]:
        root.removeHandler(old)
    root.setLevel(level)
    root.addHandler(handler)


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _use_color(mode: str, stream: TextIO) -> bool:
    if mode == "always":
        return True
    if mode == "never":
        return False
    if "NO_COLOR" in os.environ:
        return False
    return hasattr(stream, "isatty") and stream.isatty()


# ===========================================================================
# Sub-commands
# ===========================================================================

def cmd_light(args: argparse.Namespace) -> int:
    """Report shadowed ``let`` bindings."""
    try:
        config = AnalysisConfig.from_args(args)
    except ConfigError as exc:
        _log.error("%s", exc.message)
        return EXIT_INFRA

    out = _open_output(args.output)
    try:
        color = _use_color(args.color, out)

        def emit_text(result: FileResult) -> None:
            out.write(render(result.state, color=color))
            out.flush()

        emit = emit_text if args.format == "text" else None
        if args.files:
            if args.directory:
                _log.info("--files given; ignoring --directory %s", args.directory)
            batch = run_files(expand_file_args(args.files), config, emit)
        else:
            batch = run_directory(args.directory or ".", config, emit)

        if args.format == "json":
            printed = [r.state for r in batch.results if r.should_print]
            errors = [e.to_dict() for e in batch.errors]
            out.write(render_json(printed, errors) + "\n")
    finally:
        if out is not sys.stdout:
            out.close()

    return batch.exit_code(strict=args.strict)


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a Rust file and print its outline.

    Useful for debugging the front-end without running any analysis.
    """
    try:
        source = parse_source(read_source(args.source_file), args.source_file)
    except SourceReadError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA
    except SourceParseError as exc:
        _log.error("Parse error: %s", exc)
        return EXIT_INFRA

    outline = OutlineVisitor().visit(source)
    out = _open_output(args.output)
    try:
        if args.format == "json":
            out.write(json.dumps(outline, indent=2) + "\n")
        else:
            out.write(render_outline(outline) + "\n")
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    # --- Top-level parser --------------------------------------------------
    parser = argparse.ArgumentParser(
        prog="shadowlight",
        description=(
            "shadowlight — find shadowed local bindings in Rust sources.\n\n"
            "Every `let` inside a function or method body is recorded; a name\n"
            "bound more than once in the same body is reported with the lines\n"
            "of its original binding and of each shadowing one."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              shadowlight light -F src/main.rs
              shadowlight light -d . --format json
              shadowlight parse src/lib.rs
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_output_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )

    # --- light -------------------------------------------------------------
    p_light = subparsers.add_parser(
        "light",
        help="Find and print shadowed variables.",
        description="Find and print potential usages of shadowed variables.",
    )
    src = p_light.add_argument_group("sources")
    src.add_argument(
        "-F", "--files",
        nargs="+",
        action="extend",
        default=None,
        metavar="FILE",
        help="Files to be parsed (globs accepted). Always reported.",
    )
    src.add_argument(
        "-d", "--directory",
        default=None,
        metavar="DIR",
        help="Directory to walk (default: .). Only shadowed files are reported.",
    )
    src.add_argument(
        "--ext",
        action="append",
        default=None,
        metavar="EXT",
        help="Source extension for directory walks (repeatable, default: .rs).",
    )
    src.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="GLOB",
        help="Skip paths matching GLOB during directory walks (repeatable).",
    )
    src.add_argument(
        "--follow-symlinks",
        action="store_true",
        help="Walk into symlinked directories.",
    )

    g = p_light.add_argument_group("analysis")
    g.add_argument(
        "--scope-mode",
        choices=[m.value for m in ScopeMode],
        default=ScopeMode.LEXICAL.value,
        help="Attribute bindings to the innermost enclosing function (lexical, "
             "default) or to the most recently opened one (last-opened).",
    )
    g.add_argument(
        "--flat-patterns",
        action="store_true",
        help="Only consider identifiers at the top level of a pattern.",
    )

    _add_output_arg(p_light)
    p_light.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text).",
    )
    p_light.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Colourize text output (default: auto).",
    )
    p_light.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any shadowing is found.",
    )
    p_light.set_defaults(func=cmd_light)

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser(
        "parse",
        help="Parse a Rust file and print its outline (debugging aid).",
    )
    p_parse.add_argument("source_file", metavar="SOURCE", help="Rust source file.")
    _add_output_arg(p_parse)
    p_parse.add_argument(
        "-f", "--format",
        choices=["tree", "json"],
        default="tree",
        help="Outline format (default: tree).",
    )
    p_parse.set_defaults(func=cmd_parse)

    return parser


# ===========================================================================
# Main
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the shadowlight CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130  # Standard UNIX convention for SIGINT
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
