#!/usr/bin/env python3
"""
goextract CLI - pull one Go function and everything it needs into a standalone file.

Usage:
    goextract extract [function] [--dir DIR] [-o OUT]   Write function + dependencies
    goextract deps <function> [--dir DIR]               List the dependency closure
    goextract symbols [--dir DIR]                       List package-level symbols
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .api import extract_function, list_symbols, write_extraction
from .config import load_config
from .errors import is_error
from .token_utils import extraction_summary


def _machine_output(result: dict | list, args) -> None:
    """Print result as JSON; --machine wraps it in {"success": true, "result": ...}."""
    if getattr(args, "machine", False):
        wrapped = {"success": True, "result": result}
        print(json.dumps(wrapped, separators=(",", ":"), ensure_ascii=False))
    else:
        print(json.dumps(result, indent=2))


def _fail(error: dict, args) -> None:
    if getattr(args, "machine", False):
        print(json.dumps(error, separators=(",", ":"), ensure_ascii=False))
    else:
        print(f"Error: {error.get('message', 'unknown error')}", file=sys.stderr)
    sys.exit(1)


def _configure_logging(verbosity: int) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _prompt_extract_args(args) -> None:
    """Ask for directory, function name and output file on the terminal."""
    from rich.prompt import Prompt

    args.dir = Prompt.ask("Directory to analyze", default=args.dir or ".")
    args.function = Prompt.ask("Name of the function to extract").strip()
    default_output = args.output or load_config(args.dir).output
    args.output = Prompt.ask("Output file", default=default_output)


def _run_extract(args) -> None:
    if not args.function:
        _prompt_extract_args(args)
    if not args.function:
        print("Error: no function name given", file=sys.stderr)
        sys.exit(1)

    config = load_config(args.dir).with_overrides(
        include_tests=True if args.include_tests else None,
        include_imports=False if args.no_imports else None,
        output=args.output,
    )
    result = extract_function(args.dir, args.function, config=config, package=args.package)
    if is_error(result):
        _fail(result, args)

    text = result.render(include_imports=config.include_imports)
    count = len(result.declarations)
    if args.stdout:
        sys.stdout.write(text)
        print(extraction_summary(None, count, text), file=sys.stderr)
        return

    out_path = write_extraction(result, config.output, include_imports=config.include_imports)
    if getattr(args, "machine", False):
        payload = result.to_dict()
        payload["output"] = str(out_path)
        _machine_output(payload, args)
    else:
        print(extraction_summary(out_path, count, text))


def _run_deps(args) -> None:
    config = load_config(args.dir).with_overrides(include_tests=True if args.include_tests else None)
    result = extract_function(args.dir, args.function, config=config, package=args.package)
    if is_error(result):
        _fail(result, args)
    _machine_output(result.to_dict(), args)


def _run_symbols(args) -> None:
    config = load_config(args.dir).with_overrides(include_tests=True if args.include_tests else None)
    result = list_symbols(args.dir, config=config, package=args.package)
    if is_error(result):
        _fail(result, args)
    _machine_output(result, args)


def _add_package_args(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("--dir", "-d", default=".", help="Package directory (default: .)")
    sub.add_argument("--package", "-p", help="Package name when the directory holds several")
    sub.add_argument(
        "--include-tests",
        action="store_true",
        help="Also read _test.go files",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goextract",
        description="Extract a Go function and its package-level dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Version: %(prog)s """ + __version__ + """

Examples:
    goextract extract DoStuff --dir ./example       # writes output.go
    goextract extract DoStuff --stdout              # print instead of writing
    goextract extract                               # interactive prompts
    goextract deps DoStuff --dir ./example          # JSON closure listing
    goextract symbols --dir ./example               # JSON symbol table

Configuration:
    <dir>/.goextract.json may set includeTests, excludePatterns,
    onDuplicate (replace|warn|error), includeImports and output.
    GOEXTRACT_INCLUDE_TESTS and GOEXTRACT_ON_DUPLICATE override the file.
        """,
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
        help="More logging (-v info, -vv debug)",
    )
    parser.add_argument(
        "--machine",
        action="store_true",
        help="Machine-readable output (JSON envelope and structured error codes)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # goextract extract [function]
    extract_p = subparsers.add_parser("extract", help="Write a function and its dependencies")
    extract_p.add_argument("function", nargs="?", help="Function to extract (prompted if omitted)")
    _add_package_args(extract_p)
    extract_p.add_argument("--output", "-o", help="Output file (default: output.go)")
    extract_p.add_argument("--stdout", action="store_true", help="Print the result instead of writing a file")
    extract_p.add_argument("--no-imports", action="store_true", help="Do not carry over import declarations")
    extract_p.set_defaults(handler=_run_extract)

    # goextract deps <function>
    deps_p = subparsers.add_parser("deps", help="List the dependency closure of a function")
    deps_p.add_argument("function", help="Function name")
    _add_package_args(deps_p)
    deps_p.set_defaults(handler=_run_deps)

    # goextract symbols
    symbols_p = subparsers.add_parser("symbols", help="List package-level declarations")
    _add_package_args(symbols_p)
    symbols_p.set_defaults(handler=_run_symbols)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command != "extract" and not Path(args.dir).is_dir():
        print(f"Error: Directory not found: {args.dir}", file=sys.stderr)
        sys.exit(1)

    args.handler(args)


if __name__ == "__main__":
    main()
