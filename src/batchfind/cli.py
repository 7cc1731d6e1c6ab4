#!/usr/bin/env python3
"""
batchfind: Discover named units below a namespace with dotted glob patterns

Common usage:
  batchfind myproject.tests
  batchfind --include '**.test_*' --exclude '**.slow.**' myproject.tests
  batchfind --dir tests --include '**.test_*'

Patterns match dotted qualified names: `*` matches one segment, `**` matches
any number of segments, and `?` or `*` inside a segment match characters.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path

from batchfind.config import find_config_file, load_config, merge_cli_with_config
from batchfind.discovery import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DirectoryResolver,
    DiscoveryConfig,
    DiscoveryError,
    NamespaceWalker,
    PackageResolver,
    Resolver,
)
from batchfind.discovery.defaults import DEFAULT_SUFFIXES

# Root arguments that stand for the top level namespace.
_TOP_LEVEL_ROOTS = frozenset({"", "."})


@dataclass
class Options:
    """Command-line options for the batchfind tool."""

    root: str
    include: str
    exclude: str
    sort_names: bool
    dirs: list[str]
    suffixes: list[str]
    respect_gitignore: bool
    verbose: bool
    version: bool


def _build_parser() -> argparse.ArgumentParser:
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    parser = argparse.ArgumentParser(
        prog="batchfind",
        description=doc_parts[0],
        epilog="\n\n".join(doc_parts[1:]),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Root namespace, e.g. 'myproject.tests' (use '.' for the top level;"
        " may be omitted with --dir)",
    )
    parser.add_argument(
        "--include",
        default=None,
        metavar="PATTERN",
        help=f"Names to include (default: {DEFAULT_INCLUDE})",
    )
    parser.add_argument(
        "--exclude",
        default=None,
        metavar="PATTERN",
        help="Names to exclude, checked after --include (default: exclude nothing)",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        default=None,
        dest="sort_names",
        help="Sort discovered names instead of keeping discovery order",
    )
    parser.add_argument(
        "--dir",
        action="append",
        default=[],
        dest="dirs",
        metavar="DIR",
        help="Walk this directory tree instead of importable packages. Can be repeated",
    )
    parser.add_argument(
        "--suffix",
        action="append",
        default=None,
        dest="suffixes",
        metavar="SUFFIX",
        help="File suffix of leaves in --dir trees (default: .py). Can be repeated",
    )
    parser.add_argument(
        "--no-respect-gitignore",
        action="store_false",
        default=None,
        dest="respect_gitignore",
        help="Disable .gitignore integration for --dir trees",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log discovery steps")
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    return parser


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`. Options that default to `None` in the
    parser are only in `explicit_flags` when given on the command line, so a
    config file can fill in the rest.
    """
    parser = _build_parser()
    opts = parser.parse_args(args)

    # Without --dir the top level is all of sys.path, so it must be asked for explicitly.
    if opts.root is None:
        if not opts.dirs and not opts.version:
            parser.error("ROOT is required unless --dir is given (use '.' for the top level)")
        opts.root = "."

    explicit_flags = {
        name
        for name in ("include", "exclude", "sort_names", "suffixes", "respect_gitignore")
        if getattr(opts, name) is not None
    }

    return (
        Options(
            root=opts.root,
            include=opts.include,
            exclude=opts.exclude,
            sort_names=opts.sort_names,
            dirs=opts.dirs,
            suffixes=opts.suffixes,
            respect_gitignore=opts.respect_gitignore,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _apply_defaults(options: Options) -> None:
    """Fill options left unset by both the command line and the config file."""
    defaults = {
        "include": DEFAULT_INCLUDE,
        "exclude": DEFAULT_EXCLUDE,
        "sort_names": False,
        "suffixes": list(DEFAULT_SUFFIXES),
        "respect_gitignore": True,
    }
    for opt_field in fields(Options):
        if opt_field.name in defaults and getattr(options, opt_field.name) is None:
            setattr(options, opt_field.name, defaults[opt_field.name])


def _make_resolver(options: Options) -> Resolver:
    if options.dirs:
        return DirectoryResolver(
            options.dirs,
            suffixes=options.suffixes,
            respect_gitignore=options.respect_gitignore,
        )
    return PackageResolver()


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the batchfind CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for discovery errors)
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            version = importlib.metadata.version("batchfind")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config_path = find_config_file(Path.cwd())
    if config_path:
        merge_cli_with_config(options, load_config(config_path), explicit_flags)
    _apply_defaults(options)

    root = "" if options.root in _TOP_LEVEL_ROOTS else options.root
    walker = NamespaceWalker(
        DiscoveryConfig(
            include=options.include,
            exclude=options.exclude,
            sort_names=options.sort_names,
        )
    )

    try:
        names = walker.discover(root, _make_resolver(options))
    except DiscoveryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name in names:
        print(name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
