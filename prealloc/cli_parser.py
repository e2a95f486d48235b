"""Parser construction for the CLI entrypoint."""

from __future__ import annotations

import argparse

from prealloc.config import OUTPUT_FORMATS

USAGE_EXAMPLES = """
arguments:
  (none)            analyze the package in the current directory
  dir               analyze the .go files directly inside dir
  dir/...           analyze every package below dir
  file.go           analyze one file
  import/path       analyze a package found through go.mod or $GOPATH

examples:
  prealloc ./...
  prealloc --forloops --no-simple ./internal/...
  prealloc --set_exit_status --format json ./cmd/server
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser; switches default to None so config can fill them."""
    parser = argparse.ArgumentParser(
        prog="prealloc",
        description="Find slice declarations that could be preallocated",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files, directories, dir/... patterns or import paths",
    )
    parser.add_argument(
        "--simple",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Report suggestions only on functions whose loops have no "
            "returns/breaks/continues/gotos (default: on)"
        ),
    )
    parser.add_argument(
        "--rangeloops",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report suggestions on range loops (default: on)",
    )
    parser.add_argument(
        "--forloops",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Report suggestions on for loops (default: off)",
    )
    parser.add_argument(
        "--set_exit_status",
        "--set-exit-status",
        dest="set_exit_status",
        action="store_true",
        default=None,
        help="Set exit status to 1 if any issues are found",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="PATTERN",
        help="Path pattern to exclude (repeatable: --exclude gen --exclude mocks)",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Config file path override (default: .prealloc/config.json)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log discovery and analysis decisions to stderr",
    )
    return parser
