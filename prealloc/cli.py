"""CLI entry point: parse args, load config and sources, print hints."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from prealloc.cli_parser import build_parser
from prealloc.config import load_config
from prealloc.engine.analyzer import analyze
from prealloc.errors import PreallocError
from prealloc.languages.go.sources import load_sources
from prealloc.output import RENDERERS
from prealloc.utils import colorize, log

logger = logging.getLogger(__name__)

EXIT_HINTS_FOUND = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("prealloc")
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _resolve_settings(args, config: dict) -> dict:
    """Explicit flags win over config values, which win over defaults."""
    settings = dict(config)
    for key in ("simple", "rangeloops", "forloops", "set_exit_status", "format"):
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value
    cli_exclusions = list(getattr(args, "exclude", None) or [])
    persisted = settings.get("exclude", [])
    settings["exclude"] = cli_exclusions + [e for e in persisted if e not in cli_exclusions]
    return settings


def run(argv: list[str] | None = None) -> int:
    """Run the tool and return the process exit status."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_config(Path(args.config) if args.config else None)
        settings = _resolve_settings(args, config)
        exclusions = tuple(settings["exclude"])
        if exclusions:
            log(f"  Excluding: {', '.join(exclusions)}")
        files = load_sources(args.paths, exclusions=exclusions)
    except PreallocError as exc:
        print(colorize(f"  {exc.message}", "red", sys.stderr), file=sys.stderr)
        return EXIT_ERROR

    logger.debug("analyzing %d file(s)", len(files))
    hints = analyze(
        files,
        simple=settings["simple"],
        include_range_loops=settings["rangeloops"],
        include_for_loops=settings["forloops"],
    )
    sys.stdout.write(RENDERERS[settings["format"]](hints))

    if settings["set_exit_status"] and hints:
        return EXIT_HINTS_FOUND
    return 0


def main(argv: list[str] | None = None) -> None:
    try:
        status = run(argv)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        status = EXIT_INTERRUPTED
    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
