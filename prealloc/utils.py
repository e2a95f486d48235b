"""Shared terminal helpers: colors and stderr status lines."""

import os
import sys

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
}

NO_COLOR = os.environ.get("NO_COLOR") is not None


def colorize(text: str, color: str, stream=None) -> str:
    stream = stream if stream is not None else sys.stdout
    if NO_COLOR or not stream.isatty():
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def log(msg: str):
    """Print a dim status message to stderr."""
    print(colorize(msg, "dim", sys.stderr), file=sys.stderr)
