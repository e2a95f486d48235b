"""Errors raised while turning CLI input into parsed Go files."""

from __future__ import annotations


class PreallocError(Exception):
    """Base class; ``message`` is what the CLI shows the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SourceResolutionError(PreallocError):
    """An argument names no file, directory or importable package."""


class SourceParseError(PreallocError):
    """A Go source could not be read or did not parse cleanly."""

    def __init__(self, filename: str, message: str, *, line: int | None = None) -> None:
        self.filename = filename
        self.line = line
        location = f"{filename}:{line}" if line is not None else filename
        super().__init__(f"{location}: {message}")


class ConfigError(PreallocError):
    """The config file is unreadable or holds an invalid value."""


__all__ = ["ConfigError", "PreallocError", "SourceParseError", "SourceResolutionError"]
