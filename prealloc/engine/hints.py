"""Hint records and the source positions they point at."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    """A resolved source location (1-based line, 1-based byte column)."""

    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Hint:
    """A slice declaration that could be preallocated.

    ``position`` is where the slice was *declared*, never where it was
    appended to.
    """

    position: Position
    declared_slice_name: str

    @property
    def message(self) -> str:
        return f"Consider preallocating {self.declared_slice_name}"

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"


__all__ = ["Hint", "Position"]
