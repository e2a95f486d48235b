"""Prealloc: suggest preallocating Go slices that are grown inside loops."""

from prealloc.engine.analyzer import analyze
from prealloc.engine.hints import Hint, Position

__all__ = ["Hint", "Position", "analyze"]
