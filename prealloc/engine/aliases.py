"""Run-wide registry of named types whose underlying type is an array or slice."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prealloc.languages.go.syntax import ARRAY_LIKE_TYPES

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)


class TypeAliasRegistry:
    """Grow-only set of slice/array type names.

    Shared by every file and function of one run; a name registered while
    scanning one function is visible to every declaration scanned after it.
    """

    def __init__(self, names=()) -> None:
        self._names: set[str] = set(names)

    def register_if_array_like(self, name: str, type_node: Node | None) -> bool:
        """Record ``name`` when ``type_node`` is a literal array/slice type."""
        if not name or type_node is None or type_node.type not in ARRAY_LIKE_TYPES:
            return False
        if name not in self._names:
            logger.debug("registered slice type alias %s", name)
            self._names.add(name)
        return True

    def names(self) -> frozenset[str]:
        return frozenset(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"TypeAliasRegistry({sorted(self._names)!r})"


__all__ = ["TypeAliasRegistry"]
