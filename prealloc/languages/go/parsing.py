"""Parse Go sources with tree-sitter and resolve node positions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from tree_sitter_language_pack import get_parser

from prealloc.engine.hints import Position
from prealloc.errors import SourceParseError
from prealloc.languages.go.syntax import declaration_specs, named_children, node_text

if TYPE_CHECKING:
    from tree_sitter import Node, Parser, Tree

logger = logging.getLogger(__name__)

_IMPORT_SPECS = frozenset({"import_spec"})


@lru_cache(maxsize=1)
def _go_parser() -> Parser:
    return get_parser("go")


@dataclass(frozen=True)
class GoSourceFile:
    """One parsed file; turns its nodes into positions."""

    filename: str
    source: bytes = field(repr=False)
    tree: Tree = field(repr=False, compare=False)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def position_of(self, node: Node) -> Position:
        row, column = node.start_point
        return Position(self.filename, row + 1, column + 1, node.start_byte)

    @property
    def package_name(self) -> str:
        for child in named_children(self.root):
            if child.type == "package_clause":
                names = named_children(child)
                return node_text(names[0]) if names else ""
        return ""

    @property
    def imports(self) -> list[str]:
        paths: list[str] = []
        for child in named_children(self.root):
            if child.type != "import_declaration":
                continue
            for spec in declaration_specs(child, _IMPORT_SPECS):
                paths.append(node_text(spec.child_by_field_name("path")).strip('"`'))
        return paths

    @property
    def is_cgo(self) -> bool:
        return "C" in self.imports


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def parse_source(source: bytes | str, filename: str = "<source>") -> GoSourceFile:
    """Parse Go source text; reject trees that contain syntax errors."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    tree = _go_parser().parse(source)
    if tree.root_node.has_error:
        error = _first_error(tree.root_node)
        line = error.start_point[0] + 1 if error is not None else None
        raise SourceParseError(filename, "syntax error", line=line)
    return GoSourceFile(filename, source, tree)


def parse_file(path: str | Path) -> GoSourceFile:
    try:
        source = Path(path).read_bytes()
    except OSError as exc:
        raise SourceParseError(str(path), f"could not read file ({exc.strerror or exc})") from exc
    logger.debug("parsing %s", path)
    return parse_source(source, str(path))


__all__ = ["GoSourceFile", "parse_file", "parse_source"]
