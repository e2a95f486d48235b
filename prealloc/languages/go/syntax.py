"""Small helpers over tree-sitter Go syntax nodes.

tree-sitter keeps comments as named nodes wherever they appear, so every
helper here that lists children filters them out.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

FUNCTION_NODES = frozenset({"function_declaration", "method_declaration"})
TYPE_SPEC_NODES = frozenset({"type_spec", "type_alias"})
ARRAY_LIKE_TYPES = frozenset({"slice_type", "array_type"})
ASSIGNMENT_NODES = frozenset({"assignment_statement", "short_var_declaration"})
EARLY_EXIT_NODES = frozenset(
    {
        "return_statement",
        "break_statement",
        "continue_statement",
        "goto_statement",
        "fallthrough_statement",
    }
)

# Grammar versions differ on whether these wrappers are visible.
_LIST_WRAPPERS = frozenset(
    {
        "statement_list",
        "var_spec_list",
        "type_spec_list",
        "const_spec_list",
        "import_spec_list",
    }
)


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def named_children(node: Node | None) -> list[Node]:
    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def field_children(node: Node, field: str) -> list[Node]:
    return [
        child
        for child in node.children_by_field_name(field)
        if child.type != "comment"
    ]


def _unwrap_lists(children: Iterable[Node]) -> Iterator[Node]:
    for child in children:
        if child.type in _LIST_WRAPPERS:
            yield from named_children(child)
        else:
            yield child


def block_statements(block: Node | None) -> list[Node]:
    """Return the direct statements of a ``block`` (no nested blocks)."""
    return list(_unwrap_lists(named_children(block)))


def declaration_specs(declaration: Node, spec_types: frozenset[str]) -> list[Node]:
    """Return the specs of a var/type/const declaration, grouped or not."""
    return [
        child
        for child in _unwrap_lists(named_children(declaration))
        if child.type in spec_types
    ]


def expression_items(node: Node | None) -> list[Node]:
    """Flatten an ``expression_list`` into its expressions."""
    if node is None:
        return []
    if node.type == "expression_list":
        return named_children(node)
    return [node]


def is_identifier(node: Node | None, name: str | None = None) -> bool:
    if node is None or node.type != "identifier":
        return False
    return name is None or node_text(node) == name


def preorder(root: Node) -> Iterator[Node]:
    """Yield named nodes depth-first in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(named_children(node)))


__all__ = [
    "ARRAY_LIKE_TYPES",
    "ASSIGNMENT_NODES",
    "EARLY_EXIT_NODES",
    "FUNCTION_NODES",
    "TYPE_SPEC_NODES",
    "block_statements",
    "declaration_specs",
    "expression_items",
    "field_children",
    "is_identifier",
    "named_children",
    "node_text",
    "preorder",
]
