"""Per-function tracking of slice-typed ``var`` declarations."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prealloc.engine.aliases import TypeAliasRegistry
from prealloc.engine.hints import Position
from prealloc.languages.go.syntax import (
    ARRAY_LIKE_TYPES,
    TYPE_SPEC_NODES,
    declaration_specs,
    field_children,
    node_text,
)

if TYPE_CHECKING:
    from tree_sitter import Node

_VAR_SPECS = frozenset({"var_spec"})


@dataclass(frozen=True)
class SliceDeclaration:
    """One slice variable; names declared together share ``declaration``."""

    name: str
    position: Position
    declaration: Node = field(compare=False, repr=False)


def register_type_declaration(declaration: Node, registry: TypeAliasRegistry) -> None:
    for spec in declaration_specs(declaration, TYPE_SPEC_NODES):
        registry.register_if_array_like(
            node_text(spec.child_by_field_name("name")),
            spec.child_by_field_name("type"),
        )


def is_slice_type(type_node: Node | None, registry: TypeAliasRegistry) -> bool:
    # No annotation means the type is inferred from the initializer: never tracked.
    if type_node is None:
        return False
    if type_node.type in ARRAY_LIKE_TYPES:
        return True
    return type_node.type == "type_identifier" and node_text(type_node) in registry


def declared_slice_names(declaration: Node, registry: TypeAliasRegistry) -> list[str]:
    """Names introduced by a ``var`` declaration whose declared type is a slice."""
    names: list[str] = []
    for spec in declaration_specs(declaration, _VAR_SPECS):
        if is_slice_type(spec.child_by_field_name("type"), registry):
            names.extend(node_text(name) for name in field_children(spec, "name"))
    return names


class DeclarationTracker:
    """Collects slice declarations from a function's direct statements.

    Statements are fed one at a time so a loop only sees the declarations
    that precede it.
    """

    def __init__(
        self,
        registry: TypeAliasRegistry,
        locate: Callable[[Node], Position],
    ) -> None:
        self.registry = registry
        self._locate = locate
        self.declarations: list[SliceDeclaration] = []

    def visit(self, statement: Node) -> bool:
        """Process one statement; return True when it was a declaration."""
        if statement.type == "type_declaration":
            register_type_declaration(statement, self.registry)
            return True
        if statement.type == "var_declaration":
            names = declared_slice_names(statement, self.registry)
            if names:
                position = self._locate(statement)
                self.declarations.extend(
                    SliceDeclaration(name, position, statement) for name in names
                )
            return True
        return False


def scan_function_body(
    statements: Iterable[Node],
    registry: TypeAliasRegistry,
    locate: Callable[[Node], Position],
) -> list[SliceDeclaration]:
    tracker = DeclarationTracker(registry, locate)
    for statement in statements:
        tracker.visit(statement)
    return tracker.declarations


__all__ = [
    "DeclarationTracker",
    "SliceDeclaration",
    "declared_slice_names",
    "is_slice_type",
    "register_type_declaration",
    "scan_function_body",
]
