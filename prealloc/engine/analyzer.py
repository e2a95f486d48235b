"""Walk parsed Go files function by function and collect preallocation hints."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prealloc.engine.aliases import TypeAliasRegistry
from prealloc.engine.declarations import DeclarationTracker, SliceDeclaration
from prealloc.engine.hints import Hint
from prealloc.engine.loops import LoopOptions, LoopScan, scan_loop
from prealloc.languages.go.syntax import (
    FUNCTION_NODES,
    TYPE_SPEC_NODES,
    block_statements,
    node_text,
    preorder,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from prealloc.languages.go.parsing import GoSourceFile

logger = logging.getLogger(__name__)


@dataclass
class FunctionScope:
    """State that lives exactly as long as the scan of one function."""

    name: str
    declarations: list[SliceDeclaration] = field(default_factory=list)
    hints: list[Hint] = field(default_factory=list)
    early_exit: bool = False

    def absorb(self, scan: LoopScan) -> None:
        self.hints.extend(scan.hints)
        # Sticky: one early exit anywhere taints the whole function.
        self.early_exit = self.early_exit or scan.early_exit


def keep_function_hints(scope: FunctionScope, *, simple: bool) -> bool:
    """Simple mode drops every hint of a function that has an early exit."""
    return not (simple and scope.early_exit)


def scan_function(
    function: Node,
    source_file: GoSourceFile,
    options: LoopOptions,
    registry: TypeAliasRegistry,
) -> FunctionScope:
    tracker = DeclarationTracker(registry, source_file.position_of)
    scope = FunctionScope(
        name=node_text(function.child_by_field_name("name")),
        declarations=tracker.declarations,
    )
    for statement in block_statements(function.child_by_field_name("body")):
        if tracker.visit(statement):
            continue
        if statement.type != "for_statement":
            continue
        scan = scan_loop(statement, scope.declarations, options, function)
        if scan is not None:
            scope.absorb(scan)
    return scope


def analyze_file(
    source_file: GoSourceFile,
    options: LoopOptions,
    registry: TypeAliasRegistry,
) -> list[Hint]:
    """Scan one file in source order.

    Type declarations anywhere in the file feed the registry as they are
    reached, so an alias is visible to everything scanned after it.
    """
    hints: list[Hint] = []
    for node in preorder(source_file.root):
        if node.type in TYPE_SPEC_NODES:
            registry.register_if_array_like(
                node_text(node.child_by_field_name("name")),
                node.child_by_field_name("type"),
            )
            continue
        if node.type not in FUNCTION_NODES or node.child_by_field_name("body") is None:
            continue
        scope = scan_function(node, source_file, options, registry)
        if keep_function_hints(scope, simple=options.simple):
            hints.extend(scope.hints)
        elif scope.hints:
            logger.debug(
                "%s: dropped %d hint(s) in %s (early exit inside a loop)",
                source_file.filename,
                len(scope.hints),
                scope.name,
            )
    return hints


def analyze(
    files: Iterable[GoSourceFile],
    *,
    simple: bool = True,
    include_range_loops: bool = True,
    include_for_loops: bool = False,
    registry: TypeAliasRegistry | None = None,
) -> list[Hint]:
    """Return hints for every file, in file, function and statement order."""
    options = LoopOptions(
        simple=simple,
        include_range_loops=include_range_loops,
        include_for_loops=include_for_loops,
    )
    if registry is None:
        registry = TypeAliasRegistry()
    hints: list[Hint] = []
    for source_file in files:
        file_hints = analyze_file(source_file, options, registry)
        logger.debug("%s: %d hint(s)", source_file.filename, len(file_hints))
        hints.extend(file_hints)
    return hints


__all__ = [
    "FunctionScope",
    "analyze",
    "analyze_file",
    "keep_function_hints",
    "scan_function",
]
