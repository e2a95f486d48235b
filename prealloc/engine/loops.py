"""Self-append matching and early-exit detection inside loop bodies.

Only the loop body's direct statements are examined, and for ``if``
statements only the statements directly inside the consequence block.
Nested conditionals, switches and labeled blocks are not searched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prealloc.engine.declarations import SliceDeclaration
from prealloc.engine.hints import Hint
from prealloc.languages.go.syntax import (
    ASSIGNMENT_NODES,
    EARLY_EXIT_NODES,
    block_statements,
    declaration_specs,
    expression_items,
    field_children,
    is_identifier,
    named_children,
    node_text,
)

if TYPE_CHECKING:
    from tree_sitter import Node

logger = logging.getLogger(__name__)

_VAR_SPECS = frozenset({"var_spec"})
_CONST_SPECS = frozenset({"const_spec"})
_TYPE_SPECS = frozenset({"type_spec", "type_alias"})
_PARAMETER_NODES = frozenset(
    {"parameter_declaration", "variadic_parameter_declaration"}
)


@dataclass(frozen=True)
class LoopOptions:
    simple: bool = True
    include_range_loops: bool = True
    include_for_loops: bool = False


@dataclass
class LoopScan:
    hints: list[Hint] = field(default_factory=list)
    early_exit: bool = False


# ── Range target resolution ──────────────────────────────


@dataclass(frozen=True)
class _Binding:
    """A declaration of a name; ``type_node`` is None when not annotated."""

    type_node: Node | None


def range_clause_of(loop: Node) -> Node | None:
    for child in named_children(loop):
        if child.type == "range_clause":
            return child
    return None


def _binding_in_statement(statement: Node, name: str) -> _Binding | None:
    kind = statement.type
    if kind == "var_declaration":
        for spec in declaration_specs(statement, _VAR_SPECS):
            if any(is_identifier(n, name) for n in field_children(spec, "name")):
                return _Binding(spec.child_by_field_name("type"))
    elif kind == "short_var_declaration":
        left = expression_items(statement.child_by_field_name("left"))
        if any(is_identifier(n, name) for n in left):
            return _Binding(None)
    elif kind == "const_declaration":
        for spec in declaration_specs(statement, _CONST_SPECS):
            if any(is_identifier(n, name) for n in field_children(spec, "name")):
                return _Binding(None)
    elif kind == "type_declaration":
        for spec in declaration_specs(statement, _TYPE_SPECS):
            if node_text(spec.child_by_field_name("name")) == name:
                return _Binding(None)
    elif kind in ("function_declaration", "method_declaration"):
        if node_text(statement.child_by_field_name("name")) == name:
            return _Binding(None)
    return None


def _binding_in_signature(function: Node, name: str) -> _Binding | None:
    for field_name in ("receiver", "parameters", "result"):
        parameters = function.child_by_field_name(field_name)
        if parameters is None or parameters.type != "parameter_list":
            continue
        for parameter in named_children(parameters):
            if parameter.type not in _PARAMETER_NODES:
                continue
            if not any(is_identifier(n, name) for n in field_children(parameter, "name")):
                continue
            if parameter.type == "variadic_parameter_declaration":
                # ``xs ...T`` is a slice whatever T is.
                return _Binding(None)
            return _Binding(parameter.child_by_field_name("type"))
    return None


def resolve_declared_type(name: str, loop: Node, function: Node) -> Node | None:
    """Follow ``name`` from ``loop`` back to its annotated type, if any.

    Lookup order mirrors Go scoping for a loop that is a direct statement
    of ``function``: earlier statements of the body (nearest first), then
    the signature, then package-level declarations of the file.

    A ``:=`` may redeclare a name already bound in the body or the
    signature, in which case the earlier declaration keeps its type. It
    only introduces a fresh untyped variable when nothing in the function
    declared the name first.
    """
    body = function.child_by_field_name("body")
    earlier = [s for s in block_statements(body) if s.end_byte <= loop.start_byte]
    short_declared = False
    for statement in reversed(earlier):
        binding = _binding_in_statement(statement, name)
        if binding is None:
            continue
        if statement.type == "short_var_declaration":
            short_declared = True
            continue
        return binding.type_node

    binding = _binding_in_signature(function, name)
    if binding is not None:
        return binding.type_node
    if short_declared:
        return None

    root = function.parent
    for statement in named_children(root):
        binding = _binding_in_statement(statement, name)
        if binding is not None:
            return binding.type_node
    return None


def ranges_over_channel(loop: Node, function: Node) -> bool:
    """True only when the ranged-over identifier is *known* to be a channel."""
    clause = range_clause_of(loop)
    target = clause.child_by_field_name("right") if clause is not None else None
    if not is_identifier(target):
        return False
    declared = resolve_declared_type(node_text(target), loop, function)
    return declared is not None and declared.type == "channel_type"


# ── Eligibility ──────────────────────────────


def loop_is_eligible(
    loop: Node,
    declarations: Sequence[SliceDeclaration],
    options: LoopOptions,
    function: Node,
) -> bool:
    if range_clause_of(loop) is not None:
        if not options.include_range_loops or not declarations:
            return False
        if ranges_over_channel(loop, function):
            logger.debug("skipping range over channel at line %d", loop.start_point[0] + 1)
            return False
        return True
    return options.include_for_loops and bool(declarations)


# ── Body matching ──────────────────────────────


def _is_variadic_call(arguments: Node, args: list[Node]) -> bool:
    if args and args[-1].type == "variadic_argument":
        return True
    return any(child.type == "..." for child in arguments.children)


def self_append_target(lhs: Node, rhs: Node) -> str | None:
    """Return the name in ``x = append(x, ...)``, or None for any other shape."""
    if not is_identifier(lhs) or rhs.type != "call_expression":
        return None
    if not is_identifier(rhs.child_by_field_name("function"), "append"):
        return None
    arguments = rhs.child_by_field_name("arguments")
    if arguments is None:
        return None
    args = named_children(arguments)
    # append(x) never grows x.
    if len(args) < 2:
        return None
    name = node_text(lhs)
    # append(y, a) assigned to x cannot be preallocated through x.
    if not is_identifier(args[0], name):
        return None
    # append(x, y...) grows by an unknown amount.
    if _is_variadic_call(arguments, args):
        return None
    return name


def _match_self_appends(
    statement: Node,
    declarations: Sequence[SliceDeclaration],
    scan: LoopScan,
) -> None:
    lhs = expression_items(statement.child_by_field_name("left"))
    rhs = expression_items(statement.child_by_field_name("right"))
    for index, expression in enumerate(rhs):
        if index >= len(lhs):
            continue
        name = self_append_target(lhs[index], expression)
        if name is None:
            continue
        scan.hints.extend(
            Hint(declaration.position, declaration.name)
            for declaration in declarations
            if declaration.name == name
        )


def _detect_early_exit(
    statement: Node,
    declarations: Sequence[SliceDeclaration],
    scan: LoopScan,
) -> None:
    consequence = statement.child_by_field_name("consequence")
    if any(s.type in EARLY_EXIT_NODES for s in block_statements(consequence)):
        scan.early_exit = True


def _ignore_statement(
    statement: Node,
    declarations: Sequence[SliceDeclaration],
    scan: LoopScan,
) -> None:
    """Any other statement shape neither appends nor exits."""


_BodyHandler = Callable[["Node", Sequence[SliceDeclaration], LoopScan], None]

_BODY_HANDLERS: dict[str, _BodyHandler] = {
    **{kind: _match_self_appends for kind in ASSIGNMENT_NODES},
    "if_statement": _detect_early_exit,
}


def scan_loop_body(body: Node | None, declarations: Sequence[SliceDeclaration]) -> LoopScan:
    scan = LoopScan()
    for statement in block_statements(body):
        handler = _BODY_HANDLERS.get(statement.type, _ignore_statement)
        handler(statement, declarations, scan)
    return scan


def scan_loop(
    loop: Node,
    declarations: Sequence[SliceDeclaration],
    options: LoopOptions,
    function: Node,
) -> LoopScan | None:
    """Scan one ``for`` statement; None when the loop is not eligible."""
    if not loop_is_eligible(loop, declarations, options, function):
        return None
    return scan_loop_body(loop.child_by_field_name("body"), declarations)


__all__ = [
    "LoopOptions",
    "LoopScan",
    "loop_is_eligible",
    "range_clause_of",
    "ranges_over_channel",
    "resolve_declared_type",
    "scan_loop",
    "scan_loop_body",
    "self_append_target",
]
