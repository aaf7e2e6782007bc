"""Transforms that change statement structure without changing control flow."""

from tree_sitter import Node

from ..source.source_unit import SourceUnit
from .base import STATEMENT_CONTAINERS, Transform, as_block, strip_parentheses

# Parent statement type -> fields that hold a nested body statement
BODY_FIELDS = {
    "if_statement": ("consequence", "alternative"),
    "for_statement": ("body",),
    "enhanced_for_statement": ("body",),
    "while_statement": ("body",),
    "do_statement": ("body",),
}


def _body_field(node: Node) -> str | None:
    """Return the field under which the node is a body of its parent."""
    parent = node.parent
    if parent is None or parent.type not in BODY_FIELDS:
        return None
    for field_name in BODY_FIELDS[parent.type]:
        child = parent.child_by_field_name(field_name)
        if child is not None and child == node:
            return field_name
    return None


class AddBrackets(Transform):
    """Wrap a single-statement body in braces."""

    name = "AddBrackets"
    description = "if (c) s;  ->  if (c) { s; }"

    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        if node.type == "block":
            return False
        field_name = _body_field(node)
        if field_name is None:
            return False
        # Keep else-if chains flat
        if field_name == "alternative" and node.type == "if_statement":
            return False
        return True

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        return "{ " + unit.text_of(node) + " }"


class _ExpressionStatementWrapper(Transform):
    """Shared eligibility for wrappers around a plain expression statement."""

    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        return (
            node.type == "expression_statement"
            and node.parent is not None
            and node.parent.type in STATEMENT_CONTAINERS
        )


class CFWrapperWithIfTrue(_ExpressionStatementWrapper):
    """Guard an expression statement with an always-true if."""

    name = "CFWrapperWithIfTrue"
    description = "s;  ->  if (true) { s; }"

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        return "if (true) { " + unit.text_of(node) + " }"


class CFWrapperWithWhileTrue(_ExpressionStatementWrapper):
    """Run an expression statement inside a loop that exits after one pass."""

    name = "CFWrapperWithWhileTrue"
    description = "s;  ->  while (true) { s; break; }"

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        return "while (true) { " + unit.text_of(node) + " break; }"


class SwapIfElseBranches(Transform):
    """Negate an if condition and swap its branches."""

    name = "SwapIfElseBranches"
    description = "if (c) a else b  ->  if (!(c)) { b } else { a }"

    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        return (
            node.type == "if_statement"
            and node.child_by_field_name("alternative") is not None
        )

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        condition = node.child_by_field_name("condition")
        consequence = node.child_by_field_name("consequence")
        alternative = node.child_by_field_name("alternative")
        if condition is None or consequence is None or alternative is None:
            return None
        return (
            f"if (!({strip_parentheses(condition, unit)})) "
            f"{as_block(alternative, unit)} else {as_block(consequence, unit)}"
        )
