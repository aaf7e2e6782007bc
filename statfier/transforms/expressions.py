"""Equivalent-expression substitutions."""

from tree_sitter import Node

from ..source.source_unit import SourceUnit
from .base import Transform


class AddZeroToLiteral(Transform):
    """Replace an integer literal ``n`` with ``(n + 0)``.

    The result is still a constant expression of the same type, so it stays
    legal in case labels, annotations and narrowing assignments.
    """

    name = "AddZeroToLiteral"
    description = "n  ->  (n + 0)"

    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        if node.type != "decimal_integer_literal":
            return False
        parent = node.parent
        # 2147483648 is only legal directly under unary minus
        if parent is not None and parent.type == "unary_expression":
            operator = parent.child_by_field_name("operator")
            if operator is not None and operator.type == "-":
                return False
        return True

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        return f"({unit.text_of(node)} + 0)"
