"""Loop-form conversions."""

from tree_sitter import Node

from ..source.source_unit import SourceUnit
from ..utils.ast_helpers import contains_node_type
from .base import Transform, as_block, block_body, strip_parentheses

# Last statements after which appended update code stays reachable
_NORMALLY_COMPLETING = {"expression_statement", "local_variable_declaration", ";"}


def _completes_normally(body: Node) -> bool:
    """Conservative check that code appended after the body is reachable."""
    if body.type != "block":
        return body.type in _NORMALLY_COMPLETING
    statements = [c for c in body.named_children if "comment" not in c.type]
    if not statements:
        return True
    return statements[-1].type in _NORMALLY_COMPLETING


class LoopConversion1(Transform):
    """Rewrite a for loop as an equivalent while loop.

    The loop is wrapped in a block so that variables declared in the
    initializer keep their scope. Loops containing ``continue`` are skipped
    because the moved update would no longer run on that path.
    """

    name = "LoopConversion1"
    description = "for (i; c; u) s  ->  { i; while (c) { s u; } }"

    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        if node.type != "for_statement":
            return False
        body = node.child_by_field_name("body")
        if body is None or contains_node_type(body, "continue_statement"):
            return False
        if node.children_by_field_name("update") and not _completes_normally(body):
            return False
        return True

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        body = node.child_by_field_name("body")
        condition = node.child_by_field_name("condition")
        indent = " " * node.start_point[1]

        init_parts = []
        for init in node.children_by_field_name("init"):
            text = unit.text_of(init)
            init_parts.append(text if text.endswith(";") else text + ";")
        updates = [unit.text_of(u) + ";" for u in node.children_by_field_name("update")]
        condition_text = unit.text_of(condition) if condition is not None else "true"

        lines = ["{"]
        lines.extend(f"{indent}    {part}" for part in init_parts)
        lines.append(f"{indent}    while ({condition_text}) {{")
        if body.type == "block":
            lines.append(f"{indent}        {as_block(body, unit)}")
        elif body.type != ";":
            lines.append(f"{indent}        {block_body(body, unit)}")
        lines.extend(f"{indent}        {update}" for update in updates)
        lines.append(f"{indent}    }}")
        lines.append(f"{indent}}}")
        return "\n".join(lines)


class LoopConversion2(Transform):
    """Rewrite a while loop as a for loop with only a condition."""

    name = "LoopConversion2"
    description = "while (c) s  ->  for (; c; ) s"

    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        return node.type == "while_statement"

    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        condition = node.child_by_field_name("condition")
        body = node.child_by_field_name("body")
        if condition is None or body is None:
            return None
        return f"for (; {strip_parentheses(condition, unit)}; ) {unit.text_of(body)}"
