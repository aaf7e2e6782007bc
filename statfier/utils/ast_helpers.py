"""AST helper functions for tree-sitter parsing."""

from collections.abc import Iterator

from tree_sitter import Node

# Bytes that are not UTF-8 (Latin-1 comments, etc.) round-trip unchanged
SOURCE_ENCODING = "utf-8"
SOURCE_ERRORS = "surrogateescape"


def decode_source(data: bytes) -> str:
    return data.decode(SOURCE_ENCODING, SOURCE_ERRORS)


def encode_source(text: str) -> bytes:
    return text.encode(SOURCE_ENCODING, SOURCE_ERRORS)


def get_node_text(node: Node | None, source: bytes) -> str:
    """Extract text content from a tree-sitter node."""
    if not node:
        return ""
    return decode_source(source[node.start_byte:node.end_byte])


def walk_preorder(node: Node) -> Iterator[Node]:
    """Yield a node and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_nodes_by_type(node: Node, node_type: str) -> list[Node]:
    """Find all nodes of a specific type in the AST."""
    return [n for n in walk_preorder(node) if n.type == node_type]


def contains_node_type(node: Node, node_type: str) -> bool:
    """Check whether any descendant of a node has the given type."""
    return any(n.type == node_type for n in walk_preorder(node))


def get_line_number(node: Node) -> int:
    """Get the line number of a node (1-indexed)."""
    return node.start_point[0] + 1


def point_at(source: bytes, byte_offset: int) -> tuple[int, int]:
    """Convert a byte offset into a tree-sitter (row, column) point."""
    row = source.count(b"\n", 0, byte_offset)
    line_start = source.rfind(b"\n", 0, byte_offset) + 1
    return row, byte_offset - line_start


def tree_signature(node: Node) -> tuple:
    """Structural fingerprint of the named nodes under a node.

    Leaves carry their text so that literal and identifier edits show up.
    """
    named = node.named_children
    if not named:
        return (node.type, decode_source(node.text) if node.text else "")
    return (node.type, tuple(tree_signature(child) for child in named))
