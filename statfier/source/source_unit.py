"""Parsed program model for one Java source file."""

from collections.abc import Iterator
from pathlib import Path

from loguru import logger
from tree_sitter import Node, Parser, Tree

from ..exceptions import SourceParseError
from ..utils.ast_helpers import (
    decode_source,
    encode_source,
    get_node_text,
    point_at,
    tree_signature,
    walk_preorder,
)
from .java_parser import create_parser


class SourceUnit:
    """Owns one tree-sitter tree for one file.

    The source buffer is immutable bytes; edits replace it and re-parse the
    edited tree incrementally. Duplicates re-parse the same buffer, so no two
    units ever share tree nodes.
    """

    def __init__(self, file_path: Path | str, source: bytes, parser: Parser | None = None):
        self.file_path = Path(file_path).absolute()
        self._parser = parser or create_parser()
        self._source = source
        self._tree: Tree = self._parser.parse(source)
        self._serialized: str | None = None

    @classmethod
    def from_file(cls, file_path: Path | str) -> "SourceUnit":
        """Parse a Java file from disk."""
        path = Path(file_path)
        try:
            source = path.read_bytes()
        except OSError as e:
            raise SourceParseError(f"Cannot read {path}: {e}") from e
        return cls(path, source)

    @classmethod
    def from_text(cls, text: str, file_path: Path | str = "Unit.java") -> "SourceUnit":
        """Parse Java source held in memory."""
        return cls(file_path, encode_source(text))

    @property
    def folder_name(self) -> str:
        """Name of the containing folder, i.e. the seed group."""
        return self.file_path.parent.name

    @property
    def source(self) -> bytes:
        return self._source

    @property
    def tree(self) -> Tree:
        return self._tree

    @property
    def root_node(self) -> Node:
        return self._tree.root_node

    @property
    def has_error(self) -> bool:
        return self._tree.root_node.has_error

    def deep_copy(self) -> "SourceUnit":
        """Return an independent unit parsed from the same source."""
        return SourceUnit(self.file_path, self._source)

    def set_file_path(self, file_path: Path | str) -> None:
        self.file_path = Path(file_path).absolute()

    def walk(self) -> Iterator[Node]:
        """Yield every node of the tree in pre-order."""
        return walk_preorder(self.root_node)

    def text_of(self, node: Node | None) -> str:
        return get_node_text(node, self._source)

    def find_node(self, node_type: str, start_byte: int, end_byte: int) -> Node | None:
        """Locate the node with the given type and byte range."""
        node = self.root_node.descendant_for_byte_range(start_byte, end_byte)
        while (
            node is not None
            and node.start_byte == start_byte
            and node.end_byte == end_byte
        ):
            if node.type == node_type:
                return node
            node = node.parent

        # Slow path for ranges the descendant lookup resolves to a wider node
        for candidate in self.walk():
            if (
                candidate.type == node_type
                and candidate.start_byte == start_byte
                and candidate.end_byte == end_byte
            ):
                return candidate
        return None

    def replace(self, node: Node, replacement: str) -> None:
        """Replace the text of a node and re-parse the edited tree."""
        self.replace_range(node.start_byte, node.end_byte, replacement)

    def replace_range(self, start_byte: int, end_byte: int, replacement: str) -> None:
        """Replace a byte range of the source and re-parse incrementally."""
        new_bytes = encode_source(replacement)
        new_source = self._source[:start_byte] + new_bytes + self._source[end_byte:]
        new_end_byte = start_byte + len(new_bytes)

        self._tree.edit(
            start_byte=start_byte,
            old_end_byte=end_byte,
            new_end_byte=new_end_byte,
            start_point=point_at(self._source, start_byte),
            old_end_point=point_at(self._source, end_byte),
            new_end_point=point_at(new_source, new_end_byte),
        )
        self._tree = self._parser.parse(new_source, self._tree)
        self._source = new_source
        self._serialized = None

    def signature(self) -> tuple:
        """Structural fingerprint of the whole tree."""
        return tree_signature(self.root_node)

    def to_source(self) -> str:
        """Serialize the tree back to source text."""
        if self._serialized is None:
            self._serialized = decode_source(self._source)
        return self._serialized

    def write(self, file_path: Path | str | None = None) -> bool:
        """Write the source bytes to disk, returning False on I/O errors.

        The seed's original encoding is kept byte for byte.
        """
        target = Path(file_path) if file_path else self.file_path
        try:
            target.write_bytes(self._source)
        except OSError as e:
            logger.error(f"Error writing {target}: {e}")
            return False
        return True

    def __repr__(self) -> str:
        return f"SourceUnit({str(self.file_path)!r})"
