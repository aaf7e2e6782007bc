"""Base class for semantics-preserving source transforms."""

from abc import ABC, abstractmethod

from loguru import logger
from tree_sitter import Node

from ..models import MutationSite
from ..source.source_unit import SourceUnit
from ..utils.ast_helpers import get_line_number

# Statement positions where a new statement may be spliced in
STATEMENT_CONTAINERS = {"block", "constructor_body", "switch_block_statement_group"}


class Transform(ABC):
    """A named, stateless rewrite rule over a Java syntax tree.

    Subclasses decide which nodes are eligible and what text replaces them.
    Each rule must preserve program behavior; the engine does not check it.
    """

    name: str = ""
    description: str = ""

    def scan(self, unit: SourceUnit) -> list[MutationSite]:
        """Return eligible sites in pre-order traversal order."""
        sites = []
        for node in unit.walk():
            if self.is_candidate(node, unit):
                sites.append(
                    MutationSite(
                        transform_name=self.name,
                        node_type=node.type,
                        start_byte=node.start_byte,
                        end_byte=node.end_byte,
                        line=get_line_number(node),
                    )
                )
        return sites

    def apply(self, site: MutationSite, unit: SourceUnit) -> bool:
        """Rewrite the site in place on a copy of the scanned unit.

        On False the unit may be half-edited and must be thrown away.
        """
        node = unit.find_node(site.node_type, site.start_byte, site.end_byte)
        if node is None:
            logger.debug(f"{self.name}: site {site} not found in {unit.file_path}")
            return False
        if not self.is_candidate(node, unit):
            return False

        replacement = self.rewrite(node, unit)
        if replacement is None:
            return False

        unit.replace(node, replacement)
        if unit.has_error:
            logger.debug(f"{self.name}: rewrite of {site} produced a syntax error")
            return False
        return True

    @abstractmethod
    def is_candidate(self, node: Node, unit: SourceUnit) -> bool:
        """Check whether this rule can rewrite the node."""

    @abstractmethod
    def rewrite(self, node: Node, unit: SourceUnit) -> str | None:
        """Return replacement text for the node, or None to decline."""

    def __repr__(self) -> str:
        return f"<Transform {self.name}>"


def block_body(node: Node, unit: SourceUnit) -> str:
    """Text of a statement as block contents, without surrounding braces."""
    text = unit.text_of(node)
    if node.type == "block":
        return text[1:-1].strip()
    return text


def as_block(node: Node, unit: SourceUnit) -> str:
    """Text of a statement guaranteed to be a block."""
    if node.type == "block":
        return unit.text_of(node)
    return "{ " + unit.text_of(node) + " }"


def strip_parentheses(node: Node, unit: SourceUnit) -> str:
    """Inner text of a parenthesized_expression."""
    text = unit.text_of(node)
    if node.type == "parenthesized_expression":
        return text[1:-1].strip()
    return text
