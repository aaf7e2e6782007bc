"""tree-sitter Java grammar loading."""

from functools import lru_cache

import tree_sitter_java
from tree_sitter import Language, Parser

JAVA_EXTENSION = ".java"


@lru_cache(maxsize=1)
def get_java_language() -> Language:
    """Load the Java grammar once per process."""
    return Language(tree_sitter_java.language())


def create_parser() -> Parser:
    """Create a new Java parser.

    Parsers keep per-parse state, so every SourceUnit gets its own.
    """
    return Parser(get_java_language())
