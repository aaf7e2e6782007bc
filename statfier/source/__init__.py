"""Parsed Java source model."""

from .java_parser import create_parser, get_java_language
from .source_unit import SourceUnit

__all__ = ["SourceUnit", "create_parser", "get_java_language"]
