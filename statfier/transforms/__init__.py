"""Semantics-preserving Java transforms."""

from .base import Transform
from .catalog import DEFAULT_TRANSFORMS, TransformCatalog
from .expressions import AddZeroToLiteral
from .loops import LoopConversion1, LoopConversion2
from .structure import (
    AddBrackets,
    CFWrapperWithIfTrue,
    CFWrapperWithWhileTrue,
    SwapIfElseBranches,
)

__all__ = [
    "AddBrackets",
    "AddZeroToLiteral",
    "CFWrapperWithIfTrue",
    "CFWrapperWithWhileTrue",
    "DEFAULT_TRANSFORMS",
    "LoopConversion1",
    "LoopConversion2",
    "SwapIfElseBranches",
    "Transform",
    "TransformCatalog",
]
