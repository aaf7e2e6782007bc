"""Mutant generation."""

from .engine import (
    ITER_MARKER,
    MutationEngine,
    cleanup_mutants,
    is_mutant,
    mutant_path,
    remove_mutants_of,
    seed_of,
)

__all__ = [
    "ITER_MARKER",
    "MutationEngine",
    "cleanup_mutants",
    "is_mutant",
    "mutant_path",
    "remove_mutants_of",
    "seed_of",
]
