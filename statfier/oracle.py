"""Differential comparison of a seed's findings against its mutants'."""

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .mutation.engine import seed_of
from .results import ResultIndex


@dataclass(frozen=True)
class Inconsistency:
    """A bug type reported a different number of times on seed and mutant."""

    seed_path: str
    mutant_path: str
    bug_type: str
    seed_count: int
    mutant_count: int

    @property
    def kind(self) -> str:
        """Suspected false positive (mutant gained) or false negative (lost)."""
        return "false_positive" if self.mutant_count > self.seed_count else "false_negative"


class DifferentialOracle:
    """Flags analyzer inconsistencies between seeds and their mutants.

    Line numbers are ignored because transforms shift lines; only the
    number of violations per bug type is compared.
    """

    def __init__(self, index: ResultIndex):
        self.index = index

    def compare(self, seed_path: str, mutant_path: str) -> list[Inconsistency]:
        seed_counts = self.index.bug_counts(seed_path)
        mutant_counts = self.index.bug_counts(mutant_path)
        inconsistencies = []
        for bug_type in sorted(set(seed_counts) | set(mutant_counts)):
            seed_count = seed_counts.get(bug_type, 0)
            mutant_count = mutant_counts.get(bug_type, 0)
            if seed_count != mutant_count:
                inconsistencies.append(
                    Inconsistency(seed_path, mutant_path, bug_type, seed_count, mutant_count)
                )
        return inconsistencies

    def pairs(self, mutant_paths: list[str] | None = None) -> list[tuple[str, str]]:
        """(seed, mutant) pairs, by default for every mutant with findings."""
        if mutant_paths is None:
            mutant_paths = self.index.files()
        result = []
        for mutant in mutant_paths:
            seed = seed_of(mutant)
            if seed is not None:
                result.append((str(seed), str(Path(mutant))))
        return result

    def find_inconsistencies(self, mutant_paths: list[str] | None = None) -> list[Inconsistency]:
        """Compare every mutant against its seed."""
        found = []
        for seed, mutant in self.pairs(mutant_paths):
            found.extend(self.compare(seed, mutant))
        if found:
            logger.info(f"Found {len(found)} inconsistencies across {len({i.mutant_path for i in found})} mutants")
        return found
