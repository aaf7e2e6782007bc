"""Mutant generation driver."""

import re
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from ..exceptions import SourceParseError, TransformNotFoundError
from ..models import Mutant
from ..source.java_parser import JAVA_EXTENSION
from ..source.source_unit import SourceUnit
from ..transforms.base import Transform
from ..transforms.catalog import TransformCatalog

ITER_MARKER = "_iter"
_MUTANT_STEM = re.compile(rf"^(?P<base>.+){ITER_MARKER}(?P<k>\d+)$")


def mutant_path(seed_path: Path | str, iteration: int) -> Path:
    """Path of the k-th mutant of a seed: ``<dir>/<base>_iter<k><ext>``."""
    seed = Path(seed_path).absolute()
    return seed.parent / f"{seed.stem}{ITER_MARKER}{iteration}{seed.suffix}"


def seed_of(path: Path | str) -> Path | None:
    """Inverse of mutant_path; None when the path is not a mutant."""
    path = Path(path)
    match = _MUTANT_STEM.match(path.stem)
    if not match:
        return None
    return path.parent / f"{match.group('base')}{path.suffix}"


def is_mutant(path: Path | str) -> bool:
    return seed_of(path) is not None


def cleanup_mutants(
    directory: Path | str, base_name: str, extension: str = JAVA_EXTENSION
) -> int:
    """Delete ``<base_name>_iter*<extension>`` files from a directory."""
    directory = Path(directory)
    if not directory.is_dir():
        return 0

    deleted = 0
    prefix = base_name + ITER_MARKER
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.name.startswith(prefix) and path.name.endswith(extension):
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            deleted += 1
            logger.debug(f"Deleted mutant: {path.name}")
    return deleted


def remove_mutants_of(seed_path: Path | str) -> int:
    """Delete the ``_iter<k>`` mutants generated from one seed.

    Unlike cleanup_mutants this never matches sibling seeds that merely
    share the prefix, e.g. ``List_iterator.java`` next to ``List.java``.
    """
    seed = Path(seed_path).absolute()
    if not seed.parent.is_dir():
        return 0

    deleted = 0
    for path in sorted(seed.parent.glob(f"{seed.stem}{ITER_MARKER}*{seed.suffix}")):
        if not path.is_file() or seed_of(path) != seed:
            continue
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        deleted += 1
        logger.debug(f"Deleted mutant: {path.name}")
    return deleted


class MutationEngine:
    """Applies catalog transforms to seeds and writes numbered mutants."""

    def __init__(self, catalog: TransformCatalog | None = None):
        self.catalog = catalog or TransformCatalog()

    def apply_applicable_transforms(self, seed_path: Path | str) -> list[Path]:
        """Apply every transform to every eligible site of a seed."""
        mutants = self.generate_mutants(seed_path, self.catalog.all())
        return [m.path for m in mutants]

    def apply_transform(self, seed_path: Path | str, transform_name: str) -> list[Path]:
        """Apply one named transform to every eligible site of a seed."""
        try:
            transform = self.catalog.by_name(transform_name)
        except TransformNotFoundError as e:
            logger.error(f"{e}. Available: {', '.join(self.catalog.names())}")
            return []
        return [m.path for m in self.generate_mutants(seed_path, [transform])]

    def apply_transforms(
        self, seed_path: Path | str, transform_names: Iterable[str]
    ) -> list[Path]:
        """Apply several named transforms with one shared numbering run.

        Unknown names are skipped with a diagnostic.
        """
        transforms = []
        for name in transform_names:
            try:
                transforms.append(self.catalog.by_name(name))
            except TransformNotFoundError as e:
                logger.error(f"{e}. Available: {', '.join(self.catalog.names())}")
        if not transforms:
            return []
        return [m.path for m in self.generate_mutants(seed_path, transforms)]

    def generate_mutants(
        self, seed_path: Path | str, transforms: Iterable[Transform]
    ) -> list[Mutant]:
        """Generate mutants for a seed with one shared iteration counter."""
        seed = Path(seed_path).absolute()
        try:
            pristine = SourceUnit.from_file(seed)
        except SourceParseError as e:
            logger.error(f"Error processing file {seed}: {e}")
            return []
        if pristine.has_error:
            logger.warning(f"Parse errors in {seed}, skipping mutation")
            return []

        mutants: list[Mutant] = []
        iteration = 1
        for transform in transforms:
            try:
                sites = transform.scan(pristine)
            except Exception as e:
                logger.error(f"Error scanning {seed} with {transform.name}: {e}")
                continue
            if not sites:
                continue

            logger.debug(f"Applying transform {transform.name} to {seed} ({len(sites)} sites)")
            for site in sites:
                copy = pristine.deep_copy()
                try:
                    applied = transform.apply(site, copy)
                except Exception as e:
                    logger.error(f"Error applying {transform.name} at {site}: {e}")
                    continue
                if not applied:
                    logger.debug(f"Transform {transform.name} declined site {site}")
                    continue

                target = mutant_path(seed, iteration)
                copy.set_file_path(target)
                if not copy.write():
                    continue

                mutants.append(
                    Mutant(
                        path=target,
                        seed_path=seed,
                        transform_name=transform.name,
                        site=site,
                        iteration=iteration,
                    )
                )
                logger.info(f"Generated mutant: {target} using {transform.name}")
                iteration += 1

        return mutants
