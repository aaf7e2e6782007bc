"""Registry of the available transforms."""

from collections.abc import Iterable, Iterator

from ..exceptions import TransformNotFoundError
from .base import Transform
from .expressions import AddZeroToLiteral
from .loops import LoopConversion1, LoopConversion2
from .structure import (
    AddBrackets,
    CFWrapperWithIfTrue,
    CFWrapperWithWhileTrue,
    SwapIfElseBranches,
)

# Catalog order drives mutant numbering and must stay stable across runs
DEFAULT_TRANSFORMS: tuple[type[Transform], ...] = (
    AddBrackets,
    LoopConversion1,
    LoopConversion2,
    CFWrapperWithIfTrue,
    CFWrapperWithWhileTrue,
    SwapIfElseBranches,
    AddZeroToLiteral,
)


class TransformCatalog:
    """Ordered, name-indexed collection of transforms."""

    def __init__(self, transforms: Iterable[Transform] | None = None):
        if transforms is None:
            transforms = [cls() for cls in DEFAULT_TRANSFORMS]
        self._transforms: list[Transform] = []
        self._by_name: dict[str, Transform] = {}
        for transform in transforms:
            if transform.name in self._by_name:
                raise ValueError(f"Duplicate transform name: {transform.name}")
            self._transforms.append(transform)
            self._by_name[transform.name] = transform

    def all(self) -> list[Transform]:
        """Transforms in catalog order."""
        return list(self._transforms)

    def by_name(self, name: str) -> Transform:
        try:
            return self._by_name[name]
        except KeyError:
            raise TransformNotFoundError(name) from None

    def names(self) -> list[str]:
        return [t.name for t in self._transforms]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Transform]:
        return iter(self._transforms)

    def __len__(self) -> int:
        return len(self._transforms)
