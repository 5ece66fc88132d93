"""Priority-ordered chain of line transforms.

Transforms are applied in a fixed order no matter the order they are added
in, and the chain short-circuits on the first transform that drops a line
(returns ``None``): later transforms never see that line.

Because the search filter runs before line numbering, numbers count only
the lines that survive the search.
"""
from __future__ import annotations

import bisect
from typing import Iterable, Iterator, Union

from ..search.pattern import PatternFilter
from ..transforms.codec import Base64Decode, Base64Encode
from ..transforms.lines import (
    DollarSuffix,
    EmptyLineSqueeze,
    LineNumbering,
    TabExpansion,
)

LineTransform = Union[
    EmptyLineSqueeze,
    Base64Encode,
    Base64Decode,
    PatternFilter,
    LineNumbering,
    DollarSuffix,
    TabExpansion,
]

_TRANSFORM_TYPES = (
    EmptyLineSqueeze,
    Base64Encode,
    Base64Decode,
    PatternFilter,
    LineNumbering,
    DollarSuffix,
    TabExpansion,
)


class FilterChain:
    """Apply line transforms in priority order.

    Usage::

        chain = FilterChain()
        chain.add(LineNumbering())
        chain.add(PatternFilter("42"))   # still runs first

        for line in chain.apply_all(["no match", "line 42"]):
            print(line)                   # "1 line 42"
    """

    def __init__(self, transforms: Iterable[LineTransform] = ()) -> None:
        self._transforms: list[LineTransform] = []
        for transform in transforms:
            self.add(transform)

    def add(self, transform: LineTransform) -> "FilterChain":
        """Insert a transform at its priority slot and return self for chaining."""
        if not isinstance(transform, _TRANSFORM_TYPES):
            raise TypeError(f"{transform!r} is not a line transform")
        priorities = [t.priority for t in self._transforms]
        index = bisect.bisect_right(priorities, transform.priority)
        self._transforms.insert(index, transform)
        return self

    def apply(self, line: str) -> str | None:
        """Run line through every transform; None means the line was dropped."""
        for transform in self._transforms:
            result = transform.apply(line)
            if result is None:
                return None
            line = result
        return line

    def apply_all(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield the surviving lines."""
        for line in lines:
            result = self.apply(line)
            if result is not None:
                yield result

    @property
    def transforms(self) -> list[LineTransform]:
        return list(self._transforms)

    def __len__(self) -> int:
        return len(self._transforms)

    def __bool__(self) -> bool:
        return bool(self._transforms)

    def __repr__(self) -> str:
        return f"FilterChain({len(self._transforms)} transforms)"
