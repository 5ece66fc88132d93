"""Per-line rewriting transforms.

Each transform takes one line (without its newline) and returns the line to
emit, or ``None`` to drop it. ``priority`` fixes the transform's position in
a :class:`~linecat.pipeline.filter_chain.FilterChain`.
"""
from __future__ import annotations

from typing import ClassVar


class EmptyLineSqueeze:
    """Collapse runs of blank lines into a single empty line.

    A line counts as blank when it is empty after stripping whitespace.
    """

    priority: ClassVar[int] = 1

    def __init__(self) -> None:
        self._previous_empty = False

    def apply(self, line: str) -> str | None:
        if line.strip():
            self._previous_empty = False
            return line
        if self._previous_empty:
            return None
        self._previous_empty = True
        return ""


class LineNumbering:
    """Prefix each line with a running 1-based counter."""

    priority: ClassVar[int] = 5

    def __init__(self, start: int = 1) -> None:
        self.current_line = start

    def apply(self, line: str) -> str | None:
        result = f"{self.current_line} {line}"
        self.current_line += 1
        return result


class DollarSuffix:
    """Mark the end of every line with ``$``."""

    priority: ClassVar[int] = 6

    def apply(self, line: str) -> str | None:
        return line + "$"


class TabExpansion:
    """Show horizontal tabs as ``^I``."""

    priority: ClassVar[int] = 7

    def apply(self, line: str) -> str | None:
        return line.replace("\t", "^I")
