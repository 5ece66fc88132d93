"""Literal-or-regex line search with lazy, cached compilation.

A search query is a regular expression only when it carries the
``reg:`` prefix; anything else is matched as literal text::

    PatternFilter("a.b")          # matches "a.b", not "axb"
    PatternFilter(r"reg:\\d+")    # matches any line with a digit
"""
from __future__ import annotations

import logging
import re
from typing import ClassVar

from ..errors import RegexCompilationError

logger = logging.getLogger(__name__)

REGEX_PREFIX = "reg:"


def build_pattern(query: str, ignore_case: bool = False) -> str:
    """Return the regex source for a raw search query."""
    if query.startswith(REGEX_PREFIX):
        pattern = query[len(REGEX_PREFIX):]
    else:
        pattern = re.escape(query)
    if ignore_case:
        pattern = "(?i)" + pattern
    return pattern


class PatternMatcher:
    """Compile a search query on first use and keep the result.

    A compile failure is permanent for the life of the instance: every later
    call to :meth:`matches` returns False without retrying.
    """

    def __init__(self, query: str, ignore_case: bool = False) -> None:
        self.query = query
        self.ignore_case = ignore_case
        self._regex: re.Pattern[str] | None = None
        self._error: RegexCompilationError | None = None

    @property
    def pattern(self) -> str:
        return build_pattern(self.query, self.ignore_case)

    @property
    def failed(self) -> bool:
        """True once compilation has been attempted and failed."""
        return self._error is not None

    def compile(self) -> re.Pattern[str]:
        """Compile (or return the cached) pattern.

        Raises RegexCompilationError if the pattern is invalid. A failure is
        remembered and raised again on later calls without recompiling.
        """
        if self._error is not None:
            raise self._error
        if self._regex is None:
            try:
                self._regex = re.compile(self.pattern)
            except re.error as exc:
                self._error = RegexCompilationError(f"{self.query!r}: {exc}")
                raise self._error from exc
        return self._regex

    def matches(self, line: str) -> bool:
        """Return True if the pattern matches anywhere in line."""
        if self._error is not None:
            return False
        try:
            regex = self.compile()
        except RegexCompilationError as exc:
            logger.warning("Search disabled, every line will be dropped: %s", exc)
            return False
        return regex.search(line) is not None


class PatternFilter:
    """Keep only lines that match a search query."""

    priority: ClassVar[int] = 4

    def __init__(self, query: str, ignore_case: bool = False) -> None:
        self.matcher = PatternMatcher(query, ignore_case)

    def apply(self, line: str) -> str | None:
        return line if self.matcher.matches(line) else None

    def __repr__(self) -> str:
        return f"PatternFilter({self.matcher.query!r}, ignore_case={self.matcher.ignore_case})"
