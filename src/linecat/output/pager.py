"""Screen-at-a-time output with a blocking ``--More--`` prompt.

The pager works on a fully materialized list of lines: all input has been
read and filtered before the first page is shown. After every full page it
waits for one key press; any key shows the next page.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Sequence

from ..errors import InputOutputError, LinecatError, PaginationError
from ..pipeline.processor import encode_line
from .terminal import DEFAULT_HEIGHT, Terminal

logger = logging.getLogger(__name__)

PROMPT = "--More--(press any key)"


def page_size_for(height: int | None) -> int:
    """Lines per page for a terminal of the given height.

    One row is kept for the prompt. An unknown or degenerate height falls
    back to DEFAULT_HEIGHT rows.
    """
    if height is None or height <= 0:
        height = DEFAULT_HEIGHT
    return max(height - 1, 1)


class PaginationController:
    """Write lines page by page, pausing between pages.

    Args:
        sink:       Binary output stream.
        terminal:   Terminal control for the pause; defaults to one bound to sink.
        page_size:  Lines per page. Defaults to the terminal height minus one.
    """

    def __init__(
        self,
        sink: BinaryIO,
        terminal: Terminal | None = None,
        page_size: int | None = None,
    ) -> None:
        self._sink = sink
        self._terminal = terminal if terminal is not None else Terminal(sink)
        if page_size is None:
            page_size = page_size_for(self._terminal.height())
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.page_size = page_size

    def paginate(self, lines: Sequence[str]) -> int:
        """Write every line, pausing after each full page except the last line.

        Returns the number of pauses, which is ``(len(lines) - 1) // page_size``
        for a non-empty list.
        """
        pauses = 0
        total = len(lines)
        since_pause = 0
        for position, line in enumerate(lines, start=1):
            self._write(encode_line(line))
            since_pause += 1
            if since_pause == self.page_size and position < total:
                self.pause()
                pauses += 1
                since_pause = 0
        self._flush()
        return pauses

    def pause(self) -> None:
        """Show the prompt and block until a key is pressed."""
        terminal = self._terminal
        terminal.hide_cursor()
        try:
            self._write(PROMPT.encode("ascii"))
            self._flush()
            key = terminal.wait_for_key()
            logger.debug("Pager resumed on key %r", key)
        except BaseException:
            # Keep the error from the step that failed, not from the cleanup.
            try:
                terminal.show_cursor()
            except (LinecatError, OSError) as exc:
                logger.warning("Could not show the cursor again: %s", exc)
            raise
        terminal.show_cursor()
        terminal.clear_line()

    def _write(self, data: bytes) -> None:
        try:
            self._sink.write(data)
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise InputOutputError(f"write failed: {exc}") from exc

    def _flush(self) -> None:
        try:
            self._sink.flush()
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise PaginationError(f"flush failed: {exc}") from exc
