"""Terminal control used by the pager.

Cursor and line control are written to the output sink as ANSI sequences
(built with rich's ``Control``); key presses are read from the controlling
terminal so that paging still works when the text itself arrives on stdin.

Every step raises its own :mod:`linecat.errors` type so a failure names
the step that broke.
"""
from __future__ import annotations

import logging
import os
import select
import shutil
import sys
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from rich.control import Control
from rich.segment import ControlType

from ..errors import (
    ClearLineError,
    CursorHideError,
    CursorShowError,
    InputReadError,
    RawModeDisableError,
    RawModeEnableError,
)

logger = logging.getLogger(__name__)

DEFAULT_HEIGHT = 24
TTY_PATH = "/dev/tty"

# Upper bound on the bytes of one key event, and how long to wait for the
# rest of an escape sequence.
_KEY_MAX_BYTES = 32
_ESCAPE_TIMEOUT = 0.05


def terminal_height() -> int:
    """Return the terminal height in rows, or DEFAULT_HEIGHT when unknown."""
    rows = shutil.get_terminal_size((80, DEFAULT_HEIGHT)).lines
    if rows <= 0:
        return DEFAULT_HEIGHT
    return rows


class Terminal:
    """Cursor, line and key-input control for one output sink.

    Args:
        sink:      Binary stream the pager writes to (normally stdout).
        tty_path:  Device to read key presses from. Falls back to stdin when
                   the device cannot be opened and stdin is a terminal.
    """

    def __init__(self, sink: BinaryIO, tty_path: str = TTY_PATH) -> None:
        self._sink = sink
        self._tty_path = tty_path

    def height(self) -> int:
        return terminal_height()

    # ------------------------------------------------------------------
    # Output control
    # ------------------------------------------------------------------

    def _control(self, control: Control) -> None:
        self._sink.write(str(control).encode("ascii"))
        self._sink.flush()

    def hide_cursor(self) -> None:
        try:
            self._control(Control.show_cursor(False))
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise CursorHideError(str(exc)) from exc

    def show_cursor(self) -> None:
        try:
            self._control(Control.show_cursor(True))
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise CursorShowError(str(exc)) from exc

    def clear_line(self) -> None:
        """Erase the current line and return to its first column."""
        try:
            self._control(
                Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
            )
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise ClearLineError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Key input
    # ------------------------------------------------------------------

    @contextmanager
    def _key_device(self) -> Iterator[int]:
        try:
            fd = os.open(self._tty_path, os.O_RDONLY)
        except OSError as exc:
            if sys.stdin is not None and sys.stdin.isatty():
                logger.debug("Cannot open %s (%s), reading keys from stdin", self._tty_path, exc)
                yield sys.stdin.fileno()
                return
            raise InputReadError(f"no terminal to read keys from: {exc}") from exc
        try:
            yield fd
        finally:
            os.close(fd)

    @contextmanager
    def key_input_mode(self, fd: int) -> Iterator[None]:
        """Deliver keys on fd immediately and without echo for the duration.

        The previous mode is restored on every exit path. When the body
        fails, a failed restore is logged so the original error propagates.
        """
        import termios
        import tty

        try:
            saved = termios.tcgetattr(fd)
            tty.setcbreak(fd, termios.TCSANOW)
        except (termios.error, OSError) as exc:
            raise RawModeEnableError(str(exc)) from exc
        try:
            yield
        except BaseException:
            try:
                termios.tcsetattr(fd, termios.TCSADRAIN, saved)
            except (termios.error, OSError) as exc:
                logger.warning("Could not restore terminal input mode: %s", exc)
            raise
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except (termios.error, OSError) as exc:
            raise RawModeDisableError(str(exc)) from exc

    def _read_byte(self, fd: int) -> bytes:
        try:
            data = os.read(fd, 1)
        except OSError as exc:
            raise InputReadError(str(exc)) from exc
        if not data:
            raise InputReadError("terminal closed while waiting for a key")
        return data

    def _pending(self, fd: int) -> bool:
        try:
            readable, _, _ = select.select([fd], [], [], _ESCAPE_TIMEOUT)
        except (OSError, ValueError) as exc:
            raise InputReadError(str(exc)) from exc
        return bool(readable)

    def read_key(self, fd: int) -> bytes:
        """Block until one key event is available on fd and return its bytes.

        Only that key is consumed: keys typed ahead stay queued for the next
        prompt.
        """
        key = bytearray(self._read_byte(fd))
        lead = key[0]
        if lead == 0x1B:
            # Escape sequence (arrows, function keys): take what follows at once.
            while len(key) < _KEY_MAX_BYTES and self._pending(fd):
                key += self._read_byte(fd)
                if len(key) > 2 and 0x40 <= key[-1] <= 0x7E:
                    break
        elif lead >= 0xC0:
            # Continuation bytes of a multi-byte UTF-8 character.
            extra = 1 if lead < 0xE0 else 2 if lead < 0xF0 else 3
            for _ in range(extra):
                key += self._read_byte(fd)
        return bytes(key)

    def wait_for_key(self) -> bytes:
        """Switch to immediate, unechoed input, read one key, switch back."""
        with self._key_device() as fd:
            with self.key_input_mode(fd):
                return self.read_key(fd)
