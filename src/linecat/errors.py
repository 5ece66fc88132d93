"""Errors raised by linecat.

Every kind is fatal to the current run. Per-line outcomes such as a failed
Base64 decode or a search non-match are not errors: the transform suppresses
the line instead.
"""


class LinecatError(Exception):
    """Base error for this package."""


class InputOutputError(LinecatError):
    """Raised when reading a source or writing the sink fails."""


class FileOpenError(LinecatError):
    """Raised when a named input cannot be opened."""


class PaginationError(LinecatError):
    """Raised when paged output cannot continue."""


class RawModeEnableError(PaginationError):
    """Raised when the terminal cannot be switched to unechoed key input."""


class RawModeDisableError(PaginationError):
    """Raised when the terminal input mode cannot be restored."""


class InputReadError(PaginationError):
    """Raised when the key press that dismisses the prompt cannot be read."""


class CursorHideError(PaginationError):
    pass


class CursorShowError(PaginationError):
    pass


class ClearLineError(PaginationError):
    pass


class RegexCompilationError(LinecatError):
    """Raised when a search pattern does not compile."""


class MemoryMapError(LinecatError):
    """Raised when an input file cannot be memory-mapped."""


class MemoryMapWriteError(LinecatError):
    """Raised when mapped bytes cannot be written to the sink."""


class ConfigReadError(LinecatError):
    """Raised when the config file exists but cannot be read or validated."""
