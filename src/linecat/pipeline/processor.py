"""Read byte sources line by line and push each line through a FilterChain."""
from __future__ import annotations

from typing import BinaryIO, Iterator

from ..errors import InputOutputError
from .filter_chain import FilterChain

ENCODING = "utf-8"
# Undecodable bytes survive the trip from source to sink unchanged.
ERRORS = "surrogateescape"


def decode_line(raw: bytes) -> str:
    """Decode one raw line, dropping its terminator (``\\n`` or ``\\r\\n``)."""
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    return raw.decode(ENCODING, errors=ERRORS)


def encode_line(line: str) -> bytes:
    return line.encode(ENCODING, errors=ERRORS) + b"\n"


def read_lines(source: BinaryIO) -> Iterator[str]:
    """Stream decoded lines from source. Memory usage: one line at a time."""
    while True:
        try:
            raw = source.readline()
        except OSError as exc:
            raise InputOutputError(f"read failed: {exc}") from exc
        if not raw:
            return
        yield decode_line(raw)


class LineProcessor:
    """Run every line of a source through a chain.

    One processor (and so one chain) is shared by all sources of a run:
    stateful transforms such as line numbering carry on across files.
    """

    def __init__(self, chain: FilterChain) -> None:
        self.chain = chain

    def process(self, source: BinaryIO, sink: BinaryIO) -> int:
        """Write surviving lines to sink as they are produced.

        Returns the number of lines written.
        """
        written = 0
        for line in self.chain.apply_all(read_lines(source)):
            try:
                sink.write(encode_line(line))
            except BrokenPipeError:
                raise
            except OSError as exc:
                raise InputOutputError(f"write failed: {exc}") from exc
            written += 1
        return written

    def collect(self, source: BinaryIO, into: list[str]) -> int:
        """Append surviving lines to into, for paging once all input is read.

        Returns the number of lines appended.
        """
        before = len(into)
        into.extend(self.chain.apply_all(read_lines(source)))
        return len(into) - before
