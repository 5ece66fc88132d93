"""Base64 encoding and decoding of individual lines.

Decoding is lossy on purpose: a line that is not valid Base64, or that does
not decode to UTF-8 text, is dropped from the output without an error.
"""
from __future__ import annotations

import base64
import binascii
from typing import ClassVar


def encode(text: str) -> str:
    """Encode text as standard, padded Base64."""
    return base64.b64encode(text.encode("utf-8", errors="surrogateescape")).decode("ascii")


def decode(text: str) -> str | None:
    """Decode standard Base64 into UTF-8 text. Returns None on any failure."""
    try:
        encoded = text.encode("ascii")
        raw = base64.b64decode(encoded, validate=True)
        # Non-zero trailing bits in the last symbol are not canonical Base64.
        if base64.b64encode(raw) != encoded:
            return None
        return raw.decode("utf-8")
    except (UnicodeError, binascii.Error, ValueError):
        return None


class Base64Encode:
    priority: ClassVar[int] = 2

    def apply(self, line: str) -> str | None:
        return encode(line)


class Base64Decode:
    """Replace each line by its decoded content; undecodable lines are dropped."""

    priority: ClassVar[int] = 3

    def apply(self, line: str) -> str | None:
        return decode(line)
