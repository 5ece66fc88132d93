"""Translate feature switches into a FilterChain."""
from __future__ import annotations

from dataclasses import dataclass

from ..search.pattern import PatternFilter
from ..transforms.codec import Base64Decode, Base64Encode
from ..transforms.lines import (
    DollarSuffix,
    EmptyLineSqueeze,
    LineNumbering,
    TabExpansion,
)
from .filter_chain import FilterChain


@dataclass
class Features:
    """The transforms requested for one run.

    Attributes:
        number:         Prefix lines with a running line number.
        dollar:         Append ``$`` to every line.
        tabs:           Show tabs as ``^I``.
        squeeze_blank:  Collapse runs of blank lines.
        search:         Keep only matching lines (``reg:`` prefix for a regex).
        ignore_case:    Case-insensitive search.
        encode_base64:  Replace each line with its Base64 encoding.
        decode_base64:  Replace each line with its Base64 decoding.
    """

    number: bool = False
    dollar: bool = False
    tabs: bool = False
    squeeze_blank: bool = False
    search: str | None = None
    ignore_case: bool = False
    encode_base64: bool = False
    decode_base64: bool = False


def build_chain(features: Features) -> FilterChain:
    """Instantiate one transform per enabled feature.

    The resulting order is the chain's priority order, not the order the
    features were requested in.
    """
    chain = FilterChain()
    if features.squeeze_blank:
        chain.add(EmptyLineSqueeze())
    if features.encode_base64:
        chain.add(Base64Encode())
    if features.decode_base64:
        chain.add(Base64Decode())
    if features.search is not None:
        chain.add(PatternFilter(features.search, ignore_case=features.ignore_case))
    if features.number:
        chain.add(LineNumbering())
    if features.dollar:
        chain.add(DollarSuffix())
    if features.tabs:
        chain.add(TabExpansion())
    return chain
