"""Utility helpers to build and scan EMV-style TLV payloads."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from .elements import InvalidElementError, InvalidLengthError, ParseError

TAG_PATTERN = re.compile(r"[0-9]{2}")
HEADER_SIZE = 4
MAX_VALUE_LENGTH = 99


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str

    @property
    def length(self) -> int:
        return len(self.value)

    def serialize(self) -> str:
        return f"{self.tag}{self.length:02d}{self.value}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def iter_tlv(payload: str) -> Iterator[TLVItem | ParseError]:
    """Scan a TLV payload left to right.

    Yields one ``TLVItem`` per complete element. Malformed input ends the
    stream with a single ``ParseError``; nothing is yielded after it and
    nothing is raised.
    """

    idx = 0
    total = len(payload)
    while idx < total:
        header = payload[idx : idx + HEADER_SIZE]
        idx += HEADER_SIZE
        if len(header) < HEADER_SIZE:
            yield InvalidElementError(header)
            return

        tag, length_digits = header[:2], header[2:]
        if not TAG_PATTERN.fullmatch(length_digits):
            yield InvalidElementError(header)
            return

        length = int(length_digits)
        value = payload[idx : idx + length]
        idx += length
        if len(value) < length:
            yield InvalidLengthError(requested=length, available=len(value))
            return

        yield TLVItem(tag=tag, value=value)
