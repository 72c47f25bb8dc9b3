"""EMVCo MPM payload encoder with CRC16 trailer."""
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .crc import crc16_ccitt_hex
from .tlv import MAX_VALUE_LENGTH, TAG_PATTERN, TLVItem, build_tlv

CRC_HEADER = "6304"
CRC_TRAILER_PATTERN = re.compile(rf"{CRC_HEADER}([0-9A-Fa-f]{{4}})")


class EncodeError(ValueError):
    """Raised when a field mapping cannot be serialized."""


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str


class QRData:
    """Tag-keyed fields serialized in tag order.

    Values are strings, nested ``QRData`` or ``None``; ``None`` fields are
    left out of the output entirely.
    """

    __slots__ = ("_components",)

    def __init__(self, components: Mapping[str, "QRDataValue"]):
        self._components = MappingProxyType(dict(components))

    @property
    def components(self) -> Mapping[str, "QRDataValue"]:
        return self._components

    def __repr__(self) -> str:
        return f"QRData({dict(self._components)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QRData):
            return NotImplemented
        return dict(self._components) == dict(other._components)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._components.items(), key=lambda kv: str(kv[0]))))

    def tlv_items(self) -> list[TLVItem]:
        """Return the serializable TLV items sorted by tag."""

        result: list[TLVItem] = []
        for tag, component in sorted(self._components.items(), key=lambda kv: str(kv[0])):
            if not isinstance(tag, str) or not TAG_PATTERN.fullmatch(tag):
                raise EncodeError(f"Key should be a 2-digit numeric key code, got {tag!r}")
            if component is None:
                continue
            value = component if isinstance(component, str) else component.to_string()
            if len(value) > MAX_VALUE_LENGTH:
                raise EncodeError(
                    f"Encoded length of tag {tag} should not exceed {MAX_VALUE_LENGTH}, got {len(value)}"
                )
            result.append(TLVItem(tag=tag, value=value))
        return result

    def to_string(self) -> str:
        return build_tlv(self.tlv_items())

    __str__ = to_string

    def to_string_with_crc(self) -> str:
        return self.encode().payload

    def encode(self) -> EncodedPayload:
        """Serialize and append the ``6304`` CRC field."""

        crc_input = f"{self.to_string()}{CRC_HEADER}"
        crc = crc16_ccitt_hex(crc_input)
        return EncodedPayload(payload=f"{crc_input}{crc}", crc=crc)


QRDataValue = Optional[Union[str, QRData]]
FieldValue = Union[str, QRData, Mapping[str, "FieldValue"], None]


def _coerce(fields: Mapping[str, FieldValue]) -> QRData:
    components: dict[str, QRDataValue] = {}
    for tag, value in fields.items():
        if value is None or isinstance(value, (str, QRData)):
            components[tag] = value
        elif isinstance(value, Mapping):
            components[tag] = _coerce(value)
        else:
            raise EncodeError(f"Unsupported value for tag {tag!r}: {type(value).__name__}")
    return QRData(components)


def encode(fields: Mapping[str, FieldValue]) -> str:
    """Serialize a tag-keyed mapping; nested mappings are encoded first."""

    return _coerce(fields).to_string()


def encode_with_checksum(fields: Mapping[str, FieldValue]) -> str:
    return _coerce(fields).to_string_with_crc()


def split_crc(payload: str) -> tuple[str, str] | None:
    """Split a payload into the checksummed prefix and its stated CRC.

    The prefix ends with the ``6304`` header. Returns ``None`` when the
    payload does not end with a CRC field.
    """

    if len(payload) < 8 or not CRC_TRAILER_PATTERN.fullmatch(payload[-8:]):
        return None
    return payload[:-4], payload[-4:]


def verify_crc(payload: str) -> bool | None:
    """Check a scanned payload's trailing CRC; ``None`` when it has none."""

    parts = split_crc(payload)
    if parts is None:
        return None
    body, stated = parts
    return crc16_ccitt_hex(body) == stated.upper()
