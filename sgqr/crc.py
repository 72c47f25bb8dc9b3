"""CRC16-CCITT implementation."""
from __future__ import annotations

CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF


def crc16_ccitt(data: bytes) -> int:
    """Compute CRC16-CCITT (0x1021, init 0xFFFF) over raw bytes."""

    checksum = CRC16_INIT
    for byte in data:
        checksum ^= byte << 8
        for _ in range(8):
            if checksum & 0x8000:
                checksum = (checksum << 1) ^ CRC16_POLY
            else:
                checksum <<= 1
            checksum &= 0xFFFF
    return checksum


def crc16_ccitt_hex(text: str) -> str:
    """Checksum of the UTF-8 encoding of ``text`` as 4 uppercase hex digits."""

    return f"{crc16_ccitt(text.encode('utf-8')):04X}"
