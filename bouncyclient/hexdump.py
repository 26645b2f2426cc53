"""Hex dump of byte data, eight bytes to a line."""

from __future__ import annotations

__all__ = ["hex_dump"]

_BYTES_PER_LINE = 8


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def hex_dump(data: bytes | bytearray | memoryview) -> str:
    """Return a hex dump: two-digit hex bytes, padding, ' | ' and the text."""
    data = bytes(data)
    lines = []
    for start in range(0, len(data), _BYTES_PER_LINE):
        chunk = data[start:start + _BYTES_PER_LINE]
        hex_part = "".join(f"{byte:02x} " for byte in chunk)
        padding = "   " * (_BYTES_PER_LINE - len(chunk))
        text = "".join(_printable(byte) for byte in chunk)
        lines.append(f"{hex_part}{padding} | {text}\n")
    return "".join(lines)