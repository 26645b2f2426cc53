"""Line input with simple backspace editing, and server address entry."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["read_line", "normalize_url"]

_ENTER_KEYS = frozenset("\r\n")
_ERASE_KEYS = frozenset("\b\x7f")


def read_line(keys: Iterable[str], max_len: int) -> str:
    """Read an edited line from ``keys`` until Enter.

    At most ``max_len - 1`` characters are kept: once the line is full,
    further characters replace the last one.  Backspace or delete removes
    the last character; other non-printable keys are ignored.  Keys after
    Enter are left unconsumed.  If the keys run out first, the text typed
    so far is returned.
    """
    if max_len < 1:
        raise ValueError("max_len must be at least 1")
    buffer = [""] * max_len
    length = 0
    for key in iter(keys) if not isinstance(keys, str) else iter(keys):
        if key in _ENTER_KEYS:
            break
        if key in _ERASE_KEYS:
            if length:
                length -= 1
        elif len(key) == 1 and key.isprintable():
            buffer[length] = key
            if length < max_len - 1:
                length += 1
    return "".join(buffer[:length])


def normalize_url(text: str) -> str:
    """Prefix ``tcp://`` unless the address already starts with tcp or http."""
    lowered = text.lower()
    if lowered.startswith("tcp") or lowered.startswith("http"):
        return text
    return "tcp://" + text