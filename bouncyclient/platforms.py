"""Target platforms, their screen sizes and their character conversions.

Shape data arrives from the server in a neutral ASCII encoding in which
letters and punctuation stand for box-drawing and block characters:

    r ┌   ) ┐   L └   ! ┘   J ┤   t ├   T ┬   2 ┴   | │   - ─   + ┼
    a ▌   b ▐   c ▄   d ▀   e ▖   f ▗   g ▘   h ▝
    i ▜   j ▛   k ▟   l ▙   m █   n ▚   p ▞

('o' is deliberately unused so that it can appear in shapes as itself.)
Each platform maps these to the codes of its own character set.  Bytes
without a mapping pass through unchanged.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

__all__ = ["Platform", "convert_chars", "neutral_to_unicode"]


class Platform(Enum):
    """A machine the client can present itself as."""

    APPLE2 = "apple2"
    ATARI = "atari"
    C64 = "c64"
    COCO = "coco"
    PMD85 = "pmd85"

    def screen_width(self) -> int:
        """Number of text columns on this platform's screen."""
        return _SCREEN_SIZES[self][0]

    def screen_height(self) -> int:
        """Number of text rows on this platform's screen."""
        return _SCREEN_SIZES[self][1]


_SCREEN_SIZES: dict[Platform, tuple[int, int]] = {
    Platform.APPLE2: (40, 24),
    Platform.ATARI: (40, 24),
    Platform.C64: (40, 24),
    Platform.COCO: (42, 24),
    Platform.PMD85: (40, 24),
}

NEUTRAL_TO_UNICODE: dict[str, str] = {
    "r": "┌",
    ")": "┐",
    "L": "└",
    "!": "┘",
    "J": "┤",
    "t": "├",
    "T": "┬",
    "2": "┴",
    "|": "│",
    "-": "─",
    "+": "┼",
    "a": "▌",
    "b": "▐",
    "c": "▄",
    "d": "▀",
    "e": "▖",
    "f": "▗",
    "g": "▘",
    "h": "▝",
    "i": "▜",
    "j": "▛",
    "k": "▟",
    "l": "▙",
    "m": "█",
    "n": "▚",
    "p": "▞",
}

# Order of the neutral box-drawing characters:
# upper-left, upper-right, lower-left, lower-right corner,
# right tee, left tee, top tee, bottom tee, vertical, horizontal, cross.
_BOX_KEYS = ("r", ")", "L", "!", "J", "t", "T", "2", "|", "-", "+")


def _box(*codes: int) -> dict[int, int]:
    return {ord(key): code for key, code in zip(_BOX_KEYS, codes, strict=True)}


def _chars(mapping: dict[str, int]) -> dict[int, int]:
    return {ord(key): code for key, code in mapping.items()}


_PLUS, _MINUS, _BANG = ord("+"), ord("-"), ord("!")

_CONVERSIONS: dict[Platform, dict[int, int]] = {
    Platform.APPLE2: {
        **_box(_PLUS, _PLUS, _PLUS, _PLUS, _PLUS, _PLUS, _PLUS, _PLUS, _BANG, _MINUS, _PLUS),
        **_chars({
            "a": 0xDF, "b": 0xDA,
            "c": 0x5F, "d": 0xCC,
            # no quadrant equivalents; a diamond stands in
            "e": 0xDB, "f": 0xDB, "g": 0xDB, "h": 0xDB,
            "i": 0xDD, "j": 0xDD, "k": 0xDD, "l": 0xDD,
            # full block shown as an alternate dot pattern
            "m": 0xD6,
        }),
    },
    Platform.ATARI: {
        **_box(0x11, 0x05, 0x1A, 0x03, 0x04, 0x01, 0x17, 0x18, 0x7C, 0x12, 0x13),
        **_chars({
            "a": 25, "b": 25 + 128,
            "c": 21, "d": 21 + 128,
            "e": 15, "f": 9, "g": 12, "h": 11,
            "i": 15 + 128, "j": 9 + 128, "k": 12 + 128, "l": 11 + 128,
            "m": 32 + 128,
            "/": 6, "\\": 7,
        }),
    },
    # The C64 table is keyed on raw byte values rather than neutral letters.
    Platform.C64: {
        0x52: 176, 0x29: 174, 0x6C: 173, 0x21: 189, 0x27: 179, 0x54: 171,
        0x74: 178, 0x32: 177, 0x7C: 221, 0x2D: 192, 0x2B: 219,
        0x41: 0xA1, 0x42: 0xA1,
        0x43: 0xA2, 0x44: 0xA2,
        0x45: 0xBB, 0x46: 0xAC, 0x47: 0xBE, 0x48: 0xBC,
        0x49: 0xBB, 0x4A: 0xAC, 0x4B: 0xBE, 0x4C: 0xBC,
        0x4D: 0xA6,
        0x4E: 0xBF, 0x50: 0xBF,
        0x5C: 0xBF,
    },
    Platform.COCO: {
        **_box(160, 161, 162, 163, 164, 165, 166, 167, 168, 169, 170),
        **_chars({
            "a": 171, "b": 172,
            "c": 173, "d": 174,
            "e": 175, "f": 176, "g": 177, "h": 178,
            "i": 179, "j": 180, "k": 181, "l": 182,
            "m": 183,
            "n": 184, "p": 185,
            "/": ord("/"), "\\": ord("\\"),
        }),
    },
    Platform.PMD85: {
        **_box(17, 5, 26, 3, 4, 1, 23, 24, 124, 18, 19),
        **_chars({
            "a": 25, "b": 121,
            "c": 21, "d": 117,
            "e": 15, "f": 9, "g": 12, "h": 11,
            "i": 111, "j": 105, "k": 108, "l": 107,
            "m": 125,
            "n": 99, "p": 101,
            "/": 6, "\\": 7,
        }),
    },
}


@lru_cache(maxsize=None)
def _translation_table(platform: Platform) -> bytes:
    table = bytearray(range(256))
    for source, target in _CONVERSIONS[platform].items():
        table[source] = target
    return bytes(table)


def convert_chars(data: bytes | bytearray | memoryview, platform: Platform | str) -> bytes:
    """Convert neutral shape bytes to the character codes of ``platform``."""
    platform = Platform(platform)
    return bytes(data).translate(_translation_table(platform))


def neutral_to_unicode(data: bytes | bytearray | memoryview | str) -> str:
    """Render neutral shape data with Unicode box-drawing and block characters."""
    text = data if isinstance(data, str) else bytes(data).decode("latin-1")
    return "".join(NEUTRAL_TO_UNICODE.get(ch, ch) for ch in text)