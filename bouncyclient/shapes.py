"""Shape records sent by the server and their parsing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .platforms import Platform, convert_chars

__all__ = [
    "APP_DATA_SIZE",
    "MAX_SHAPES",
    "SHAPES_BUFFER_SIZE",
    "Shape",
    "ShapeBufferError",
    "parse_shape_records",
]

SHAPES_BUFFER_SIZE = 512
APP_DATA_SIZE = 256
MAX_SHAPES = 50


class ShapeBufferError(ValueError):
    """The shape data does not fit in the space reserved for it."""


@dataclass(frozen=True)
class Shape:
    """A square shape: ``width`` rows of ``width`` platform character codes."""

    shape_id: int
    width: int
    data: bytes

    def rows(self) -> list[bytes]:
        """The shape's character rows, top to bottom."""
        if self.width == 0:
            return []
        return [self.data[start:start + self.width] for start in range(0, len(self.data), self.width)]


def parse_shape_records(
    data: bytes | bytearray | memoryview | Iterable[int],
    count: int,
    platform: Platform | str,
) -> list[Shape]:
    """Parse ``count`` records of ``id, width, width*width bytes``.

    The shape bytes are converted to ``platform``'s character set.  Raises
    :class:`ShapeBufferError` when the shapes need more than
    ``SHAPES_BUFFER_SIZE`` bytes or there are more than ``MAX_SHAPES`` of
    them, and :class:`ValueError` when the data ends inside a record.
    """
    platform = Platform(platform)
    if count < 0:
        raise ValueError("shape count cannot be negative")
    if count > MAX_SHAPES:
        raise ShapeBufferError(f"room for at most {MAX_SHAPES} shapes, got {count}")

    raw = bytes(data)
    pos = 0
    used = 0
    shapes: list[Shape] = []
    for _ in range(count):
        if pos + 2 > len(raw):
            raise ValueError("shape data ends inside a record header")
        shape_id, width = raw[pos], raw[pos + 1]
        pos += 2
        length = width * width
        if used + length > SHAPES_BUFFER_SIZE:
            raise ShapeBufferError("Insufficient buffer space")
        body = raw[pos:pos + length]
        if len(body) < length:
            raise ValueError(f"shape {shape_id} needs {length} bytes, only {len(body)} left")
        pos += length
        used += length
        shapes.append(Shape(shape_id, width, convert_chars(body, platform)))
    return shapes