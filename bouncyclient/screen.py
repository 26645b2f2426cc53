"""A character-cell screen and the drawing of the client's views on it."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .shapes import Shape
from .world import CLIENT_NAME_WIDTH, WorldState

__all__ = [
    "BROADCAST_TOP_ROW",
    "BROADCAST_WIDTH",
    "CATALOGUE_COLUMNS",
    "CATALOGUE_SPACING",
    "Cell",
    "NAME_FIELD_WIDTH",
    "TextScreen",
    "draw_broadcast",
    "draw_clients",
    "draw_info",
    "draw_shape",
    "draw_shape_catalogue",
    "wrap_message",
]

BROADCAST_WIDTH = 22
BROADCAST_TOP_ROW = 4
NAME_FIELD_WIDTH = 9
CATALOGUE_COLUMNS = 7
CATALOGUE_SPACING = 6
CATALOGUE_TOP_ROW = 3
CLIENTS_TOP_ROW = 2

UL, UR, LL, LR = "┌", "┐", "└", "┘"
HLINE, VLINE = "─", "│"

_HELP = (
    ("F", "rz "),
    ("R", "st "),
    ("+", "/"),
    ("-", " "),
    ("1", "-"),
    ("5", "Add "),
    ("W", "ho "),
    ("I", "nf "),
    ("Q", "uit "),
)


@dataclass(frozen=True)
class Cell:
    """One character position: the character and whether it is in reverse video."""

    char: str = " "
    reverse: bool = False


_BLANK = Cell()


class TextScreen:
    """A grid of character cells, written to by position."""

    def __init__(self, width: int = 40, height: int = 24) -> None:
        if width < 1 or height < 1:
            raise ValueError("screen dimensions must be positive")
        self.width = width
        self.height = height
        self._rows = [[_BLANK] * width for _ in range(height)]

    def clear(self) -> None:
        """Blank the whole screen."""
        self.clear_rows(0, self.height)

    def clear_rows(self, start: int, stop: int) -> None:
        """Blank the rows ``start`` up to, not including, ``stop``."""
        for y in range(max(start, 0), min(stop, self.height)):
            self._rows[y] = [_BLANK] * self.width

    def put(self, x: int, y: int, text: str | bytes, reverse: bool = False) -> int:
        """Write ``text`` from ``(x, y)`` and return the column after it.

        Bytes are taken as Latin-1 character codes.  Whatever falls outside
        the screen is dropped.
        """
        if isinstance(text, (bytes, bytearray, memoryview)):
            text = bytes(text).decode("latin-1")
        if 0 <= y < self.height:
            row = self._rows[y]
            for offset, char in enumerate(text):
                column = x + offset
                if 0 <= column < self.width:
                    row[column] = Cell(char, reverse)
        return x + len(text)

    def cell(self, x: int, y: int) -> Cell:
        """The cell at ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"({x}, {y}) is off the {self.width}x{self.height} screen")
        return self._rows[y][x]

    def render(self) -> str:
        """The screen's characters, one line per row."""
        return "\n".join("".join(cell.char for cell in row) for row in self._rows)


def wrap_message(message: str, width: int = BROADCAST_WIDTH) -> list[str]:
    """Word-wrap ``message`` into lines padded with spaces to ``width``.

    Words are separated by spaces; a word longer than a line is split.
    """
    if width < 1:
        raise ValueError("width must be positive")
    words: list[str] = []
    for word in message.split(" "):
        words.extend(word[start:start + width] for start in range(0, len(word), width))

    lines: list[str] = []
    line = ""
    for word in words:
        if line and len(line) + 1 + len(word) > width:
            lines.append(line.ljust(width))
            line = word
        elif line:
            line = f"{line} {word}"
        else:
            line = word
    if line:
        lines.append(line.ljust(width))
    return lines


def draw_shape(
    screen: TextScreen,
    shape: Shape,
    center_x: int,
    center_y: int,
    max_y: int | None = None,
) -> None:
    """Draw ``shape`` around ``(center_x, center_y)``.

    Spaces in the shape are not drawn, so overlapping shapes do not rub
    each other out.  Rows at or below ``max_y`` are left alone.
    """
    limit = screen.height if max_y is None else min(max_y, screen.height)
    half = shape.width >> 1
    start_x = center_x - half - 1
    start_y = center_y - half - 1
    if shape.width % 2 == 0:
        start_x += 1
        start_y += 1
    for i, row in enumerate(shape.rows()):
        y = start_y + i
        if not 0 <= y < limit:
            continue
        for j, code in enumerate(row):
            if code != 0x20:
                screen.put(start_x + j, y, chr(code))


def _boxed_line(screen: TextScreen, x: int, y: int, left: str, body: str, right: str) -> None:
    x = screen.put(x, y, left)
    x = screen.put(x, y, body)
    screen.put(x, y, right)


def draw_broadcast(screen: TextScreen, message: str) -> None:
    """Draw ``message`` word-wrapped in a box centred across the screen."""
    column = (screen.width - BROADCAST_WIDTH) // 2 - 1
    row = BROADCAST_TOP_ROW
    _boxed_line(screen, column, row, UL, HLINE * BROADCAST_WIDTH, UR)
    for line in wrap_message(message, BROADCAST_WIDTH):
        row += 1
        _boxed_line(screen, column, row, VLINE, line, VLINE)
    _boxed_line(screen, column, row + 1, LL, HLINE * BROADCAST_WIDTH, LR)


def draw_clients(screen: TextScreen, names: Sequence[str]) -> None:
    """Draw the connected clients' names in a box at the right of the screen.

    Only as many names as fit above the info rows are listed; the bottom
    of the box goes below the full list.
    """
    column = screen.width - (CLIENT_NAME_WIDTH + 3)
    shown = names[:max(screen.height - 4, 0)]
    _boxed_line(screen, column, CLIENTS_TOP_ROW, UL, HLINE * CLIENT_NAME_WIDTH, UR)
    for i, name in enumerate(shown):
        body = name[:CLIENT_NAME_WIDTH].ljust(CLIENT_NAME_WIDTH)
        _boxed_line(screen, column, CLIENTS_TOP_ROW + 1 + i, VLINE, body, VLINE)
    bottom = CLIENTS_TOP_ROW + 1 + len(names)
    _boxed_line(screen, column, bottom, LL, HLINE * CLIENT_NAME_WIDTH, LR)


def _two_columns(value: int) -> str:
    return f"{value:<2}"


def draw_info(screen: TextScreen, name: str, world: WorldState) -> None:
    """Draw the status line and the key help line on the bottom two rows."""
    y = screen.height - 2
    x = screen.put(0, y, name.ljust(NAME_FIELD_WIDTH))
    for label, value in zip("C12345", (world.num_clients, *world.bodies)):
        x = screen.put(x, y, f"{label}:", True)
        x = screen.put(x, y, _two_columns(value))
    if world.height > 99:
        x = screen.put(x, y, " ")
    screen.put(x, y, f"{world.width}x{world.height}", world.is_frozen)

    y = screen.height - 1
    x = 0
    for key, rest in _HELP:
        x = screen.put(x, y, key, True)
        x = screen.put(x, y, rest)


def draw_shape_catalogue(screen: TextScreen, shapes: Iterable[Shape]) -> None:
    """Show every shape in a grid below a line giving their number."""
    shapes = list(shapes)
    screen.put(0, 0, "Beginning parse of shapes data...")
    screen.put(0, 1, f"Parsed shapes, count: {len(shapes)}")
    for index, shape in enumerate(shapes):
        x = (index % CATALOGUE_COLUMNS) * CATALOGUE_SPACING
        y = (index // CATALOGUE_COLUMNS) * CATALOGUE_SPACING + CATALOGUE_TOP_ROW
        for offset, row in enumerate(shape.rows()):
            screen.put(x, y + offset, row)