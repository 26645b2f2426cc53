"""World state, per-frame client data and server status flags."""

from __future__ import annotations

import struct
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum, IntFlag

__all__ = [
    "CLIENT_NAME_WIDTH",
    "WORLD_STATE_SIZE",
    "AppStatus",
    "ClientCommand",
    "Frame",
    "Placement",
    "WorldState",
    "client_data_command",
    "parse_clients",
    "parse_frame",
]

WORLD_STATE_SIZE = 14
CLIENT_NAME_WIDTH = 8

_WORLD_LAYOUT = "HHHBBBBBBBB"


class AppStatus(IntFlag):
    """Event bits in the status byte of each frame."""

    NONE = 0
    CLIENT_CHANGE = 1
    OBJECT_CHANGE = 2
    FROZEN_TOGGLE = 4
    CLIENT_CMD = 8
    COLLISION = 32


class ClientCommand(IntEnum):
    """Commands the server can queue for a client."""

    ENABLE_DARK_MODE = 1
    DISABLE_DARK_MODE = 2
    ENABLE_WHO = 3
    DISABLE_WHO = 4
    ENABLE_BROADCAST = 5
    DISABLE_BROADCAST = 6
    ENABLE_INFO = 7
    DISABLE_INFO = 8


@dataclass(frozen=True)
class WorldState:
    """Summary of the world as returned by the ``x-ws`` command."""

    width: int
    height: int
    body_count: int
    bodies: tuple[int, int, int, int, int]
    num_clients: int
    is_frozen: bool
    is_wrapped: bool

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview, byteorder: str = "little") -> WorldState:
        """Decode the 14-byte world state in the given byte order."""
        orders = {"little": "<", "big": ">"}
        if byteorder not in orders:
            raise ValueError("byteorder must be 'little' or 'big'")
        raw = bytes(data)
        if len(raw) != WORLD_STATE_SIZE:
            raise ValueError(f"world state is {WORLD_STATE_SIZE} bytes, got {len(raw)}")
        (width, height, body_count, b1, b2, b3, b4, b5,
         num_clients, frozen, wrapped) = struct.unpack(orders[byteorder] + _WORLD_LAYOUT, raw)
        return cls(
            width=width,
            height=height,
            body_count=body_count,
            bodies=(b1, b2, b3, b4, b5),
            num_clients=num_clients,
            is_frozen=bool(frozen),
            is_wrapped=bool(wrapped),
        )


@dataclass(frozen=True)
class Placement:
    """A shape to draw, centred on screen position ``(x, y)``."""

    shape_id: int
    x: int
    y: int


@dataclass(frozen=True)
class Frame:
    """One update for this client: step number, status bits and placements."""

    step: int
    status: AppStatus
    placements: tuple[Placement, ...]


def parse_frame(data: bytes | bytearray | memoryview) -> Frame:
    """Decode ``step, status, count`` followed by ``count`` triples of ``id, x, y``.

    Coordinates are signed bytes.  Bytes missing from the end read as zero,
    matching the cleared receive buffer.
    """
    raw = bytes(data)
    if not raw:
        raise ValueError("empty frame")
    count = raw[2] if len(raw) > 2 else 0
    needed = 3 + 3 * count
    raw = raw.ljust(needed, b"\x00")
    placements = tuple(
        Placement(shape_id, x, y) for shape_id, x, y in struct.iter_unpack("Bbb", raw[3:needed])
    )
    return Frame(step=raw[0], status=AppStatus(raw[1]), placements=placements)


def parse_clients(buffer: bytes | bytearray | memoryview | Iterable[int], count: int) -> list[str]:
    """Split the ``x-who`` reply into ``count`` space-padded eight-character names."""
    if count < 0:
        raise ValueError("client count cannot be negative")
    raw = bytes(buffer).ljust(count * CLIENT_NAME_WIDTH, b" ")
    return [
        raw[start:start + CLIENT_NAME_WIDTH].decode("latin-1")
        for start in range(0, count * CLIENT_NAME_WIDTH, CLIENT_NAME_WIDTH)
    ]


def client_data_command(client_id: int) -> str:
    """The command that fetches a client's frame, ``x-w <id>``."""
    if not 1 <= client_id <= 255:
        raise ValueError(f"client id must be 1-255, got {client_id}")
    return f"x-w {client_id}"