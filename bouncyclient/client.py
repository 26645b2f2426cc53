"""The interactive bounce world client: setup, key handling and the frame loop."""

from __future__ import annotations

import argparse
import queue
import sys
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .connection import Connection, NetworkError
from .lineedit import normalize_url, read_line
from .platforms import Platform
from .screen import (
    HLINE,
    TextScreen,
    draw_broadcast,
    draw_clients,
    draw_info,
    draw_shape,
    draw_shape_catalogue,
)
from .shapes import Shape, parse_shape_records
from .world import AppStatus, ClientCommand, Frame, WorldState, parse_clients, parse_frame

__all__ = ["BounceClient", "ViewState", "main"]

VERSION = "Diller-2.0.1"
URL_MAX_LEN = 60
NAME_MAX_LEN = 9
PING_INTERVAL = 20 / 60

_INFO_ROWS = 2
_WORLD_KEYS = {"+": "x-inc", "-": "x-dec", "f": "x-freeze", "r": "x-reset"}
_BODY_KEYS = frozenset("12345")
_FLASH_PLATFORMS = frozenset({Platform.ATARI, Platform.PMD85})
_END = object()
_CLEAR_SCREEN = "\x1b[H\x1b[2J"


@dataclass
class ViewState:
    """What the client currently shows and how."""

    running: bool = True
    current_step: int = 0xFF
    info_display_count: int = 0
    dark_mode: bool = True
    showing_info: bool = False
    showing_clients: bool = False
    showing_broadcast: bool = False
    flash_on_collision: bool = False
    flashing: bool = False
    flash_time: int = 0
    colorset: int = 0


class BounceClient:
    """Keeps the view of one client in step with the server."""

    def __init__(self, connection: Connection, name: str, platform: Platform | str) -> None:
        self.connection = connection
        self.name = name
        self.platform = Platform(platform)
        self.view = ViewState()
        self.screen = TextScreen(self.platform.screen_width(), self.platform.screen_height())
        self.shapes: list[Shape] = []
        self.world: WorldState | None = None
        self.clients_buffer = b""
        self.broadcast_message = ""

    @property
    def _byteorder(self) -> str:
        # The 6809 in the CoCo is big-endian; the other targets are little-endian.
        return "big" if self.platform is Platform.COCO else "little"

    def _refresh_world(self) -> None:
        self.world = self.connection.get_world_state(self._byteorder)
        self.view.info_display_count = 0

    def _load_shapes(self) -> list[Shape]:
        count = self.connection.get_shape_count()
        data = self.connection.get_shape_data()
        self.shapes = parse_shape_records(data, count, self.platform)
        return self.shapes

    def _register(self) -> int:
        return self.connection.register_client(
            self.name, self.platform.screen_width(), self.platform.screen_height()
        )

    def _toggle_info(self) -> None:
        self.view.showing_info = not self.view.showing_info
        if not self.view.showing_broadcast:
            self.view.info_display_count = 0

    def _collision_fx(self) -> None:
        if self.view.flash_on_collision:
            self.view.flash_time = 0
            self.view.flashing = True

    def handle_key(self, key: str) -> None:
        """Act on one key press."""
        lowered = key.lower()
        if key in ("+", "-") or lowered in ("f", "r"):
            self.connection.do_command(_WORLD_KEYS[lowered])
            self._refresh_world()
        elif key in _BODY_KEYS:
            self.connection.add_body(int(key))
            self._refresh_world()
        elif lowered == "i":
            self._toggle_info()
        elif lowered == "w":
            self.view.showing_clients = not self.view.showing_clients
        elif lowered == "q":
            self.view.running = False
        elif lowered == "c" and self.platform is Platform.COCO:
            self.view.colorset ^= 1
        elif key == "d" and self.platform in _FLASH_PLATFORMS:
            self.view.dark_mode = not self.view.dark_mode
        elif key == "l" and self.platform in _FLASH_PLATFORMS:
            self.view.flash_on_collision = not self.view.flash_on_collision

    def handle_status(self, status: AppStatus | int) -> None:
        """React to the event bits of a frame's status byte."""
        status = AppStatus(status)
        changes = AppStatus.CLIENT_CHANGE | AppStatus.FROZEN_TOGGLE | AppStatus.OBJECT_CHANGE
        if status & changes:
            self._refresh_world()
        if status & AppStatus.CLIENT_CHANGE:
            self.clients_buffer = self.connection.get_world_clients()
        if status & AppStatus.CLIENT_CMD:
            self.apply_commands(self.connection.get_world_cmd())
        if status & AppStatus.COLLISION:
            self._collision_fx()

    def apply_commands(self, commands: Iterable[ClientCommand | int]) -> None:
        """Apply the commands the server queued for this client, in order."""
        known = {command.value for command in ClientCommand}
        for value in commands:
            if value not in known:
                continue
            command = ClientCommand(value)
            if command is ClientCommand.ENABLE_DARK_MODE:
                self.view.dark_mode = True
            elif command is ClientCommand.DISABLE_DARK_MODE:
                self.view.dark_mode = False
            elif command is ClientCommand.ENABLE_WHO:
                self.view.showing_clients = True
            elif command is ClientCommand.DISABLE_WHO:
                self.view.showing_clients = False
            elif command is ClientCommand.ENABLE_BROADCAST:
                self.broadcast_message = self.connection.get_broadcast()
                self.view.showing_broadcast = True
            elif command is ClientCommand.DISABLE_BROADCAST:
                self.broadcast_message = self.connection.get_broadcast()
                self.view.showing_broadcast = False
            elif command is ClientCommand.ENABLE_INFO:
                self.view.showing_info = False
                self._toggle_info()
            elif command is ClientCommand.DISABLE_INFO:
                self.view.showing_info = True
                self._toggle_info()

    def render_frame(self, frame: Frame) -> str:
        """Draw ``frame`` with the current overlays and return the screen text."""
        view, screen = self.view, self.screen
        playfield_rows = screen.height - _INFO_ROWS
        if view.info_display_count < 2:
            screen.clear()
            if view.showing_info and self.world is not None:
                draw_info(screen, self.name, self.world)
            view.info_display_count += 1
        elif view.showing_info:
            screen.clear_rows(0, playfield_rows)
        else:
            screen.clear()

        max_y = playfield_rows if view.showing_info else screen.height
        for placement in frame.placements:
            if placement.shape_id < len(self.shapes):
                draw_shape(screen, self.shapes[placement.shape_id], placement.x, placement.y, max_y)

        if view.showing_clients and self.world is not None:
            draw_clients(screen, parse_clients(self.clients_buffer, self.world.num_clients))
        if view.showing_broadcast:
            draw_broadcast(screen, self.broadcast_message)
        return screen.render()

    def step(self) -> str | None:
        """Fetch one frame; return the new screen text if the world moved on."""
        data = self.connection.fetch_client_state()
        if len(data) == 1:
            return None
        frame = parse_frame(data)
        if frame.status:
            self.handle_status(frame.status)
        if frame.step != self.view.current_step:
            self.view.current_step = frame.step
            return self.render_frame(frame)
        return None

    def run(self, keys: Iterable[str | None]) -> Iterator[str]:
        """Run the frame loop, yielding each redrawn screen.

        One item of ``keys`` is taken per cycle: a key to act on, or None
        for no key.  The loop ends on the quit key or when the keys run out,
        and the client then deregisters from the server.
        """
        keys = iter(keys)
        self.screen.clear()
        self.view.running = True
        self.clients_buffer = self.connection.get_world_clients()
        try:
            while self.view.running:
                text = self.step()
                if text is not None:
                    yield text
                key = next(keys, _END)
                if key is _END:
                    break
                if key:
                    self.handle_key(key)
        except GeneratorExit:
            self.connection.disconnect()
            raise
        self.connection.disconnect()


def _banner() -> str:
    lines = [
        HLINE * 36,
        " Welcome to Bouncy World Client ",
        "        By Mark Fisher          ",
        f"                Version: {VERSION}",
        HLINE * 36,
    ]
    return "\n".join(lines)


def _wait_for_key(client: BounceClient) -> None:
    """Wait for Enter, pinging the server so the client is not timed out."""
    done = threading.Event()
    failures: list[BaseException] = []

    def ping() -> None:
        try:
            while not done.wait(PING_INTERVAL):
                client.connection.fetch_client_state()
        except (NetworkError, OSError) as exc:
            failures.append(exc)

    pinger = threading.Thread(target=ping, daemon=True)
    pinger.start()
    try:
        input()
    except EOFError:
        pass
    finally:
        done.set()
        pinger.join()
    if failures:
        raise failures[0]


def _keyboard() -> Iterator[str | None]:
    """Keys typed on standard input, or None when none is waiting."""
    pending: queue.Queue[object] = queue.Queue()

    def reader() -> None:
        for line in sys.stdin:
            for char in line.rstrip("\n"):
                pending.put(char)
        pending.put(_END)

    threading.Thread(target=reader, daemon=True).start()
    while True:
        try:
            key = pending.get_nowait()
        except queue.Empty:
            yield None
            continue
        if key is _END:
            return
        yield key  # type: ignore[misc]


def _start(client: BounceClient) -> None:
    screen = client.screen
    screen.clear()
    draw_shape_catalogue(screen, client._load_shapes())
    client_id = client._register()
    screen.put(10, 19, "Client ID: ")
    screen.put(21, 19, str(client_id))
    screen.put(6, 20, HLINE * 28)
    screen.put(8, 21, "Press a key to continue", True)
    screen.put(6, 22, HLINE * 28)
    sys.stdout.write(_CLEAR_SCREEN + screen.render() + "\n")
    sys.stdout.flush()
    _wait_for_key(client)
    client._refresh_world()


def main(argv: list[str] | None = None) -> int:
    """Connect to a bounce world server and show this client's view of it."""
    parser = argparse.ArgumentParser(prog="bouncyclient", description="Bounce world client.")
    parser.add_argument("url", nargs="?", help="server address, such as tcp://host:port")
    parser.add_argument("--name", help="your name, at most 8 characters")
    parser.add_argument(
        "--platform",
        choices=[platform.value for platform in Platform],
        default=Platform.ATARI.value,
        help="screen layout and character set to use",
    )
    parser.add_argument("--timeout", type=float, default=None, help="network timeout in seconds")
    args = parser.parse_args(argv)

    print(_banner())
    raw_url = args.url if args.url is not None else input("Bounce Server URL:\n> ")
    url = normalize_url(read_line(raw_url, URL_MAX_LEN))
    raw_name = args.name if args.name is not None else input("Your name (max 8):\n> ")
    name = read_line(raw_name, NAME_MAX_LEN)

    try:
        connection = Connection(url, args.timeout)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        with connection:
            client = BounceClient(connection, name, args.platform)
            _start(client)
            for text in client.run(_keyboard()):
                sys.stdout.write(_CLEAR_SCREEN + text + "\n")
                sys.stdout.flush()
    except NetworkError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())