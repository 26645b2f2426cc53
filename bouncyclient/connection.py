"""A persistent TCP connection to a bounce world server."""

from __future__ import annotations

import socket
from urllib.parse import urlsplit

from .shapes import APP_DATA_SIZE
from .world import WORLD_STATE_SIZE, ClientCommand, WorldState, client_data_command

__all__ = ["Connection", "NetworkError", "parse_url"]

PROTOCOL_VERSION = 2
MAX_COMMAND_LENGTH = 63
CLIENTS_BUFFER_SIZE = 512
BROADCAST_SIZE = 119
_DEVICE_PREFIX = "n1:"
_COMMAND_VALUES = frozenset(command.value for command in ClientCommand)


class NetworkError(Exception):
    """A network operation with the server failed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Error: {reason}")
        self.reason = reason


def parse_url(url: str) -> tuple[str, int]:
    """Return ``(host, port)`` from a ``[n1:]tcp://host:port`` address."""
    if url[:len(_DEVICE_PREFIX)].lower() == _DEVICE_PREFIX:
        url = url[len(_DEVICE_PREFIX):]
    parts = urlsplit(url)
    if parts.scheme.lower() != "tcp":
        raise ValueError(f"unsupported scheme in {url!r}; expected tcp://")
    if not parts.hostname:
        raise ValueError(f"no host in {url!r}")
    port = parts.port
    if port is None:
        raise ValueError(f"no port in {url!r}")
    return parts.hostname, port


class Connection:
    """Commands and replies exchanged with the server over one socket."""

    def __init__(self, url: str, timeout: float | None = None) -> None:
        self.url = url
        self.host, self.port = parse_url(url)
        self.timeout = timeout
        self.client_id: int | None = None
        self._client_data_cmd: bytes | None = None
        self._sock: socket.socket | None = None

    @property
    def client_str(self) -> str:
        if self.client_id is None:
            raise RuntimeError("client is not registered")
        return str(self.client_id)

    def connect(self) -> None:
        """Open the connection."""
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as exc:
            raise NetworkError("connect") from exc

    def close(self) -> None:
        """Close the socket without telling the server."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> Connection:
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _socket(self, reason: str) -> socket.socket:
        if self._sock is None:
            raise NetworkError(f"{reason}: not connected")
        return self._sock

    def _write(self, data: bytes, reason: str) -> None:
        try:
            self._socket(reason).sendall(data)
        except OSError as exc:
            raise NetworkError(reason) from exc

    def send_command(self, *args: object) -> None:
        """Send the space-joined arguments as one command."""
        if not args:
            raise ValueError("no command given")
        command = " ".join(str(arg) for arg in args).encode("latin-1")
        if len(command) > MAX_COMMAND_LENGTH:
            raise ValueError(f"command longer than {MAX_COMMAND_LENGTH} bytes")
        self._write(command, "send_command")

    def read_exact(self, length: int) -> bytes:
        """Read exactly ``length`` bytes."""
        sock = self._socket("read_response_wait")
        received = bytearray()
        while len(received) < length:
            try:
                chunk = sock.recv(length - len(received))
            except OSError as exc:
                raise NetworkError("read_response_wait") from exc
            if not chunk:
                raise NetworkError("read_response_wait")
            received += chunk
        return bytes(received)

    def read_min(self, minimum: int, maximum: int) -> bytes:
        """Read at least ``minimum`` and at most ``maximum`` bytes."""
        if maximum < minimum:
            raise ValueError("maximum must not be below minimum")
        sock = self._socket("read_response_min")
        received = bytearray()
        while len(received) < minimum:
            try:
                chunk = sock.recv(maximum - len(received))
            except OSError as exc:
                raise NetworkError("read_response_min") from exc
            if not chunk:
                raise NetworkError("read_response_min")
            received += chunk
        return bytes(received)

    def register_client(self, name: str, width: int, height: int) -> int:
        """Announce this client and its screen size; return the id the server assigns."""
        self.send_command("x-add-client", f"{name},{PROTOCOL_VERSION},{width},{height}")
        client_id = self.read_exact(1)[0]
        if client_id == 0:
            raise NetworkError("bad client id")
        self.client_id = client_id
        self._client_data_cmd = client_data_command(client_id).encode("ascii")
        return client_id

    def fetch_client_state(self) -> bytes:
        """Request and return this client's current frame bytes."""
        if self._client_data_cmd is None:
            raise RuntimeError("client is not registered")
        self._write(self._client_data_cmd, "request_client_data")
        return self.read_min(1, APP_DATA_SIZE)

    def get_world_state(self, byteorder: str = "little") -> WorldState:
        """Fetch the world summary."""
        self.send_command("x-ws")
        return WorldState.from_bytes(self.read_exact(WORLD_STATE_SIZE), byteorder)

    def get_world_clients(self) -> bytes:
        """Fetch the space-padded names of the connected clients."""
        self.send_command("x-who")
        return self.read_min(1, CLIENTS_BUFFER_SIZE)

    def get_broadcast(self) -> str:
        """Fetch the current broadcast message."""
        self.send_command("x-msg")
        return self.read_min(1, BROADCAST_SIZE).decode("latin-1")

    def get_world_cmd(self) -> list[ClientCommand]:
        """Fetch the commands queued for this client, ignoring unknown ones."""
        self.send_command("x-cmd-get", self.client_str)
        data = self.read_min(1, APP_DATA_SIZE)
        return [ClientCommand(byte) for byte in data if byte in _COMMAND_VALUES]

    def get_shape_count(self) -> int:
        """Fetch the number of shapes the server defines."""
        self.send_command("x-shape-count")
        return self.read_exact(1)[0]

    def get_shape_data(self) -> bytes:
        """Fetch the raw shape records."""
        self.send_command("x-shape-data")
        return self.read_min(1, APP_DATA_SIZE)

    def do_command(self, command: str) -> int:
        """Send a world command and return its one-byte acknowledgement."""
        self.send_command(command)
        return self.read_exact(1)[0]

    def add_body(self, size: int) -> int:
        """Ask the server to add a body of the given size."""
        self.send_command("x-add-body", size)
        return self.read_exact(1)[0]

    def disconnect(self) -> None:
        """Deregister from the server and close the connection."""
        self.send_command("close", self.client_str)
        self.close()