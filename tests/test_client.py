import pytest

from bouncyclient.client import BounceClient, ViewState, main
from bouncyclient.platforms import Platform
from bouncyclient.shapes import Shape
from bouncyclient.world import AppStatus, ClientCommand, WorldState


class FakeConnection:
    def __init__(self, frames=(), commands=(), broadcast="hello world"):
        self.frames = list(frames)
        self.commands = list(commands)
        self.broadcast = broadcast
        self.sent = []
        self.world_requests = []
        self.disconnected = False
        self.world = WorldState(
            width=80,
            height=40,
            body_count=2,
            bodies=(1, 1, 0, 0, 0),
            num_clients=2,
            is_frozen=False,
            is_wrapped=False,
        )

    def fetch_client_state(self):
        return self.frames.pop(0)

    def get_world_state(self, byteorder="little"):
        self.world_requests.append(byteorder)
        return self.world

    def get_world_clients(self):
        self.sent.append("x-who")
        return b"alice   bob     "

    def get_broadcast(self):
        self.sent.append("x-msg")
        return self.broadcast

    def get_world_cmd(self):
        self.sent.append("x-cmd-get")
        return list(self.commands)

    def do_command(self, command):
        self.sent.append(command)
        return 0

    def add_body(self, size):
        self.sent.append(f"x-add-body {size}")
        return 0

    def disconnect(self):
        self.disconnected = True


def make_client(platform=Platform.ATARI, **kwargs):
    connection = FakeConnection(**kwargs)
    client = BounceClient(connection, "tester", platform)
    client.shapes = [Shape(0, 1, b"X")]
    return client, connection


def frame_bytes(step, status=0, placements=()):
    data = bytearray([step, status, len(placements)])
    for shape_id, x, y in placements:
        data += bytes([shape_id, x & 0xFF, y & 0xFF])
    return bytes(data)


def test_view_state_defaults_match_source_flags():
    view = ViewState()
    assert view.running is True
    assert view.current_step == 0xFF
    assert view.dark_mode is True
    assert view.showing_info is False


@pytest.mark.parametrize("key,command", [("+", "x-inc"), ("-", "x-dec"), ("F", "x-freeze"), ("r", "x-reset")])
def test_world_keys_send_command_and_refresh(key, command):
    client, connection = make_client()
    client.view.info_display_count = 2
    client.handle_key(key)
    assert connection.sent == [command]
    assert client.world == connection.world
    assert client.view.info_display_count == 0


def test_number_key_adds_body():
    client, connection = make_client()
    client.handle_key("3")
    assert connection.sent == ["x-add-body 3"]
    assert connection.world_requests == ["little"]


def test_quit_key_stops_running():
    client, _ = make_client()
    client.handle_key("Q")
    assert client.view.running is False


def test_info_and_who_keys_toggle():
    client, _ = make_client()
    client.view.info_display_count = 2
    client.handle_key("i")
    client.handle_key("w")
    assert client.view.showing_info is True
    assert client.view.showing_clients is True
    assert client.view.info_display_count == 0


def test_dark_and_flash_keys_only_on_supporting_platforms():
    atari, _ = make_client(Platform.ATARI)
    apple, _ = make_client(Platform.APPLE2)
    for client in (atari, apple):
        client.handle_key("d")
        client.handle_key("l")
    assert atari.view.dark_mode is False
    assert atari.view.flash_on_collision is True
    assert apple.view.dark_mode is True
    assert apple.view.flash_on_collision is False


def test_colorset_key_on_coco():
    coco, _ = make_client(Platform.COCO)
    atari, _ = make_client(Platform.ATARI)
    coco.handle_key("c")
    atari.handle_key("c")
    assert coco.view.colorset == 1
    assert atari.view.colorset == 0


def test_world_state_byte_order_follows_platform():
    coco, coco_conn = make_client(Platform.COCO)
    atari, atari_conn = make_client(Platform.ATARI)
    coco.handle_status(AppStatus.OBJECT_CHANGE)
    atari.handle_status(AppStatus.FROZEN_TOGGLE)
    assert coco_conn.world_requests == ["big"]
    assert atari_conn.world_requests == ["little"]


def test_client_change_fetches_world_and_clients():
    client, connection = make_client()
    client.handle_status(AppStatus.CLIENT_CHANGE)
    assert connection.sent == ["x-who"]
    assert client.clients_buffer == b"alice   bob     "
    assert client.world == connection.world


def test_client_cmd_status_applies_queued_commands():
    client, connection = make_client(commands=[ClientCommand.ENABLE_WHO, ClientCommand.DISABLE_DARK_MODE])
    client.handle_status(AppStatus.CLIENT_CMD)
    assert connection.sent == ["x-cmd-get"]
    assert client.view.showing_clients is True
    assert client.view.dark_mode is False


def test_collision_flashes_only_when_enabled():
    client, _ = make_client()
    client.handle_status(AppStatus.COLLISION)
    assert client.view.flashing is False
    client.view.flash_on_collision = True
    client.handle_status(AppStatus.COLLISION)
    assert client.view.flashing is True


def test_broadcast_commands_fetch_message():
    client, connection = make_client()
    client.apply_commands([ClientCommand.ENABLE_BROADCAST])
    assert client.view.showing_broadcast is True
    assert client.broadcast_message == "hello world"
    client.apply_commands([ClientCommand.DISABLE_BROADCAST])
    assert client.view.showing_broadcast is False
    assert connection.sent == ["x-msg", "x-msg"]


def test_info_commands_set_state_and_unknown_ignored():
    client, _ = make_client()
    client.apply_commands([ClientCommand.ENABLE_INFO, 99])
    assert client.view.showing_info is True
    client.apply_commands([ClientCommand.DISABLE_INFO])
    assert client.view.showing_info is False


def test_step_renders_new_step_once():
    data = frame_bytes(0, placements=[(0, 5, 5)])
    client, _ = make_client(frames=[data, data])
    text = client.step()
    assert text.count("X") == 1
    assert client.view.current_step == 0
    assert client.step() is None


def test_step_with_single_byte_shows_nothing():
    client, _ = make_client(frames=[b"\x00"])
    assert client.step() is None
    assert client.view.current_step == 0xFF


def test_shapes_not_drawn_on_info_rows():
    height = Platform.ATARI.screen_height()
    client, _ = make_client(frames=[frame_bytes(2, placements=[(0, 5, height - 1)])])
    client.view.showing_info = True
    text = client.step()
    assert "X" not in text


def test_run_yields_frames_and_disconnects_on_quit():
    frames = [frame_bytes(1, placements=[(0, 3, 3)]), frame_bytes(2)]
    client, connection = make_client(frames=frames)
    screens = list(client.run([None, "q"]))
    assert len(screens) == 2
    assert "X" in screens[0]
    assert connection.disconnected is True
    assert connection.sent == ["x-who"]


def test_run_disconnects_when_closed_early():
    client, connection = make_client(frames=[frame_bytes(1), frame_bytes(2)])
    screens = client.run([None, None])
    next(screens)
    screens.close()
    assert connection.disconnected is True


def test_main_rejects_unsupported_address(capsys):
    assert main(["http://localhost:9002", "--name", "tester"]) == 2
    assert "Error" in capsys.readouterr().err