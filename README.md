# bouncyclient

A text-mode client for a Bouncy World simulation server. The server runs a
world of bouncing bodies. Each connected client registers with the server and
shows its own window onto that world as a grid of characters.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running the client

```
bouncyclient [URL] [--name NAME] [--platform {apple2,atari,c64,coco,pmd85}] [--timeout SECONDS]
```

- `URL` is the server address. If it is left out, the client asks for it.
  An address that does not start with `tcp` or `http` gets `tcp://` put in
  front of it, so `localhost:9002` is the same as `tcp://localhost:9002`.
  Only `tcp://host:port` addresses can be connected to; anything else makes
  the command print an error and exit with status 2.
- `--name` is your name, kept to at most eight characters. If it is left
  out, the client asks for it.
- `--platform` picks the screen size and character set the client presents
  itself with (default `atari`). `coco` gives a 42×24 screen, the others
  40×24.
- `--timeout` sets a network timeout in seconds.

After connecting, the client fetches and shows the server's shapes, registers
and shows its client id, and waits for Enter while it keeps pinging the
server. It then redraws the screen whenever the world moves on. A network
failure prints the error and exits with status 1.

### Keys

Keys are read from standard input, so each line of keys is acted on after
Enter is pressed.

| Key     | Action                                          |
|---------|-------------------------------------------------|
| `+` `-` | Speed the world up or slow it down              |
| `F`     | Freeze or unfreeze the world                    |
| `1`–`5` | Add a body of that size                         |
| `R`     | Reset the world                                 |
| `I`     | Show or hide the information bar                |
| `W`     | Show or hide the list of connected clients      |
| `Q`     | Quit and deregister from the server             |
| `C`     | `coco` only: switch the colour set              |
| `d`     | `atari` and `pmd85` only: switch dark mode      |
| `l`     | `atari` and `pmd85` only: flash on collision    |

The server can also send commands to a client. These switch dark mode, the
client list, the information bar and broadcast messages on and off.

## What the client does not do

The terminal output is plain text: the screen is cleared and redrawn with
ANSI escape codes, and reverse video is not shown. Dark mode, the colour set
and the collision flash are kept in the client's `ViewState` but do not change
what is drawn. There is no sound.

## Using the library

- `bouncyclient.platforms`: `Platform` with `screen_width()` and
  `screen_height()`, `convert_chars` to map the server's neutral shape bytes
  to a platform's character codes, and `neutral_to_unicode` to show them with
  Unicode box-drawing and block characters.
- `bouncyclient.shapes`: `Shape` (with `rows()`), `parse_shape_records` and
  `ShapeBufferError`.
- `bouncyclient.world`: `WorldState.from_bytes`, `parse_frame` giving a
  `Frame` of `Placement`s, `parse_clients`, `client_data_command`, and the
  `AppStatus` and `ClientCommand` enums.
- `bouncyclient.connection`: `Connection`, a context manager over one TCP
  socket with a method for each server command, `parse_url` and
  `NetworkError`.
- `bouncyclient.screen`: `TextScreen`, an in-memory character grid, and the
  drawing functions `draw_shape`, `draw_broadcast`, `wrap_message`,
  `draw_clients`, `draw_info` and `draw_shape_catalogue`.
- `bouncyclient.lineedit`: `read_line`, line entry with backspace editing,
  and `normalize_url`.
- `bouncyclient.hexdump`: `hex_dump`, eight bytes to a line.
- `bouncyclient.client`: `BounceClient` and `ViewState`, and `main`, the
  command above.

A short example:

```python
from bouncyclient.connection import Connection
from bouncyclient.platforms import Platform, neutral_to_unicode
from bouncyclient.shapes import parse_shape_records

with Connection("tcp://localhost:9002") as conn:
    count = conn.get_shape_count()
    data = conn.get_shape_data()

for shape in parse_shape_records(data, count, Platform.ATARI):
    print(shape.shape_id, shape.width, shape.rows())
```

`BounceClient.run` takes an iterable of keys (`None` for no key in a cycle)
and yields the text of each redrawn screen, so the client can be driven
without a terminal.