import pytest

from bouncyclient.lineedit import normalize_url, read_line


def test_plain_line():
    assert read_line("hello\r", 9) == "hello"


def test_newline_also_ends_input():
    assert read_line("hi\nthere", 9) == "hi"


def test_keys_after_enter_are_not_consumed():
    keys = iter("ab\rcd")
    assert read_line(keys, 9) == "ab"
    assert "".join(keys) == "cd"


def test_backspace_edits():
    assert read_line("hex\blo\r", 9) == "helo"


def test_delete_key_edits():
    assert read_line("ab\x7fc\r", 9) == "ac"


def test_backspace_on_empty_line_is_ignored():
    assert read_line("\b\bab\r", 9) == "ab"


def test_non_printable_ignored():
    assert read_line("a\x01b\x1bc\r", 9) == "abc"


def test_overflow_replaces_last_character():
    assert read_line("abcd\r", 3) == "ab"


def test_name_limit_is_one_less_than_buffer():
    result = read_line("abcdefghijk\r", 9)
    assert result == "abcdefgh"
    assert len(result) == 8


def test_erase_after_overflow():
    assert read_line("abcd\bz\r", 3) == "az"


def test_keys_exhausted_returns_text_so_far():
    assert read_line("abc", 9) == "abc"


def test_invalid_max_len():
    with pytest.raises(ValueError):
        read_line("a\r", 0)


def test_normalize_adds_tcp_scheme():
    assert normalize_url("localhost:9002") == "tcp://localhost:9002"


@pytest.mark.parametrize(
    "url", ["tcp://localhost:9002", "TCP://localhost:9002", "http://localhost", "HTTPS://localhost"]
)
def test_normalize_keeps_known_schemes(url):
    assert normalize_url(url) == url


def test_normalize_short_inputs():
    assert normalize_url("") == "tcp://"
    assert normalize_url("tc") == "tcp://tc"
    assert normalize_url("htt") == "tcp://htt"