import io

import pytest

from teachos.ulib import atoi, gets


def test_atoi_leading_digits():
    assert atoi("123abc") == 123


def test_atoi_plain_number():
    assert atoi("42") == 42


@pytest.mark.parametrize("text", ["", "-5", " 7", "abc", "+1"])
def test_atoi_no_digits_gives_zero(text):
    assert atoi(text) == 0


def test_atoi_wraps_to_32_bits():
    assert atoi("2147483648") == -2147483648


def test_gets_reads_lines():
    stream = io.StringIO("abc\ndef")
    assert gets(stream, 100) == "abc\n"
    assert gets(stream, 100) == "def"
    assert gets(stream, 100) == ""


def test_gets_stops_at_carriage_return():
    stream = io.StringIO("ab\rcd\n")
    assert gets(stream, 100) == "ab\r"
    assert gets(stream, 100) == "cd\n"


def test_gets_limit_leaves_room_for_terminator():
    stream = io.StringIO("abcdef")
    assert gets(stream, 4) == "abc"
    assert gets(stream, 4) == "def"


def test_gets_limit_one_reads_nothing():
    stream = io.StringIO("abc")
    assert gets(stream, 1) == ""
    assert stream.read() == "abc"