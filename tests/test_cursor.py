# tests/test_cursor.py
from ratpeg.peg.cursor import Cursor


def test_peek_and_eos():
    c = Cursor("ab")
    assert c.peek() == "a"
    assert c.peek(1) == "b"
    assert c.peek(2) == ""
    assert not c.eos()
    c.skip_n(2)
    assert c.eos()
    assert c.peek() == ""


def test_checkpoint_restore():
    c = Cursor("hello")
    mark = c.pos
    assert c.skip_literal("hel")
    assert c.remainder() == "lo"
    c.restore(mark)
    assert c.pos == 0
    assert c.remainder() == "hello"


def test_failed_consumption_leaves_position():
    c = Cursor("x1")
    assert not c.skip("y")
    assert not c.skip("")
    assert not c.skip_literal("xy")
    assert c.get_digit() is None
    assert c.get_hex_digit() is None
    assert not c.skip_n(3)
    assert c.pos == 0


def test_get_character():
    c = Cursor("é")
    assert c.get_character() == "é"
    assert c.get_character() is None


def test_digits():
    c = Cursor("7f2024x")
    assert c.get_digit() == 7
    assert c.get_hex_digit() == 15
    assert c.get_digits(4) == 2024
    assert c.get_digits(1) is None
    assert c.pos == 6


def test_substr():
    c = Cursor("abcdef")
    c.skip_n(4)
    assert c.substr(1) == "bcd"
    assert c.substr(0, 2) == "ab"


def test_dump():
    c = Cursor("abc")
    c.skip("a")
    assert c.dump() == "≪a┃bc≫ 1/3"
