import pytest

from tsview.errors import ParserError
from tsview.textparse import (
    is_any_line_break,
    is_any_whitespace,
    is_whitespace,
    parse_title,
    skip_any_whitespace,
    skip_whitespace,
)


def test_parse_title_strips_and_stops_at_line_break():
    rest, title = parse_title("\n  #   Simple Example  \nSubstitutionCostTable")
    assert title == "Simple Example"
    assert rest == "\nSubstitutionCostTable"


def test_parse_title_requires_hash():
    with pytest.raises(ParserError) as info:
        parse_title("Simple Example\n")
    assert info.value.kind == "Char"


def test_parse_title_requires_text():
    with pytest.raises(ParserError):
        parse_title("#   \nrest")


def test_skip_whitespace_keeps_line_break():
    assert skip_whitespace(" \t \nA") == "\nA"


def test_skip_any_whitespace_removes_line_breaks():
    assert skip_any_whitespace(" \r\n\t A B") == "A B"
    assert skip_any_whitespace("") == ""


@pytest.mark.parametrize("c", [" ", "\t"])
def test_plain_whitespace(c):
    assert is_whitespace(c)
    assert is_any_whitespace(c)
    assert not is_any_line_break(c)


@pytest.mark.parametrize("c", ["\n", "\r"])
def test_line_breaks(c):
    assert not is_whitespace(c)
    assert is_any_whitespace(c)
    assert is_any_line_break(c)


def test_letters_are_not_whitespace():
    assert not is_any_whitespace("A")
    assert not is_whitespace("-")