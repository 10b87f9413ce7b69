"""Small helpers for parsing the plain text cost formats."""

from __future__ import annotations

from .errors import ParserError

_NON_WHITESPACE_CONTROLS = frozenset("\x1c\x1d\x1e\x1f")


def is_any_line_break(c: str) -> bool:
    """Return whether ``c`` is a line feed or a carriage return."""
    return c in ("\n", "\r")


def is_whitespace(c: str) -> bool:
    """Return whether ``c`` is whitespace other than a line break."""
    return c.isspace() and c not in _NON_WHITESPACE_CONTROLS and not is_any_line_break(c)


def is_any_whitespace(c: str) -> bool:
    """Return whether ``c`` is whitespace or a line break."""
    return is_whitespace(c) or is_any_line_break(c)


def _skip(text: str, predicate) -> str:
    index = 0
    while index < len(text) and predicate(text[index]):
        index += 1
    return text[index:]


def skip_whitespace(text: str) -> str:
    """Drop leading whitespace that is not a line break."""
    return _skip(text, is_whitespace)


def skip_any_whitespace(text: str) -> str:
    """Drop all leading whitespace including line breaks."""
    return _skip(text, is_any_whitespace)


def parse_title(text: str) -> tuple[str, str]:
    """Parse a ``# title`` line and return the remaining text and the title."""
    text = skip_any_whitespace(text)
    if not text.startswith("#"):
        raise ParserError(text, "Char")
    text = skip_whitespace(text[1:])
    end = 0
    while end < len(text) and not is_any_line_break(text[end]):
        end += 1
    if end == 0:
        raise ParserError(text, "TakeTill1")
    return text[end:], text[:end].strip()