"""Exceptions raised by the tsview package."""

from __future__ import annotations

from collections.abc import Sequence


class TsviewError(Exception):
    """Base class of all errors raised by tsview."""


class ParserError(TsviewError):
    """Parsing failed at some point of the input."""

    def __init__(self, remaining_input: str, kind: str) -> None:
        self.remaining_input = remaining_input
        self.kind = kind
        super().__init__(
            f"A parsing error of kind '{kind}' occurred when the remaining "
            f"input was '{remaining_input}'."
        )


class ParserIncompleteError(TsviewError):
    """Parsing stopped because the input ended too early."""

    def __init__(self, needed: object) -> None:
        self.needed = needed
        super().__init__(
            f"Parsing was unsuccessful due to incomplete input: {needed!r}."
        )


class DuplicateCostTableNameError(TsviewError):
    """A cost table name appeared more than once."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"The cost table name {name} was encountered twice.")


def _debug_list(values: Sequence[str]) -> str:
    return "[" + ", ".join(f'"{value}"' for value in values) + "]"


class WrongCostTableNamesError(TsviewError):
    """A template switch cost file held the wrong set of cost table names."""

    def __init__(self, actual: Sequence[str], expected: Sequence[str]) -> None:
        self.actual = list(actual)
        self.expected = list(expected)
        super().__init__(
            "The template switch cost file contained a wrong set of cost table "
            f"names. Expected: {_debug_list(self.expected)}. "
            f"Actual: {_debug_list(self.actual)}."
        )


class CostFunctionIndexNotIncreasingError(TsviewError):
    """The inputs of a cost function do not strictly increase."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(
            "A cost function was attempted to create from a sequence whose index "
            f"does not strictly increase at {index}."
        )


class AlignmentHasNoTargetError(TsviewError):
    """The alignment is incomplete and cannot be rendered."""

    def __init__(self) -> None:
        super().__init__("Alignment is incomplete, and hence cannot be rendered.")


class NoTsAlignmentHasNoTargetError(TsviewError):
    """The alignment without template switches is incomplete."""

    def __init__(self) -> None:
        super().__init__(
            "No-TS alignment is incomplete, and hence cannot be rendered."
        )


class SvgNegativeAntiPrimaryGapError(TsviewError):
    """A negative anti-primary gap cannot be drawn."""

    def __init__(self) -> None:
        super().__init__(
            "A negative anti-primary gap is not supported for SVG generation."
        )