"""Step-wise cost functions and their plain text format."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import ClassVar, Optional, TextIO

from .errors import CostFunctionIndexNotIncreasingError, ParserError
from .textparse import skip_any_whitespace, skip_whitespace

_DIGITS = frozenset("0123456789")


def parse_inf_value(text: str, minimum: int, maximum: int) -> tuple[str, int]:
    """Parse an integer or ``inf``/``-inf``, returning the rest and the value.

    ``inf`` maps to ``maximum`` and ``-inf`` to ``minimum``.
    """
    if not text:
        raise ParserError(text, "Verify")

    length = 0
    negative = False
    if text[0] == "-":
        length = 1
        negative = True
    elif text[0] == "+":
        length = 1

    if text.startswith("inf", length):
        length += 3
        return text[length:], minimum if negative else maximum

    digits = 0
    while length + digits < len(text) and text[length + digits] in _DIGITS:
        digits += 1
    if digits == 0:
        raise ParserError(text[length:], "Digit")
    length += digits

    value = int(text[:length])
    if not minimum <= value <= maximum:
        raise ParserError(text, "Verify")
    return text[length:], value


@dataclass(frozen=True)
class CostFunction:
    """A step-wise cost function.

    It is a list of ``(input, cost)`` points sorted by input. The domain
    starts at the first input, and the cost steps to a new value at each
    point. For ``[(0, 1), (2, 3)]`` the cost is 1 on ``[0, 2)`` and 3 from 2 on.
    """

    function: tuple[tuple[int, int], ...]

    SOURCE_MIN: ClassVar[int] = -(2**63)
    SOURCE_MAX: ClassVar[int] = 2**63 - 1
    COST_MIN: ClassVar[int] = 0
    COST_MAX: ClassVar[int] = 2**64 - 1

    def __post_init__(self) -> None:
        points = tuple((source, cost) for source, cost in self.function)
        for index, ((first, _), (second, _)) in enumerate(
            zip(points, points[1:]), start=1
        ):
            if first >= second:
                raise CostFunctionIndexNotIncreasingError(index)
        object.__setattr__(self, "function", points)

    @classmethod
    def new_max(cls) -> CostFunction:
        """A cost function that is maximal everywhere."""
        return cls([(cls.SOURCE_MIN, cls.COST_MAX)])

    @property
    def points(self) -> list[tuple[int, int]]:
        """The points of the function as a list."""
        return list(self.function)

    def evaluate(self, value: int) -> int:
        """Return the cost at ``value``.

        Raises ValueError if ``value`` lies before the first point.
        """
        keys = [source for source, _ in self.function]
        index = bisect.bisect_right(keys, value)
        if index == 0:
            raise ValueError(f"input {value} lies before the domain of the cost function")
        return self.function[index - 1][1]

    def minimum_finite_input(self) -> Optional[int]:
        """The first input whose cost is not the maximum, if any."""
        return next(
            (source for source, cost in self.function if cost < self.COST_MAX), None
        )

    def maximum_finite_input(self) -> Optional[int]:
        """The last input with finite cost, if the function ends in a maximum."""
        last_finite = next(
            (
                index
                for index in reversed(range(len(self.function)))
                if self.function[index][1] < self.COST_MAX
            ),
            None,
        )
        if last_finite is None:
            return None
        infinite_index = last_finite + 1
        if infinite_index == len(self.function):
            return None
        return self.function[infinite_index][0] - 1

    def min(
        self,
        start: Optional[int] = None,
        end: Optional[int] = None,
        start_inclusive: bool = True,
        end_inclusive: bool = False,
    ) -> Optional[int]:
        """The minimum cost over a range of inputs, or None if nothing is covered.

        ``None`` as ``start`` or ``end`` leaves that side unbounded.
        """
        if start is not None and end is not None:
            if start_inclusive and end_inclusive:
                non_empty = start <= end
            elif start_inclusive or end_inclusive:
                non_empty = start < end
            else:
                non_empty = start + 1 < end
        elif start is not None and not start_inclusive:
            non_empty = start != self.SOURCE_MAX
        elif end is not None and not end_inclusive:
            non_empty = end != self.SOURCE_MIN
        else:
            non_empty = True

        if not non_empty:
            return None

        def left_of_end(first_input: int) -> bool:
            if end is None:
                return True
            return first_input <= end if end_inclusive else first_input < end

        def right_of_start(last_input: int) -> bool:
            if start is None:
                return True
            return start <= last_input if start_inclusive else start < last_input

        candidates = [
            cost
            for (first_input, cost), (next_input, _) in zip(
                self.function, self.function[1:]
            )
            if left_of_end(first_input) and right_of_start(next_input - 1)
        ]
        if self.function and left_of_end(self.function[-1][0]):
            candidates.append(self.function[-1][1])
        return min(candidates, default=None)

    def _source_label(self, source: int) -> str:
        if source == self.SOURCE_MAX:
            return "inf"
        if source == self.SOURCE_MIN:
            return "-inf"
        return str(source)

    def _cost_label(self, cost: int) -> str:
        return "inf" if cost == self.COST_MAX else str(cost)

    def write_plain(self, writer: TextIO) -> None:
        """Write the function as two aligned rows: inputs, then costs."""
        labels = [
            (self._source_label(source), self._cost_label(cost))
            for source, cost in self.function
        ]
        widths = [max(len(source), len(cost)) for source, cost in labels]
        writer.write(
            " ".join(f"{source:>{width}}" for (source, _), width in zip(labels, widths))
        )
        writer.write("\n")
        writer.write(
            " ".join(f"{cost:>{width}}" for (_, cost), width in zip(labels, widths))
        )

    @classmethod
    def parse_plain(cls, text: str) -> tuple[str, CostFunction]:
        """Parse the two-row plain format, returning the rest and the function."""
        text = skip_any_whitespace(text)

        indexes = []
        while not text.startswith(("\n", "\r")):
            text, index = parse_inf_value(text, cls.SOURCE_MIN, cls.SOURCE_MAX)
            indexes.append(index)
            text = skip_whitespace(text)

        text = skip_any_whitespace(text)

        costs = []
        while text and not text.startswith(("\n", "\r")):
            text, cost = parse_inf_value(text, cls.COST_MIN, cls.COST_MAX)
            costs.append(cost)
            text = skip_whitespace(text)

        if (
            len(indexes) != len(costs)
            or not indexes
            or indexes[0] != cls.SOURCE_MIN
            or any(a >= b for a, b in zip(indexes, indexes[1:]))
        ):
            raise ParserError(text, "Verify")

        return text, cls(list(zip(indexes, costs)))