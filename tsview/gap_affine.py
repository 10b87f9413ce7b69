"""Gap-affine alignment cost tables over the DNA alphabet and their text format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TextIO, Union

from .cost_function import parse_inf_value
from .errors import DuplicateCostTableNameError, ParserError
from .textparse import parse_title, skip_any_whitespace, skip_whitespace

_Readable = Union[str, bytes, TextIO]


def _read_all(reader: _Readable) -> str:
    data = reader if isinstance(reader, (str, bytes)) else reader.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return data


def _expect_tag(text: str, tag: str) -> str:
    if not text.startswith(tag):
        raise ParserError(text, "Tag")
    return text[len(tag):]


def _skip_dashes(text: str) -> str:
    stripped = text.lstrip("-")
    if len(stripped) == len(text):
        raise ParserError(text, "Tag")
    return stripped


@dataclass(frozen=True)
class GapAffineAlignmentCostTable:
    """Substitution, gap open and gap extend costs for each DNA character."""

    name: str
    substitution_cost_table: tuple[int, ...]
    gap_open_cost_vector: tuple[int, ...]
    gap_extend_cost_vector: tuple[int, ...]

    ALPHABET: ClassVar[str] = "ACGT"
    COST_MIN: ClassVar[int] = 0
    COST_MAX: ClassVar[int] = 2**64 - 1

    def __post_init__(self) -> None:
        size = len(self.ALPHABET)
        substitution = tuple(self.substitution_cost_table)
        gap_open = tuple(self.gap_open_cost_vector)
        gap_extend = tuple(self.gap_extend_cost_vector)
        if len(substitution) != size * size:
            raise ValueError(
                f"substitution cost table must have {size * size} entries, "
                f"got {len(substitution)}"
            )
        for label, vector in (("gap open", gap_open), ("gap extend", gap_extend)):
            if len(vector) != size:
                raise ValueError(
                    f"{label} cost vector must have {size} entries, got {len(vector)}"
                )
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "substitution_cost_table", substitution)
        object.__setattr__(self, "gap_open_cost_vector", gap_open)
        object.__setattr__(self, "gap_extend_cost_vector", gap_extend)

    @classmethod
    def _filled(cls, name: str, value: int) -> GapAffineAlignmentCostTable:
        size = len(cls.ALPHABET)
        return cls(name, [value] * (size * size), [value] * size, [value] * size)

    @classmethod
    def new_zero(cls) -> GapAffineAlignmentCostTable:
        """A table with every cost zero."""
        return cls._filled("new_zero", 0)

    @classmethod
    def new_max(cls) -> GapAffineAlignmentCostTable:
        """A table with every cost at the maximum value."""
        return cls._filled("new_max", cls.COST_MAX)

    @classmethod
    def _index(cls, c: str) -> int:
        index = cls.ALPHABET.find(c) if len(c) == 1 else -1
        if index < 0:
            raise ValueError(f"{c!r} is not a character of the alphabet {cls.ALPHABET}")
        return index

    def match_cost(self, c1: str, c2: str) -> int:
        """The cost of aligning a character to itself."""
        if self._index(c1) != self._index(c2):
            raise ValueError(f"{c1!r} and {c2!r} do not match")
        return self.match_or_substitution_cost(c1, c2)

    def substitution_cost(self, c1: str, c2: str) -> int:
        """The cost of aligning two different characters."""
        if self._index(c1) == self._index(c2):
            raise ValueError(f"{c1!r} and {c2!r} are not a substitution")
        return self.match_or_substitution_cost(c1, c2)

    def match_or_substitution_cost(self, c1: str, c2: str) -> int:
        """The table entry for the pair ``(c1, c2)``."""
        size = len(self.ALPHABET)
        return self.substitution_cost_table[self._index(c1) * size + self._index(c2)]

    def min_match_cost(self) -> int:
        """The smallest match cost over all characters."""
        return min(self.match_cost(c, c) for c in self.ALPHABET)

    def min_substitution_cost(self) -> int:
        """The smallest substitution cost over all pairs of distinct characters."""
        return min(
            self.substitution_cost(c1, c2)
            for c1 in self.ALPHABET
            for c2 in self.ALPHABET
            if c1 != c2
        )

    def gap_open_cost(self, c: str) -> int:
        """The cost of opening a gap against ``c``."""
        return self.gap_open_cost_vector[self._index(c)]

    def gap_extend_cost(self, c: str) -> int:
        """The cost of extending a gap against ``c``."""
        return self.gap_extend_cost_vector[self._index(c)]

    def gap_costs(self, c: str, is_first: bool) -> int:
        """Gap open cost for the first gap character, gap extend cost otherwise."""
        return self.gap_open_cost(c) if is_first else self.gap_extend_cost(c)

    def min_gap_open_cost(self) -> int:
        return min(self.gap_open_cost_vector)

    def max_gap_open_cost(self) -> int:
        return max(self.gap_open_cost_vector)

    def min_gap_extend_cost(self) -> int:
        return min(self.gap_extend_cost_vector)

    def into_lower_bound(self) -> GapAffineAlignmentCostTable:
        """A table with matches, substitutions and gaps each set to their minimum."""
        min_match = self.min_match_cost()
        min_substitution = self.min_substitution_cost()
        table = [
            min_match if c1 == c2 else min_substitution
            for c1 in self.ALPHABET
            for c2 in self.ALPHABET
        ]
        return type(self)(
            self.name,
            table,
            _all_min(self.gap_open_cost_vector),
            _all_min(self.gap_extend_cost_vector),
        )

    def into_match_agnostic_lower_bound(self) -> GapAffineAlignmentCostTable:
        """A table with all pair costs set to one minimum, and gaps to theirs."""
        return type(self)(
            self.name,
            _all_min(self.substitution_cost_table),
            _all_min(self.gap_open_cost_vector),
            _all_min(self.gap_extend_cost_vector),
        )

    @classmethod
    def read_plain(cls, reader: _Readable) -> GapAffineAlignmentCostTable:
        """Read one table in plain text format."""
        _, table = cls.parse_plain(_read_all(reader))
        return table

    @classmethod
    def read_plain_multi(cls, reader: _Readable) -> dict[str, GapAffineAlignmentCostTable]:
        """Read consecutive tables, keyed by their names."""
        text = _read_all(reader)
        result: dict[str, GapAffineAlignmentCostTable] = {}
        while True:
            text, table = cls.parse_plain(text)
            if table.name in result:
                raise DuplicateCostTableNameError(table.name)
            result[table.name] = table
            text = skip_any_whitespace(text)
            if not text:
                return result

    def write_plain(self, writer: TextIO) -> None:
        """Write the table in plain text format."""
        size = len(self.ALPHABET)
        lines = [f"# {self.name}", "", "SubstitutionCostTable"]

        width = max(len(str(cost)) for cost in self.substitution_cost_table)
        lines.append("  |" + "".join(" " * width + c for c in self.ALPHABET))
        lines.append("--+" + "-" * (size * (width + 1)))
        for row, c in enumerate(self.ALPHABET):
            costs = self.substitution_cost_table[row * size:(row + 1) * size]
            lines.append(f"{c} |" + "".join(f" {cost:>{width}}" for cost in costs))
        lines.append("")

        for title, vector in (
            ("GapOpenCostVector", self.gap_open_cost_vector),
            ("GapExtendCostVector", self.gap_extend_cost_vector),
        ):
            width = max(len(str(cost)) for cost in vector)
            lines.append(title)
            lines.append("".join(" " * width + c for c in self.ALPHABET))
            lines.append("".join(f" {cost:>{width}}" for cost in vector))
            lines.append("")

        writer.write("\n".join(lines[:-1]) + "\n")

    @classmethod
    def parse_plain(cls, text: str) -> tuple[str, GapAffineAlignmentCostTable]:
        """Parse one table, returning the remaining text and the table."""
        try:
            text, name = parse_title(text)
        except ParserError:
            name = ""
        text, substitution = cls._parse_substitution_cost_table(text)
        text = _expect_tag(skip_any_whitespace(text), "GapOpenCostVector")
        text, gap_open = cls._parse_cost_vector(text)
        text = _expect_tag(skip_any_whitespace(text), "GapExtendCostVector")
        text, gap_extend = cls._parse_cost_vector(text)
        return text, cls(name, substitution, gap_open, gap_extend)

    @classmethod
    def _parse_character(cls, text: str) -> tuple[str, int]:
        if not text:
            raise ParserError(text, "Eof")
        character, rest = text[0], text[1:]
        index = cls.ALPHABET.find(character)
        if index < 0:
            raise ParserError(rest, "Verify")
        return rest, index

    @classmethod
    def _parse_character_row(cls, text: str) -> tuple[str, list[int]]:
        characters = []
        for _ in cls.ALPHABET:
            text, index = cls._parse_character(skip_whitespace(text))
            characters.append(index)
        if len(set(characters)) != len(cls.ALPHABET):
            raise ParserError(text, "Verify")
        return text, characters

    @classmethod
    def _parse_cost_row(cls, text: str) -> tuple[str, list[int]]:
        costs = []
        for _ in cls.ALPHABET:
            text, cost = parse_inf_value(skip_whitespace(text), cls.COST_MIN, cls.COST_MAX)
            costs.append(cost)
        return text, costs

    @classmethod
    def _parse_substitution_cost_table(cls, text: str) -> tuple[str, list[int]]:
        text = _expect_tag(skip_any_whitespace(text), "SubstitutionCostTable")

        text = _expect_tag(skip_any_whitespace(text), "|")
        text, column_order = cls._parse_character_row(text)

        text = _skip_dashes(skip_any_whitespace(text))
        text = _expect_tag(text, "+")
        text = _skip_dashes(text)

        rows = []
        for _ in cls.ALPHABET:
            text, character = cls._parse_character(skip_any_whitespace(text))
            text = _expect_tag(skip_whitespace(text), "|")
            text, costs = cls._parse_cost_row(text)
            rows.append((character, costs))
        rows.sort(key=lambda row: row[0])

        table = [
            costs[column_order.index(column)]
            for _, costs in rows
            for column in range(len(cls.ALPHABET))
        ]
        return text, table

    @classmethod
    def _parse_cost_vector(cls, text: str) -> tuple[str, list[int]]:
        text, characters = cls._parse_character_row(skip_any_whitespace(text))
        text, costs = cls._parse_cost_row(skip_any_whitespace(text))
        ordered = sorted(zip(characters, costs))
        return text, [cost for _, cost in ordered]


def _all_min(values: tuple[int, ...]) -> list[int]:
    lowest = min(values)
    return [lowest] * len(values)