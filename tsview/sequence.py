"""Rows of rendered alignment characters: source characters, gaps and blanks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional, Union


class CharacterKind(Enum):
    """What a rendered column holds for one sequence."""

    CHAR = auto()
    GAP = auto()
    BLANK = auto()


_RENDERED = {CharacterKind.GAP: "-", CharacterKind.BLANK: " "}


@dataclass
class Character:
    """A rendered character together with arbitrary attached data."""

    kind: CharacterKind
    data: Any = None
    character: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is CharacterKind.CHAR:
            if not isinstance(self.character, str) or len(self.character) != 1:
                raise ValueError("a character kind needs exactly one character")
        elif self.character is not None:
            raise ValueError(f"a {self.kind.name.lower()} carries no character")

    @classmethod
    def new_char(cls, character: str, data: Any = None) -> Character:
        return cls(CharacterKind.CHAR, data, character)

    @classmethod
    def new_gap(cls, data: Any = None) -> Character:
        return cls(CharacterKind.GAP, data)

    @classmethod
    def new_blank(cls, data: Any = None) -> Character:
        return cls(CharacterKind.BLANK, data)

    def is_char(self) -> bool:
        return self.kind is CharacterKind.CHAR

    def as_char(self) -> str:
        """The character as printed: itself, ``-`` for a gap, a space for a blank."""
        if self.kind is CharacterKind.CHAR:
            return self.character
        return _RENDERED[self.kind]

    def make_ascii_lowercase(self) -> None:
        """Lowercase the character if it is an ASCII capital letter."""
        if self.kind is CharacterKind.CHAR and "A" <= self.character <= "Z":
            self.character = self.character.lower()


KindOrChar = Union[CharacterKind, str]


class MultipairAlignmentSequence:
    """One row of a multi-pair alignment rendering."""

    def __init__(self, characters: Iterable[Character] = ()) -> None:
        self._sequence: list[Character] = list(characters)

    @classmethod
    def from_kinds(cls, kinds: Iterable[KindOrChar]) -> MultipairAlignmentSequence:
        """Build a row from gap/blank kinds and single-character strings."""
        characters = []
        for kind in kinds:
            if isinstance(kind, str):
                characters.append(Character.new_char(kind))
            elif kind is CharacterKind.CHAR:
                raise ValueError("pass the character itself instead of CharacterKind.CHAR")
            else:
                characters.append(Character(kind))
        return cls(characters)

    def translate_alignment_offset(self, offset: int) -> Optional[int]:
        """The smallest index that skips the first ``offset`` characters.

        None if there are fewer than ``offset`` characters.
        """
        if offset == 0:
            return 0
        char_indices = (
            index for index, character in enumerate(self._sequence) if character.is_char()
        )
        for seen, index in enumerate(char_indices, start=1):
            if seen == offset:
                return index + 1
        return None

    def translate_extension_offset(self, offset: int) -> Optional[int]:
        """The largest index that skips exactly the first ``offset`` characters.

        None if there are fewer than ``offset`` characters.
        """
        start = self.translate_alignment_offset(offset)
        if start is None:
            return None
        result = start
        for index in range(start, len(self._sequence)):
            if self._sequence[index].is_char():
                break
            result = index + 1
        return result

    def translate_offset_without_blanks(self, offset: int) -> Optional[int]:
        """The index of the gap or character after skipping ``offset`` of them."""
        non_blank = (
            index
            for index, character in enumerate(self._sequence)
            if character.kind is not CharacterKind.BLANK
        )
        for seen, index in enumerate(non_blank):
            if seen == offset:
                return index
        return None

    def __len__(self) -> int:
        return len(self._sequence)

    def len_without_blanks(self) -> int:
        return sum(1 for c in self._sequence if c.kind is not CharacterKind.BLANK)

    def character_count(self) -> int:
        return sum(1 for c in self._sequence if c.is_char())

    def __iter__(self) -> Iterator[Character]:
        return iter(self._sequence)

    def __getitem__(self, index: int) -> Character:
        return self._sequence[index]

    def iter_characters(self) -> Iterator[str]:
        return (character.as_char() for character in self._sequence)

    def prune_blanks(self, desired_length: int) -> None:
        """Remove trailing blanks until ``desired_length`` is reached.

        Raises ValueError if a character to be removed is not a blank.
        """
        while len(self._sequence) > desired_length:
            if self._sequence[-1].kind is not CharacterKind.BLANK:
                raise ValueError(
                    f"cannot prune a {self._sequence[-1].kind.name.lower()} as a blank"
                )
            self._sequence.pop()

    def extend_with_blanks(
        self, blank_data_generator: Callable[[], Any], desired_length: int
    ) -> None:
        """Append blanks until ``desired_length`` is reached."""
        while len(self._sequence) < desired_length:
            self._sequence.append(Character.new_blank(blank_data_generator()))

    def extend_with(self, extension: Iterable[Character]) -> None:
        self._sequence.extend(extension)

    def push(self, character: Character) -> None:
        self._sequence.append(character)

    def insert_gaps(
        self, gap_data_generator: Callable[[], Any], gaps: Iterable[int]
    ) -> None:
        """Insert a gap before each of the given original positions."""
        self.multi_insert(_generated(Character.new_gap, gap_data_generator), gaps)

    def insert_blanks(
        self, blank_data_generator: Callable[[], Any], blanks: Iterable[int]
    ) -> None:
        """Insert a blank before each of the given original positions."""
        self.multi_insert(_generated(Character.new_blank, blank_data_generator), blanks)

    def multi_insert(
        self, characters: Iterable[Character], positions: Iterable[int]
    ) -> None:
        """Insert characters before the given ascending original positions.

        A position equal to the length appends at the end.
        """
        original = self._sequence
        characters = iter(characters)
        positions = list(positions)
        result: list[Character] = []
        pending = 0

        def take() -> Character:
            try:
                return next(characters)
            except StopIteration:
                raise ValueError("fewer characters than positions to insert") from None

        for index, original_character in enumerate(original):
            while pending < len(positions) and positions[pending] <= index:
                result.append(take())
                pending += 1
            result.append(original_character)

        for position in positions[pending:]:
            if position != len(original):
                raise ValueError(
                    f"insert position {position} is past the end {len(original)}"
                )
            result.append(take())

        self._sequence = result

    def __str__(self) -> str:
        return "".join(self.iter_characters())


def _generated(
    factory: Callable[[Any], Character], data_generator: Callable[[], Any]
) -> Iterator[Character]:
    while True:
        yield factory(data_generator())