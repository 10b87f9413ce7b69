"""Alignment types, alignment coordinates and a sliding stream over an alignment."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum, auto
from itertools import repeat
from typing import Optional


class TemplateSwitchPrimary(Enum):
    """The sequence that a template switch leaves and returns to."""

    REFERENCE = auto()
    QUERY = auto()


class TemplateSwitchSecondary(Enum):
    """The sequence that a template switch copies from."""

    REFERENCE = auto()
    QUERY = auto()


class AlignmentKind(Enum):
    """The kinds of steps in a template switch alignment."""

    ROOT = auto()
    SECONDARY_ROOT = auto()
    PRIMARY_REENTRY = auto()
    PRIMARY_INSERTION = auto()
    PRIMARY_DELETION = auto()
    PRIMARY_SUBSTITUTION = auto()
    PRIMARY_MATCH = auto()
    PRIMARY_FLANK_INSERTION = auto()
    PRIMARY_FLANK_DELETION = auto()
    PRIMARY_FLANK_SUBSTITUTION = auto()
    PRIMARY_FLANK_MATCH = auto()
    SECONDARY_INSERTION = auto()
    SECONDARY_DELETION = auto()
    SECONDARY_SUBSTITUTION = auto()
    SECONDARY_MATCH = auto()
    TEMPLATE_SWITCH_ENTRANCE = auto()
    TEMPLATE_SWITCH_EXIT = auto()
    PRIMARY_SHORTCUT = auto()


_INVERSIONS = {
    AlignmentKind.PRIMARY_INSERTION: AlignmentKind.PRIMARY_DELETION,
    AlignmentKind.PRIMARY_DELETION: AlignmentKind.PRIMARY_INSERTION,
    AlignmentKind.PRIMARY_FLANK_INSERTION: AlignmentKind.PRIMARY_FLANK_DELETION,
    AlignmentKind.PRIMARY_FLANK_DELETION: AlignmentKind.PRIMARY_FLANK_INSERTION,
    AlignmentKind.SECONDARY_INSERTION: AlignmentKind.SECONDARY_DELETION,
    AlignmentKind.SECONDARY_DELETION: AlignmentKind.SECONDARY_INSERTION,
}


@dataclass(frozen=True)
class AlignmentType:
    """One alignment step; entrances and exits carry their extra data."""

    kind: AlignmentKind
    primary: Optional[TemplateSwitchPrimary] = None
    secondary: Optional[TemplateSwitchSecondary] = None
    first_offset: Optional[int] = None
    anti_primary_gap: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is AlignmentKind.TEMPLATE_SWITCH_ENTRANCE:
            if self.primary is None or self.secondary is None or self.first_offset is None:
                raise ValueError(
                    "a template switch entrance needs primary, secondary and first_offset"
                )
        elif self.kind is AlignmentKind.TEMPLATE_SWITCH_EXIT:
            if self.anti_primary_gap is None:
                raise ValueError("a template switch exit needs an anti_primary_gap")

    @classmethod
    def template_switch_entrance(
        cls,
        primary: TemplateSwitchPrimary,
        secondary: TemplateSwitchSecondary,
        first_offset: int,
    ) -> AlignmentType:
        return cls(
            AlignmentKind.TEMPLATE_SWITCH_ENTRANCE,
            primary=primary,
            secondary=secondary,
            first_offset=first_offset,
        )

    @classmethod
    def template_switch_exit(cls, anti_primary_gap: int) -> AlignmentType:
        return cls(AlignmentKind.TEMPLATE_SWITCH_EXIT, anti_primary_gap=anti_primary_gap)

    def inverted(self) -> AlignmentType:
        """The same step seen from the other sequence: insertions become deletions."""
        inverted_kind = _INVERSIONS.get(self.kind)
        if inverted_kind is None:
            return self
        return replace(self, kind=inverted_kind)


_UNIT_LENGTH = frozenset(
    {
        AlignmentKind.PRIMARY_INSERTION,
        AlignmentKind.PRIMARY_DELETION,
        AlignmentKind.PRIMARY_SUBSTITUTION,
        AlignmentKind.PRIMARY_MATCH,
        AlignmentKind.PRIMARY_FLANK_INSERTION,
        AlignmentKind.PRIMARY_FLANK_DELETION,
        AlignmentKind.PRIMARY_FLANK_SUBSTITUTION,
        AlignmentKind.PRIMARY_FLANK_MATCH,
        AlignmentKind.SECONDARY_INSERTION,
        AlignmentKind.SECONDARY_DELETION,
        AlignmentKind.SECONDARY_SUBSTITUTION,
        AlignmentKind.SECONDARY_MATCH,
    }
)

_SHORTCUT_MESSAGE = "Shortcut alignments are not supported for show"


def _stream_length(alignment_type: AlignmentType) -> int:
    if alignment_type.kind is AlignmentKind.PRIMARY_SHORTCUT:
        raise ValueError(_SHORTCUT_MESSAGE)
    return 1 if alignment_type.kind in _UNIT_LENGTH else 0


@dataclass
class AlignmentCoordinates:
    """A position in reference and query, and the primary of an open template switch."""

    reference: int = 0
    query: int = 0
    template_switch_primary: Optional[TemplateSwitchPrimary] = None

    def advance(self, multiplicity: int, alignment_type: AlignmentType) -> None:
        """Move past ``multiplicity`` repetitions of ``alignment_type``."""
        kind = alignment_type.kind
        reference_length, query_length = 0, 0

        if kind in (AlignmentKind.PRIMARY_INSERTION, AlignmentKind.PRIMARY_FLANK_INSERTION):
            query_length = 1
        elif kind in (AlignmentKind.PRIMARY_DELETION, AlignmentKind.PRIMARY_FLANK_DELETION):
            reference_length = 1
        elif kind in (
            AlignmentKind.PRIMARY_SUBSTITUTION,
            AlignmentKind.PRIMARY_MATCH,
            AlignmentKind.PRIMARY_FLANK_SUBSTITUTION,
            AlignmentKind.PRIMARY_FLANK_MATCH,
        ):
            reference_length, query_length = 1, 1
        elif kind is AlignmentKind.TEMPLATE_SWITCH_ENTRANCE:
            if self.template_switch_primary is not None:
                raise ValueError(
                    "Encountered template switch entrance within template switch"
                )
            self.template_switch_primary = alignment_type.primary
        elif kind in (
            AlignmentKind.SECONDARY_INSERTION,
            AlignmentKind.SECONDARY_SUBSTITUTION,
            AlignmentKind.SECONDARY_MATCH,
        ):
            if self.template_switch_primary is None:
                raise ValueError("Encountered secondary alignment outside of a template switch")
            if self.template_switch_primary is TemplateSwitchPrimary.REFERENCE:
                reference_length = 1
            else:
                query_length = 1
        elif kind is AlignmentKind.TEMPLATE_SWITCH_EXIT:
            primary = self.template_switch_primary
            if primary is None:
                raise ValueError(
                    "Encountered template switch exit without first encountering "
                    "a template switch entrance"
                )
            self.template_switch_primary = None
            gap = alignment_type.anti_primary_gap
            if primary is TemplateSwitchPrimary.REFERENCE:
                self.query = _non_negative(self.query + gap)
            else:
                self.reference = _non_negative(self.reference + gap)
        elif kind is AlignmentKind.PRIMARY_SHORTCUT:
            raise ValueError(_SHORTCUT_MESSAGE)

        self.reference += multiplicity * reference_length
        self.query += multiplicity * query_length


def _non_negative(value: int) -> int:
    if value < 0:
        raise ValueError(f"coordinate {value} became negative")
    return value


class AlignmentStream:
    """A window over a run-length encoded alignment, filled at the head, drained at the tail."""

    def __init__(self) -> None:
        self._stream: deque[list] = deque()
        self._length = 0
        self._head = AlignmentCoordinates()
        self._tail = AlignmentCoordinates()

    def copy(self) -> AlignmentStream:
        """An independent copy of this stream."""
        other = AlignmentStream()
        other._stream = deque([multiplicity, alignment_type] for multiplicity, alignment_type in self._stream)
        other._length = self._length
        other._head = replace(self._head)
        other._tail = replace(self._tail)
        return other

    def __len__(self) -> int:
        return self._length

    def stream_iter(self) -> Iterator[tuple[int, AlignmentType]]:
        """The run-length encoded entries, tail first."""
        return ((multiplicity, alignment_type) for multiplicity, alignment_type in self._stream)

    def stream_iter_flat(self) -> Iterator[AlignmentType]:
        """Every single alignment step, tail first."""
        for multiplicity, alignment_type in self.stream_iter():
            yield from repeat(alignment_type, multiplicity)

    def stream_alignment(self) -> list[tuple[int, AlignmentType]]:
        """The content as a run-length encoded alignment."""
        return list(self.stream_iter())

    def head_coordinates(self) -> AlignmentCoordinates:
        """The coordinates after the newest entry."""
        return replace(self._head)

    def tail_coordinates(self) -> AlignmentCoordinates:
        """The coordinates before the oldest entry."""
        return replace(self._tail)

    def push_until_full(
        self, multiplicity: int, alignment_type: AlignmentType, requested_length: int
    ) -> int:
        """Push as much of the entry as fits, returning the multiplicity left over."""
        available_length = requested_length - self._length
        if available_length < 0:
            raise ValueError("the stream is already longer than the requested length")
        unit = _stream_length(alignment_type)

        if available_length >= multiplicity * unit:
            self.push(multiplicity, alignment_type)
            return 0

        push_multiplicity = -(-available_length // unit)
        self.push(push_multiplicity, alignment_type)
        return multiplicity - push_multiplicity

    def clear(self) -> None:
        self.pop(0)

    def is_full(self, requested_length: int) -> bool:
        return self._length >= requested_length

    def is_empty(self) -> bool:
        return not self._stream

    def push(self, multiplicity: int, alignment_type: AlignmentType) -> None:
        """Append an entry at the head."""
        unit = _stream_length(alignment_type)
        self._head.advance(multiplicity, alignment_type)
        self._stream.append([multiplicity, alignment_type])
        self._length += multiplicity * unit

    def pop_one(self) -> None:
        """Remove one unit of length from the tail."""
        self.pop(max(self._length - 1, 0))

    def pop(self, requested_length: int) -> None:
        """Remove entries from the tail until at most ``requested_length`` remains."""
        while self._length > requested_length:
            requested_pop_length = self._length - requested_length
            entry = self._stream[0]
            multiplicity, alignment_type = entry
            unit = _stream_length(alignment_type)
            front_length = multiplicity * unit

            if front_length <= requested_pop_length:
                self._tail.advance(multiplicity, alignment_type)
                self._stream.popleft()
                self._length -= front_length
            else:
                pop_multiplicity = requested_pop_length // unit
                self._tail.advance(pop_multiplicity, alignment_type)
                entry[0] -= pop_multiplicity
                self._length -= pop_multiplicity * unit
                break

        while self._stream and _stream_length(self._stream[0][1]) == 0:
            multiplicity, alignment_type = self._stream.popleft()
            self._tail.advance(multiplicity, alignment_type)


def flatten(alignment: Iterable[tuple[int, AlignmentType]]) -> Iterator[AlignmentType]:
    """Expand a run-length encoded alignment into single steps."""
    for multiplicity, alignment_type in alignment:
        yield from repeat(alignment_type, multiplicity)