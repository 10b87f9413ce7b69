"""Render several sequences aligned pairwise against each other as text rows."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from .alignment_stream import AlignmentKind, AlignmentType
from .sequence import Character, CharacterKind, MultipairAlignmentSequence

logger = logging.getLogger(__name__)

_INSERTIONS = frozenset(
    {
        AlignmentKind.PRIMARY_INSERTION,
        AlignmentKind.PRIMARY_FLANK_INSERTION,
        AlignmentKind.SECONDARY_INSERTION,
    }
)
_DELETIONS = frozenset(
    {
        AlignmentKind.PRIMARY_DELETION,
        AlignmentKind.PRIMARY_FLANK_DELETION,
        AlignmentKind.SECONDARY_DELETION,
    }
)
_SUBSTITUTIONS = frozenset(
    {
        AlignmentKind.PRIMARY_SUBSTITUTION,
        AlignmentKind.PRIMARY_FLANK_SUBSTITUTION,
        AlignmentKind.SECONDARY_SUBSTITUTION,
    }
)
_MATCHES = frozenset(
    {
        AlignmentKind.PRIMARY_MATCH,
        AlignmentKind.PRIMARY_FLANK_MATCH,
        AlignmentKind.SECONDARY_MATCH,
    }
)
_GAP_OR_BLANK = (CharacterKind.GAP, CharacterKind.BLANK)

_NO_ROOT = object()

# Data generator that attaches no data to blanks and gaps.
_no_data: Callable[[], Any] = itertools.repeat(None).__next__


def _kind_at(sequence: MultipairAlignmentSequence, index: int) -> Optional[CharacterKind]:
    if 0 <= index < len(sequence):
        return sequence[index].kind
    return None


def _next_character(extension: Iterator[Character]) -> Character:
    try:
        return next(extension)
    except StopIteration:
        raise ValueError("the alignment consumes more characters than given") from None


def _with_default_data(characters: Iterable[str]) -> Iterator[Character]:
    return (Character.new_char(c) for c in characters)


@dataclass(frozen=True)
class AlignmentRenderResult:
    """The columns spanned by the characters and gaps of an aligned query."""

    query_offset_column: int
    query_limit_column: int


class MultipairAlignmentRenderer:
    """Named rows of equal length, each aligned to some other row."""

    def __init__(
        self,
        root_sequence_name: Hashable = _NO_ROOT,
        root_sequence: Iterable[Character] = (),
    ) -> None:
        self._sequences: dict[Hashable, MultipairAlignmentSequence] = {}
        if root_sequence_name is not _NO_ROOT:
            logger.debug("Adding root sequence")
            self._sequences[root_sequence_name] = MultipairAlignmentSequence(root_sequence)

    @classmethod
    def new_empty(cls) -> MultipairAlignmentRenderer:
        """A renderer without any sequence."""
        logger.debug("Creating an empty renderer without root sequence")
        return cls()

    @classmethod
    def new_without_data(
        cls, root_sequence_name: Hashable, root_sequence: Iterable[str]
    ) -> MultipairAlignmentRenderer:
        """A renderer whose root row is made of plain characters."""
        return cls(root_sequence_name, _with_default_data(root_sequence))

    def sequence(self, sequence_name: Hashable) -> MultipairAlignmentSequence:
        """The row with the given name; KeyError if there is none."""
        return self._sequences[sequence_name]

    def column_width(self) -> int:
        """The common length of all rows."""
        if not self._sequences:
            raise ValueError("the renderer holds no sequences")
        lengths = {len(sequence) for sequence in self._sequences.values()}
        if len(lengths) != 1:
            raise ValueError(f"rows have different lengths: {sorted(lengths)}")
        return lengths.pop()

    def extend_sequence(
        self,
        sequence_name: Hashable,
        extension: Iterable[Character],
        blank_data_generator: Callable[[], Any] = _no_data,
    ) -> None:
        """Append characters to a row and pad all other rows with blanks.

        Gaps and blanks already at the end of the row are kept.
        """
        logger.debug("Extending sequence")
        sequence = self._sequences[sequence_name]
        sequence.extend_with(extension)
        new_length = len(sequence)

        for name, other in self._sequences.items():
            if name != sequence_name:
                other.extend_with_blanks(blank_data_generator, new_length)

    def extend_sequence_with_alignment(
        self,
        reference_sequence_name: Hashable,
        query_sequence_name: Hashable,
        reference_sequence_offset: int,
        extension: Iterable[Character],
        blank_data_generator: Callable[[], Any] = _no_data,
        gap_data_generator: Callable[[], Any] = _no_data,
        alignment: Iterable[AlignmentType] = (),
        do_lowercasing: bool = True,
        invert_alignment: bool = False,
    ) -> None:
        """Append characters to a row while aligning them to another row."""
        logger.debug("Extending sequence with alignment at %s", reference_sequence_offset)
        reference = self._sequences[reference_sequence_name]
        query = self._sequences[query_sequence_name]

        offset = reference.translate_extension_offset(reference_sequence_offset)
        if offset is None:
            raise ValueError(
                f"sequence_offset {reference_sequence_offset} is out of bounds "
                f"(character count: {reference.character_count()})"
            )

        while offset > 0:
            if (
                _kind_at(reference, offset - 1) is CharacterKind.CHAR
                or _kind_at(query, offset - 1) is not CharacterKind.BLANK
            ):
                break
            offset -= 1

        query.prune_blanks(offset)
        self._extend_with_alignment(
            reference_sequence_name,
            query_sequence_name,
            offset,
            extension,
            blank_data_generator,
            gap_data_generator,
            alignment,
            do_lowercasing,
            invert_alignment,
        )

    def _extend_with_alignment(
        self,
        reference_sequence_name: Hashable,
        query_sequence_name: Hashable,
        rendered_sequence_offset: int,
        extension: Iterable[Character],
        blank_data_generator: Callable[[], Any],
        gap_data_generator: Callable[[], Any],
        alignment: Iterable[AlignmentType],
        do_lowercasing: bool,
        invert_alignment: bool,
    ) -> Optional[AlignmentRenderResult]:
        if reference_sequence_name == query_sequence_name:
            raise ValueError("a sequence cannot be aligned to itself")
        reference = self._sequences[reference_sequence_name]
        query = self._sequences[query_sequence_name]
        if len(query) != rendered_sequence_offset:
            raise ValueError(
                f"query length {len(query)} differs from the offset {rendered_sequence_offset}"
            )

        def new_blank() -> Character:
            return Character.new_blank(blank_data_generator())

        def skip_gaps_and_blanks(index: int) -> int:
            while _kind_at(reference, index) in _GAP_OR_BLANK:
                query.push(new_blank())
                index += 1
            return index

        reference_gaps: list[int] = []
        index = rendered_sequence_offset
        characters = iter(extension)
        offset_column: Optional[int] = None
        limit_column: Optional[int] = None

        for alignment_type in alignment:
            if invert_alignment:
                alignment_type = alignment_type.inverted()
            kind = alignment_type.kind

            while _kind_at(reference, index) is CharacterKind.BLANK:
                query.push(new_blank())
                index += 1

            if kind in _INSERTIONS:
                if offset_column is None:
                    offset_column = index
                if _kind_at(reference, index) is CharacterKind.GAP:
                    index += 1
                else:
                    reference_gaps.append(index)
                query.push(_next_character(characters))
                limit_column = index
            elif kind in _DELETIONS:
                index = skip_gaps_and_blanks(index)
                if offset_column is None:
                    offset_column = index
                query.push(Character.new_gap(gap_data_generator()))
                index += 1
                limit_column = index
            elif kind in _SUBSTITUTIONS:
                index = skip_gaps_and_blanks(index)
                character = _next_character(characters)
                if not character.is_char():
                    raise ValueError("a substitution needs a character, not a gap or blank")
                if do_lowercasing:
                    character.make_ascii_lowercase()
                    reference[index].make_ascii_lowercase()
                if offset_column is None:
                    offset_column = index
                query.push(character)
                index += 1
                limit_column = index
            elif kind in _MATCHES:
                index = skip_gaps_and_blanks(index)
                if offset_column is None:
                    offset_column = index
                query.push(_next_character(characters))
                index += 1
                limit_column = index
            else:
                raise ValueError(f"Not allowed in rendered alignment: {alignment_type}")

            if index > len(reference):
                raise ValueError("the alignment runs past the end of the reference")

        if next(characters, None) is not None:
            raise ValueError("the alignment consumes fewer characters than given")

        query.extend_with_blanks(blank_data_generator, len(reference))
        reference.insert_gaps(gap_data_generator, reference_gaps)
        for name, other in self._sequences.items():
            if name not in (reference_sequence_name, query_sequence_name):
                other.insert_blanks(blank_data_generator, reference_gaps)

        if offset_column is None or limit_column is None:
            return None
        return AlignmentRenderResult(offset_column, limit_column)

    def add_aligned_sequence(
        self,
        reference_sequence_name: Hashable,
        reference_sequence_offset: int,
        query_sequence_name: Hashable,
        query_sequence: Iterable[Character],
        blank_data_generator: Callable[[], Any] = _no_data,
        gap_data_generator: Callable[[], Any] = _no_data,
        alignment: Iterable[AlignmentType] = (),
        do_lowercasing: bool = True,
        invert_alignment: bool = False,
    ) -> Optional[AlignmentRenderResult]:
        """Add a new row aligned to an existing one.

        Returns the columns the query occupies, or None if nothing was aligned.
        """
        logger.debug(
            "Adding aligned sequence at %s (inverted: %s)",
            reference_sequence_offset,
            invert_alignment,
        )
        if query_sequence_name in self._sequences:
            raise ValueError(f"sequence {query_sequence_name!r} already exists")

        reference = self._sequences[reference_sequence_name]
        index = reference.translate_alignment_offset(reference_sequence_offset)
        if index is None:
            raise ValueError(
                f"reference_sequence_offset {reference_sequence_offset} is out of bounds"
            )
        self._sequences[query_sequence_name] = MultipairAlignmentSequence(
            Character.new_blank(blank_data_generator()) for _ in range(index)
        )

        return self._extend_with_alignment(
            reference_sequence_name,
            query_sequence_name,
            index,
            query_sequence,
            blank_data_generator,
            gap_data_generator,
            alignment,
            do_lowercasing,
            invert_alignment,
        )

    def add_independent_sequence(
        self, sequence_name: Hashable, sequence: Iterable[Character]
    ) -> None:
        """Add a row that is not aligned to anything."""
        if sequence_name in self._sequences:
            raise ValueError(f"sequence {sequence_name!r} already exists")
        self._sequences[sequence_name] = MultipairAlignmentSequence(sequence)

    def add_empty_independent_sequence(self, sequence_name: Hashable) -> None:
        """Add an empty row that is not aligned to anything."""
        self.add_independent_sequence(sequence_name, ())

    def extend_sequence_with_default_data(
        self, sequence_name: Hashable, extension: Iterable[str]
    ) -> None:
        """Append plain characters to a row."""
        self.extend_sequence(sequence_name, _with_default_data(extension), _no_data)

    def extend_sequence_with_alignment_and_default_data(
        self,
        reference_sequence_name: Hashable,
        query_sequence_name: Hashable,
        reference_sequence_offset: int,
        extension: Iterable[str],
        alignment: Iterable[AlignmentType],
        do_lowercasing: bool,
        invert_alignment: bool,
    ) -> None:
        """Append plain characters to a row, aligned to another row."""
        self.extend_sequence_with_alignment(
            reference_sequence_name,
            query_sequence_name,
            reference_sequence_offset,
            _with_default_data(extension),
            _no_data,
            _no_data,
            alignment,
            do_lowercasing,
            invert_alignment,
        )

    def add_aligned_sequence_with_default_data(
        self,
        reference_sequence_name: Hashable,
        reference_sequence_offset: int,
        query_sequence_name: Hashable,
        query_sequence: Iterable[str],
        alignment: Iterable[AlignmentType],
        do_lowercasing: bool,
        invert_alignment: bool,
    ) -> Optional[AlignmentRenderResult]:
        """Add a new row of plain characters aligned to an existing one."""
        return self.add_aligned_sequence(
            reference_sequence_name,
            reference_sequence_offset,
            query_sequence_name,
            _with_default_data(query_sequence),
            _no_data,
            _no_data,
            alignment,
            do_lowercasing,
            invert_alignment,
        )

    def add_aligned_sequence_without_data(
        self,
        reference_sequence_name: Hashable,
        reference_sequence_offset: int,
        query_sequence_name: Hashable,
        query_sequence: Iterable[str],
        alignment: Iterable[AlignmentType],
        do_lowercasing: bool,
        invert_alignment: bool,
    ) -> None:
        """Add a new row of plain characters aligned to an existing one."""
        self.add_aligned_sequence_with_default_data(
            reference_sequence_name,
            reference_sequence_offset,
            query_sequence_name,
            query_sequence,
            alignment,
            do_lowercasing,
            invert_alignment,
        )

    def render(self, output: TextIO, names: Iterable[Hashable]) -> None:
        """Write the named rows, each prefixed by its padded name."""
        names = list(names)
        if not names:
            raise ValueError("no sequence names to render")
        width = max(len(str(name)) for name in names)

        for name in names:
            sequence = self._sequences[name]
            label = str(name)
            output.write(f"{label}: {' ' * (width - len(label))}{sequence}\n")

    def render_without_names(self, output: TextIO, names: Iterable[Hashable]) -> None:
        """Write the named rows without their names."""
        for name in names:
            output.write(f"{self._sequences[name]}\n")