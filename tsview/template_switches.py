"""Locate template switches in an alignment together with their flanks."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from .alignment_stream import (
    AlignmentCoordinates,
    AlignmentKind,
    AlignmentStream,
    AlignmentType,
    TemplateSwitchPrimary,
    TemplateSwitchSecondary,
)

logger = logging.getLogger(__name__)

STREAM_DEFAULT_LENGTH = 20
STREAM_PADDING = 10

CompactAlignment = list[tuple[int, AlignmentType]]

_SECONDARY_CONSUMING = frozenset(
    {
        AlignmentKind.SECONDARY_DELETION,
        AlignmentKind.SECONDARY_SUBSTITUTION,
        AlignmentKind.SECONDARY_MATCH,
    }
)


@dataclass
class TSShow:
    """A template switch with its upstream and downstream context."""

    upstream_offset: AlignmentCoordinates
    downstream_limit: AlignmentCoordinates
    sp1_offset: AlignmentCoordinates
    sp2_secondary_offset: int
    sp3_secondary_offset: int
    sp4_offset: AlignmentCoordinates
    primary: TemplateSwitchPrimary
    secondary: TemplateSwitchSecondary
    upstream: CompactAlignment
    template_switch: CompactAlignment
    downstream: CompactAlignment


class _Cursor:
    """A run-length encoded alignment consumed from the front."""

    def __init__(self, alignment: Iterable[tuple[int, AlignmentType]]) -> None:
        self._entries = deque(
            [multiplicity, alignment_type]
            for multiplicity, alignment_type in alignment
            if multiplicity > 0
        )

    def peek(self) -> Optional[tuple[int, AlignmentType]]:
        if not self._entries:
            return None
        multiplicity, alignment_type = self._entries[0]
        return multiplicity, alignment_type

    def next(self) -> Optional[tuple[int, AlignmentType]]:
        if not self._entries:
            return None
        multiplicity, alignment_type = self._entries.popleft()
        return multiplicity, alignment_type

    def set_front_multiplicity(self, multiplicity: int) -> None:
        if multiplicity == 0:
            self._entries.popleft()
        else:
            self._entries[0][0] = multiplicity


def parse(alignment: Iterable[tuple[int, AlignmentType]]) -> list[TSShow]:
    """Find all template switches in a run-length encoded alignment."""
    template_switches = []
    stream = AlignmentStream()
    cursor = _Cursor(alignment)

    while (front := cursor.peek()) is not None:
        multiplicity, alignment_type = front
        if alignment_type.kind is AlignmentKind.TEMPLATE_SWITCH_ENTRANCE:
            template_switches.append(_parse_template_switch(cursor, stream))
        elif alignment_type.kind is AlignmentKind.TEMPLATE_SWITCH_EXIT:
            raise ValueError("Found template switch exit without matching entrance")
        else:
            stream.push(multiplicity, alignment_type)
            cursor.next()

    return template_switches


def _parse_template_switch(cursor: _Cursor, stream: AlignmentStream) -> TSShow:
    multiplicity, entrance = cursor.next()
    primary = entrance.primary
    secondary = entrance.secondary
    first_offset = entrance.first_offset
    logger.debug("Parsing TS with first_offset %s", first_offset)

    sp1_offset = stream.head_coordinates()
    upstream = stream.copy()
    template_switch: CompactAlignment = []

    stream.push(multiplicity, entrance)

    if secondary is TemplateSwitchSecondary.REFERENCE:
        sp2_secondary_offset = sp1_offset.reference + first_offset
    else:
        sp2_secondary_offset = sp1_offset.query + first_offset
    if sp2_secondary_offset < 0:
        raise ValueError(f"template switch jumps to negative offset {sp2_secondary_offset}")
    sp3_secondary_offset = sp2_secondary_offset

    while (entry := cursor.next()) is not None:
        multiplicity, alignment_type = entry

        if alignment_type.kind is AlignmentKind.TEMPLATE_SWITCH_ENTRANCE:
            raise ValueError("Found template switch entrance within template switch")

        if alignment_type.kind is AlignmentKind.TEMPLATE_SWITCH_EXIT:
            stream.push(multiplicity, alignment_type)

            upstream.pop(
                max(
                    STREAM_DEFAULT_LENGTH,
                    max(
                        max(sp1_offset.reference, sp1_offset.query) - sp2_secondary_offset,
                        0,
                    )
                    + STREAM_PADDING,
                )
            )
            upstream_offset = upstream.tail_coordinates()

            stream.clear()
            sp4_offset = stream.head_coordinates()
            downstream = _parse_downstream(
                cursor,
                stream,
                max(
                    STREAM_DEFAULT_LENGTH,
                    max(
                        sp3_secondary_offset
                        - (min(sp4_offset.reference, sp4_offset.query) + STREAM_PADDING),
                        0,
                    ),
                ),
            )

            return TSShow(
                upstream_offset=upstream_offset,
                downstream_limit=stream.head_coordinates(),
                sp1_offset=sp1_offset,
                sp2_secondary_offset=sp2_secondary_offset,
                sp3_secondary_offset=sp3_secondary_offset,
                sp4_offset=sp4_offset,
                primary=primary,
                secondary=secondary,
                upstream=upstream.stream_alignment(),
                template_switch=template_switch,
                downstream=downstream,
            )

        template_switch.append((multiplicity, alignment_type))
        stream.push(multiplicity, alignment_type)

        if alignment_type.kind in _SECONDARY_CONSUMING:
            sp3_secondary_offset -= multiplicity
            if sp3_secondary_offset < 0:
                raise ValueError("template switch runs past the start of the secondary")

    raise ValueError("Found template switch without exit")


def _parse_downstream(
    cursor: _Cursor, stream: AlignmentStream, requested_length: int
) -> CompactAlignment:
    stream.clear()

    while (front := cursor.peek()) is not None:
        multiplicity, alignment_type = front
        if alignment_type.kind is AlignmentKind.TEMPLATE_SWITCH_ENTRANCE:
            break
        if alignment_type.kind is AlignmentKind.TEMPLATE_SWITCH_EXIT:
            raise ValueError("Found template switch exit without matching entrance")

        remaining = stream.push_until_full(multiplicity, alignment_type, requested_length)
        cursor.set_front_multiplicity(remaining)

        if stream.is_full(requested_length):
            break

    return stream.stream_alignment()