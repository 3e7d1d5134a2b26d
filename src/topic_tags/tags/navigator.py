"""Cursor-relative tag search with wraparound.

Every function is pure: positions come in as offsets and go out as
``TagOccurrence`` values. Forward searches leave the cursor at the end of
the match and backward searches at its start, so repeated calls step
through successive occurrences.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from topic_tags.tags.grammar import OPEN_DELIMITER, TAG_PATTERN, format_tag_pattern


@dataclass(slots=True, frozen=True)
class TagOccurrence:
    """One matched marker and the cursor position after moving to it."""

    tag: str
    start: int
    end: int
    cursor: int
    wrapped: bool = False


@dataclass(slots=True, frozen=True)
class NoMatchError(Exception):
    """Raised by strict searches when a tag occurs nowhere in the text."""

    tag: str

    def __str__(self) -> str:
        return f"No occurrence of tag: {self.tag}"


class GroupSeekUnsupportedError(NotImplementedError):
    """Seeking a tag across every file of a group is not supported."""


def next_occurrence(
    text: str,
    cursor: int,
    tag: str,
    *,
    no_error: bool = False,
    no_wrap: bool = False,
    bound: int | None = None,
) -> TagOccurrence | None:
    """Find the next marker for tag at or after cursor.

    The first pass is limited to matches ending at or before ``bound``.
    When it fails and wrapping is allowed, the whole text is searched from
    the beginning. With ``no_error`` a miss returns None instead of raising
    NoMatchError.
    """
    pattern = format_tag_pattern(tag)
    start = _clamp(cursor, len(text))
    end = len(text) if bound is None else _clamp(bound, len(text))
    if end < start:
        raise ValueError("Search bound is before the cursor.")

    match = pattern.search(text, start, end)
    if match is not None:
        return _occurrence(match, forward=True, wrapped=False)
    if not no_wrap:
        match = pattern.search(text)
        if match is not None:
            return _occurrence(match, forward=True, wrapped=True)
    return _miss(tag, no_error)


def previous_occurrence(
    text: str,
    cursor: int,
    tag: str,
    *,
    no_error: bool = False,
    no_wrap: bool = False,
    bound: int | None = None,
) -> TagOccurrence | None:
    """Find the closest marker for tag ending at or before cursor.

    ``bound`` is the lowest position a match may start at. Wrapping
    restarts the search from the end of the text.
    """
    pattern = format_tag_pattern(tag)
    end = _clamp(cursor, len(text))
    start = 0 if bound is None else _clamp(bound, len(text))
    if start > end:
        raise ValueError("Search bound is after the cursor.")

    match = last_match(pattern, text, start, end)
    if match is not None:
        return _occurrence(match, forward=False, wrapped=False)
    if not no_wrap:
        match = last_match(pattern, text, 0, len(text))
        if match is not None:
            return _occurrence(match, forward=False, wrapped=True)
    return _miss(tag, no_error)


def last_match(pattern: re.Pattern[str], text: str, start: int, end: int) -> re.Match[str] | None:
    """Return the match starting closest to ``end`` that fits in [start, end]."""
    position = text.rfind(OPEN_DELIMITER, start, end)
    while position != -1:
        match = pattern.match(text, position, end)
        if match is not None:
            return match
        position = text.rfind(OPEN_DELIMITER, start, position)
    return None


def line_bounds(text: str, cursor: int) -> tuple[int, int]:
    """Return start and end offsets of the line containing cursor."""
    position = _clamp(cursor, len(text))
    line_start = text.rfind("\n", 0, position) + 1
    line_end = text.find("\n", position)
    if line_end == -1:
        line_end = len(text)
    return line_start, line_end


def tag_on_current_line(text: str, line_start: int, line_end: int) -> str | None:
    """Return the first tag whose marker starts within the line span."""
    match = TAG_PATTERN.search(text, _clamp(line_start, len(text)))
    if match is None or match.start() > line_end:
        return None
    return match.group(1).strip()


def auto_choose_tag(
    text: str,
    cursor: int,
    bounds: tuple[int, int] | None = None,
) -> str | None:
    """Pick the tag a navigation command should default to.

    Prefers a marker on the cursor's line, then the nearest marker before
    the cursor.
    """
    line_start, line_end = bounds if bounds is not None else line_bounds(text, cursor)
    on_line = tag_on_current_line(text, line_start, line_end)
    if on_line is not None:
        return on_line
    match = last_match(TAG_PATTERN, text, 0, _clamp(cursor, len(text)))
    if match is None:
        return None
    return match.group(1).strip()


def seek_tag_in_group(group_name: str, tag: str) -> TagOccurrence:
    """Jump to a tag's next occurrence across every file in a group.

    File ordering and per-file cursor handling are undecided, so this
    always raises.
    """
    raise GroupSeekUnsupportedError(
        f"Seeking tag '{tag}' across group '{group_name}' is not supported."
    )


def _occurrence(match: re.Match[str], forward: bool, wrapped: bool) -> TagOccurrence:
    return TagOccurrence(
        tag=match.group(1),
        start=match.start(),
        end=match.end(),
        cursor=match.end() if forward else match.start(),
        wrapped=wrapped,
    )


def _miss(tag: str, no_error: bool) -> None:
    if no_error:
        return None
    raise NoMatchError(tag=tag)


def _clamp(position: int, length: int) -> int:
    return max(0, min(position, length))
