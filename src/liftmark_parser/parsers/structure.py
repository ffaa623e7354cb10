"""
Structure Analyzer

Read-only lookahead over classified lines. Nothing here moves a cursor or
records issues; the consuming parser calls these to decide what a header is
before it walks into it.
"""

from typing import Optional, Sequence

from .lines import Line


def has_sets_below_header(lines: Sequence[Line], header_index: int, header_level: int) -> bool:
    """
    Check if a header has sets below it, directly or through deeper headers.

    Scanning stops at the next header at `header_level` or above.
    """
    for i in range(header_index + 1, len(lines)):
        line = lines[i]

        if line.closes(header_level):
            break

        if line.is_list:
            return True

        # Supersets/sections nest their exercises under deeper headers
        if line.is_header and has_sets_below_header(lines, i, line.header_level):
            return True

    return False


def has_child_exercises(lines: Sequence[Line], header_index: int, header_level: int) -> bool:
    """Check if a header has a header exactly one level below it that has sets"""
    exercise_level = header_level + 1

    for i in range(header_index + 1, len(lines)):
        line = lines[i]

        if line.closes(header_level):
            break

        if line.header_level == exercise_level and has_sets_below_header(lines, i, exercise_level):
            return True

    return False


def find_workout_header(lines: Sequence[Line]) -> Optional[int]:
    """
    Find the workout header: the first header whose child headers have sets.

    Returns the index into `lines`, or None if no header qualifies.
    """
    for i, line in enumerate(lines):
        if line.is_header and has_child_exercises(lines, i, line.header_level):
            return i
    return None


def has_nested_headers(lines: Sequence[Line], header_index: int, header_level: int) -> bool:
    """Check for any deeper header before the next same-or-higher header"""
    for i in range(header_index + 1, len(lines)):
        line = lines[i]

        if line.closes(header_level):
            break

        if line.is_header:
            return True

    return False


def find_child_exercise_level(lines: Sequence[Line], start_index: int, parent_level: int) -> Optional[int]:
    """
    Find the header level of the children of a group.

    Returns the first header level below `parent_level` that has sets beneath
    it, so a section may hold a superset whose exercises sit two levels down.
    """
    for i in range(start_index, len(lines)):
        line = lines[i]

        if line.closes(parent_level):
            break

        if line.is_header and has_sets_below_header(lines, i, line.header_level):
            return line.header_level

    return None
