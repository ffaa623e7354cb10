"""
LiftMark Workout Format (LMWF) Markdown Parser

Parses markdown text into a WorkoutTemplate:

- Flexible header levels (the workout can be any H level, exercises one below)
- Freeform notes after headers become descriptions/notes
- @tags and @units workout metadata, @type exercise metadata
- Set lines: weight x reps, time, AMRAP, and @rpe/@rest/@tempo/@dropset/@perside
- Supersets: nested headers whose text contains "superset" (case-insensitive)
- Sections: any other header with nested headers ("Warmup", "Cool Down")
- Group children may sit at any header level below the group

Every problem is recorded with its line number; any hard error fails the
whole parse.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from liftmark_parser import ids
from liftmark_parser.ids import IdGenerator, create_short_id
from .base import BaseParser, ParserState
from .file_import import IMPORT_EXTENSIONS
from .lines import Line, classify_lines
from .models import (
    GroupType,
    IssueCode,
    ParseIssue,
    ParseResult,
    TemplateExercise,
    TemplateSet,
    WeightUnit,
    WorkoutTemplate,
)
from .set_grammar import normalize_weight_unit, parse_set_line
from .structure import (
    find_child_exercise_level,
    find_workout_header,
    has_nested_headers,
)

logger = logging.getLogger(__name__)

NO_WORKOUT_HEADER_MESSAGE = (
    'No workout header found. Must have a header (# Workout Name) with exercises below it.'
)


@dataclass
class WorkoutSection:
    """Name, metadata and notes found between the workout header and its first exercise"""
    name: str
    tags: List[str] = field(default_factory=list)
    default_weight_unit: Optional[WeightUnit] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class Group:
    """The superset/section a child exercise is parsed under"""
    id: str
    group_type: GroupType
    name: str


def parse_tags(value: str) -> List[str]:
    """Parse @tags metadata: "tag1, tag2, tag3" -> ["tag1", "tag2", "tag3"]"""
    return [tag.strip() for tag in value.split(',') if tag.strip()]


def group_type_for(header_text: str) -> GroupType:
    return GroupType.SUPERSET if 'superset' in header_text.lower() else GroupType.SECTION


class MarkdownParser(BaseParser):
    """Parser for LMWF markdown documents"""

    SUPPORTED_EXTENSIONS = IMPORT_EXTENSIONS

    def __init__(self, generate_id: Optional[IdGenerator] = None):
        self.generate_id = generate_id or ids.generate_id

    def parse(self, markdown: str) -> ParseResult:
        """Parse markdown text into a WorkoutTemplate"""
        try:
            return self._parse(markdown)
        except Exception as e:
            logger.exception(f"Failed to parse workout markdown: {e}")
            return ParseResult.failed(
                [ParseIssue(message=f"Parse error: {e}", code=IssueCode.PARSE_EXCEPTION)],
                [],
            )

    def _parse(self, markdown: str) -> ParseResult:
        state = ParserState(lines=classify_lines(markdown))

        # Generated upfront so exercises can reference it
        workout_id = self.generate_id()

        header_index = find_workout_header(state.lines)
        if header_index is None:
            state.add_error(None, NO_WORKOUT_HEADER_MESSAGE, IssueCode.NO_WORKOUT_HEADER)
            return ParseResult.failed(state.errors, [])

        header = state.lines[header_index]
        state.fix_levels(header.header_level)

        section, index = self._parse_workout_section(state, header_index + 1, header)
        exercises, _ = self._parse_exercises(state, index, workout_id)

        if not any(exercise.sets for exercise in exercises):
            state.add_error(
                header.line_number,
                'Workout must contain at least one exercise',
                IssueCode.NO_EXERCISES,
            )

        if state.errors:
            return ParseResult.failed(state.errors, state.warnings)

        now = datetime.now(timezone.utc).isoformat()
        template = WorkoutTemplate(
            id=workout_id,
            name=section.name,
            description=section.description,
            tags=section.tags,
            default_weight_unit=section.default_weight_unit,
            source_markdown=markdown,
            created_at=now,
            updated_at=now,
            exercises=exercises,
        )

        logger.info(
            f"Parsed workout {create_short_id(template.id)} '{template.name}': "
            f"{len(exercises)} exercises, {len(state.warnings)} warnings"
        )
        return ParseResult.succeeded(template, state.warnings)

    # ------------------------------------------------------------------
    # Workout section
    # ------------------------------------------------------------------

    def _parse_workout_section(
        self,
        state: ParserState,
        index: int,
        header: Line,
    ) -> Tuple[WorkoutSection, int]:
        """Collect metadata and notes until the first exercise header"""
        section = WorkoutSection(name=header.header_text or '')
        note_lines: List[str] = []

        while index < len(state.lines):
            line = state.lines[index]

            if line.header_level == state.exercise_header_level:
                break
            if line.closes(state.workout_header_level):
                break

            if line.is_metadata:
                if line.metadata_key == 'tags':
                    section.tags = parse_tags(line.metadata_value or '')
                elif line.metadata_key == 'units':
                    unit = self._parse_units(state, line)
                    if unit:
                        section.default_weight_unit = unit
                # Unknown metadata is ignored (forward compatible)
            elif line.trimmed:
                note_lines.append(line.trimmed)

            index += 1

        if note_lines:
            section.description = '\n'.join(note_lines)
        return section, index

    def _parse_units(self, state: ParserState, line: Line) -> Optional[WeightUnit]:
        value = line.metadata_value or ''
        unit = normalize_weight_unit(value)
        if unit is None:
            state.add_error(
                line.line_number,
                f'Invalid @units value "{value}". Must be "lbs" or "kg"',
                IssueCode.INVALID_UNITS,
            )
        return unit

    # ------------------------------------------------------------------
    # Exercises, supersets and sections
    # ------------------------------------------------------------------

    def _parse_exercises(
        self,
        state: ParserState,
        index: int,
        workout_id: str,
    ) -> Tuple[List[TemplateExercise], int]:
        """Parse every exercise-level block under the workout header"""
        exercises: List[TemplateExercise] = []

        while index < len(state.lines):
            line = state.lines[index]

            if line.closes(state.workout_header_level):
                break

            if line.header_level == state.exercise_header_level:
                block, index = self._parse_exercise_block(
                    state, index, workout_id, order_index=len(exercises), group=None
                )
                exercises.extend(block)
            else:
                index += 1

        return exercises, index

    def _parse_exercise_block(
        self,
        state: ParserState,
        index: int,
        workout_id: str,
        order_index: int,
        group: Optional[Group],
    ) -> Tuple[List[TemplateExercise], int]:
        """
        Parse the block opened by the header at `index`.

        Returns the exercises it produced in document order: one leaf
        exercise, or a group container followed by its descendants.
        """
        header = state.lines[index]

        if has_nested_headers(state.lines, index, header.header_level):
            return self._parse_group(state, index, workout_id, order_index, group)

        exercise_id = self.generate_id()
        equipment_type, notes, index = self._parse_exercise_metadata(state, index + 1, header.header_level)
        sets, index = self._parse_sets(state, index, header.header_level, exercise_id)

        if not sets:
            state.add_error(
                header.line_number,
                f'Exercise "{header.header_text}" has no sets',
                IssueCode.NO_SETS,
            )

        exercise = TemplateExercise(
            id=exercise_id,
            workout_template_id=workout_id,
            exercise_name=header.header_text,
            order_index=order_index,
            notes=notes,
            equipment_type=equipment_type,
            group_type=group.group_type if group else None,
            group_name=group.name if group else None,
            parent_exercise_id=group.id if group else None,
            sets=sets,
        )
        return [exercise], index

    def _parse_group(
        self,
        state: ParserState,
        index: int,
        workout_id: str,
        order_index: int,
        parent: Optional[Group],
    ) -> Tuple[List[TemplateExercise], int]:
        """
        Parse a superset or section.

        The container carries no sets. Its children are the headers at the
        first deeper level that has sets; a nested group keeps its own kind and
        is the parent of its own children.
        """
        header = state.lines[index]
        group = Group(
            id=self.generate_id(),
            group_type=group_type_for(header.header_text),
            name=header.header_text,
        )

        exercises = [
            TemplateExercise(
                id=group.id,
                workout_template_id=workout_id,
                exercise_name=group.name,
                order_index=order_index,
                group_type=group.group_type,
                group_name=group.name,
                parent_exercise_id=parent.id if parent else None,
                sets=[],
            )
        ]

        index += 1
        child_level = find_child_exercise_level(state.lines, index, header.header_level)

        while index < len(state.lines):
            line = state.lines[index]

            if line.closes(header.header_level):
                break

            if child_level is not None and line.header_level == child_level:
                block, index = self._parse_exercise_block(
                    state, index, workout_id, order_index=order_index + len(exercises), group=group
                )
                exercises.extend(block)
            else:
                index += 1

        return exercises, index

    def _parse_exercise_metadata(
        self,
        state: ParserState,
        index: int,
        header_level: int,
    ) -> Tuple[Optional[str], Optional[str], int]:
        """Read @type and freeform notes up to the first set. Returns (equipment_type, notes, index)."""
        equipment_type: Optional[str] = None
        note_lines: List[str] = []

        while index < len(state.lines):
            line = state.lines[index]

            if line.closes(header_level) or line.is_list:
                break

            if line.is_metadata:
                if line.metadata_key == 'type':
                    equipment_type = line.metadata_value
            elif line.trimmed:
                note_lines.append(line.trimmed)

            index += 1

        return equipment_type, '\n'.join(note_lines) if note_lines else None, index

    def _parse_sets(
        self,
        state: ParserState,
        index: int,
        header_level: int,
        exercise_id: str,
    ) -> Tuple[List[TemplateSet], int]:
        """Parse list items as sets until the next header at or above `header_level`"""
        sets: List[TemplateSet] = []

        while index < len(state.lines):
            line = state.lines[index]

            if line.closes(header_level):
                break

            if line.is_list:
                parsed = parse_set_line(line.list_content, state, line.line_number)
                if parsed:
                    sets.append(TemplateSet(
                        id=self.generate_id(),
                        template_exercise_id=exercise_id,
                        order_index=len(sets),
                        target_weight=parsed.weight,
                        target_weight_unit=parsed.weight_unit,
                        target_reps=parsed.reps,
                        target_time=parsed.time,
                        target_rpe=parsed.rpe,
                        rest_seconds=parsed.rest,
                        tempo=parsed.tempo,
                        is_amrap=parsed.is_amrap,
                        is_dropset=parsed.is_dropset,
                        is_per_side=parsed.is_per_side,
                        notes=parsed.notes,
                    ))

            index += 1

        return sets, index


def parse_workout(markdown: str, generate_id: Optional[IdGenerator] = None) -> ParseResult:
    """
    Parse LMWF markdown into a WorkoutTemplate.

    Args:
        markdown: The markdown text to parse
        generate_id: Source of unique ids; defaults to UUID4 strings

    Returns:
        ParseResult with the template and warnings, or the errors that blocked it
    """
    return MarkdownParser(generate_id=generate_id).parse(markdown)
