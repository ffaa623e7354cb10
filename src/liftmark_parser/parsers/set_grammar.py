"""
Set Grammar

Parses the content of a set list item:

    225 lbs x 5 @rpe: 8 @rest: 180s @tempo: 3-0-1-0 Felt strong

The text before the first '@' is the main clause (weight/reps/time/AMRAP);
each '@' clause after it is a modifier. Text the grammar does not consume is
kept as the set's note.

Main clause formats, tried in this order:
    225 x 5, 225 lbs x 5 reps, 100 kg x 8, 45 lbs for 60s, 135 x AMRAP
    bw x 10, x 10, bw x AMRAP
    10, 60s, 2 min
    AMRAP
"""

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from .base import ParserState
from .models import IssueCode, WeightUnit

HIGH_REPS_THRESHOLD = 100
MIN_REST_SECONDS = 10
MAX_REST_SECONDS = 600
RPE_MIN = 1
RPE_MAX = 10

# Longer spellings first so "60sec" does not stop at "s"
_TIME_UNIT = r'seconds?|secs?|s|minutes?|mins?|m'
_QUANTITY_UNIT = rf'(?:(reps?|{_TIME_UNIT})\b)?'

# "225 lbs x 5", "45 lbs for 60s", "135 x AMRAP"
WEIGHT_CLAUSE_PATTERN = re.compile(
    r'^(-?\d+(?:\.\d+)?)\s*(lbs|lb|kgs|kg|bw)?\s*(?:x|for)\s*(\d+|amrap\b)\s*'
    + _QUANTITY_UNIT
    + r'\s*(.*)$',
    re.IGNORECASE,
)

# "bw x 10", "x 10", "bw x AMRAP"
BODYWEIGHT_CLAUSE_PATTERN = re.compile(
    r'^(?:(bw|x)\s*)?x\s*(\d+|amrap\b)\s*' + _QUANTITY_UNIT + r'\s*(.*)$',
    re.IGNORECASE,
)

# "10", "60s", "2 min"
BARE_QUANTITY_PATTERN = re.compile(
    r'^(-?\d+)\s*' + _QUANTITY_UNIT + r'\s*(.*)$',
    re.IGNORECASE,
)

AMRAP_PATTERN = re.compile(r'^amrap$', re.IGNORECASE)

MODIFIER_PATTERN = re.compile(r'^(\w+):\s*(.+)$')
RPE_VALUE_PATTERN = re.compile(r'^(\d+(?:\.\d+)?)\s*(.*)$')
REST_VALUE_PATTERN = re.compile(rf'^(\d+)\s*(?:({_TIME_UNIT})\b)?\s*(.*)$', re.IGNORECASE)
TEMPO_VALUE_PATTERN = re.compile(r'^(\d-\d-\d-\d)\s*(.*)$')

FLAG_MODIFIERS = {
    'dropset': 'is_dropset',
    'perside': 'is_per_side',
}

WEIGHT_UNIT_ALIASES = {
    'lb': WeightUnit.LBS,
    'lbs': WeightUnit.LBS,
    'kg': WeightUnit.KG,
    'kgs': WeightUnit.KG,
}


@dataclass
class ParsedSet:
    """Values read from one set line, before ids and ordering are attached"""
    weight: Optional[float] = None
    weight_unit: Optional[WeightUnit] = None
    reps: Optional[int] = None
    time: Optional[int] = None  # seconds
    is_amrap: bool = False
    rpe: Optional[float] = None
    rest: Optional[int] = None  # seconds
    tempo: Optional[str] = None
    is_dropset: bool = False
    is_per_side: bool = False
    notes: Optional[str] = None


def normalize_weight_unit(unit: Optional[str]) -> Optional[WeightUnit]:
    """Map lb/lbs/kg/kgs to a WeightUnit; anything else (including bw) is None"""
    if not unit:
        return None
    return WEIGHT_UNIT_ALIASES.get(unit.lower().strip())


def is_time_unit(unit: Optional[str]) -> bool:
    return bool(unit) and unit[0].lower() in ('s', 'm')


def normalize_time_to_seconds(value: int, unit: Optional[str]) -> int:
    """Convert a value with an s/sec/m/min style unit to seconds. No unit means seconds."""
    if unit and unit.lower().startswith('m'):
        return value * 60
    return value


def _apply_quantity(
    parsed: ParsedSet,
    token: str,
    unit: Optional[str],
    state: ParserState,
    line_number: int,
) -> bool:
    """Fill reps, time or the AMRAP flag from the quantity after x/for. False on error."""
    if token.lower() == 'amrap':
        parsed.is_amrap = True
        return True

    value = int(token)
    if value <= 0:
        state.add_error(line_number, 'Reps/time must be positive', IssueCode.INVALID_REPS_TIME)
        return False

    if is_time_unit(unit):
        parsed.time = normalize_time_to_seconds(value, unit)
        return True

    if value > HIGH_REPS_THRESHOLD:
        state.add_warning(
            line_number,
            f'Very high rep count ({value}). Double-check for typos.',
            IssueCode.HIGH_REPS,
        )
    parsed.reps = value
    return True


def parse_main_clause(
    content: str,
    state: ParserState,
    line_number: int,
) -> Optional[Tuple[ParsedSet, Optional[str]]]:
    """
    Parse the main set clause.

    Returns (parsed_set, trailing_text), or None after recording an error.
    """
    text = content.strip()

    if AMRAP_PATTERN.match(text):
        return ParsedSet(is_amrap=True), None

    match = WEIGHT_CLAUSE_PATTERN.match(text)
    if match:
        weight = float(match.group(1))
        unit_token = (match.group(2) or '').lower()

        if weight < 0:
            state.add_error(line_number, 'Weight cannot be negative', IssueCode.NEGATIVE_WEIGHT)
            return None

        parsed = ParsedSet()
        if unit_token != 'bw':
            parsed.weight = weight
            parsed.weight_unit = normalize_weight_unit(unit_token)

        if not _apply_quantity(parsed, match.group(3), match.group(4), state, line_number):
            return None
        return parsed, match.group(5).strip() or None

    match = BODYWEIGHT_CLAUSE_PATTERN.match(text)
    if match:
        parsed = ParsedSet()
        if not _apply_quantity(parsed, match.group(2), match.group(3), state, line_number):
            return None
        return parsed, match.group(4).strip() or None

    match = BARE_QUANTITY_PATTERN.match(text)
    if match:
        parsed = ParsedSet()
        if not _apply_quantity(parsed, match.group(1), match.group(2), state, line_number):
            return None
        return parsed, match.group(3).strip() or None

    state.add_error(
        line_number,
        f'Invalid set format: "{text}". Expected format: "weight unit x reps" or "time" or "AMRAP"',
        IssueCode.INVALID_SET_FORMAT,
    )
    return None


def _parse_rpe(value: str, state: ParserState, line_number: int) -> Tuple[Optional[float], Optional[str]]:
    match = RPE_VALUE_PATTERN.match(value)
    if not match:
        state.add_error(line_number, f'Invalid RPE format: {value}', IssueCode.INVALID_RPE)
        return None, None

    rpe = float(match.group(1))
    if rpe < RPE_MIN or rpe > RPE_MAX:
        state.add_error(line_number, f'RPE must be between 1-10, got: {match.group(1)}', IssueCode.INVALID_RPE)
        return None, None

    return rpe, match.group(2)


def _parse_rest(value: str, state: ParserState, line_number: int) -> Tuple[Optional[int], Optional[str]]:
    match = REST_VALUE_PATTERN.match(value)
    if not match:
        state.add_error(
            line_number,
            f'Invalid rest time format: {value}. Expected format: "180s" or "3m"',
            IssueCode.INVALID_REST,
        )
        return None, None

    rest = normalize_time_to_seconds(int(match.group(1)), match.group(2))
    if rest < MIN_REST_SECONDS:
        state.add_warning(
            line_number,
            f'Very short rest period ({rest}s). Double-check for typos.',
            IssueCode.SHORT_REST,
        )
    if rest > MAX_REST_SECONDS:
        state.add_warning(
            line_number,
            f'Very long rest period ({rest}s). Double-check for typos.',
            IssueCode.LONG_REST,
        )
    return rest, match.group(3)


def _parse_tempo(value: str, state: ParserState, line_number: int) -> Tuple[Optional[str], Optional[str]]:
    match = TEMPO_VALUE_PATTERN.match(value)
    if not match:
        state.add_error(
            line_number,
            f'Invalid tempo format: {value}. Expected format: "X-X-X-X" (e.g., "3-0-1-0")',
            IssueCode.INVALID_TEMPO,
        )
        return None, None
    return match.group(1), match.group(2)


VALUE_MODIFIERS = {
    'rpe': ('rpe', _parse_rpe),
    'rest': ('rest', _parse_rest),
    'tempo': ('tempo', _parse_tempo),
}


def parse_modifiers(
    clauses: List[str],
    state: ParserState,
    line_number: int,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Parse '@' modifier clauses.

    Returns (field_updates, trailing_text_parts). Unknown or malformed
    clauses are kept whole as trailing text after a warning.
    """
    updates: Dict[str, Any] = {}
    trailing: List[str] = []

    for clause in clauses:
        clause = clause.strip()
        if not clause:
            continue

        lowered = clause.lower()
        flag = next((keyword for keyword in FLAG_MODIFIERS if lowered.startswith(keyword)), None)
        if flag:
            updates[FLAG_MODIFIERS[flag]] = True
            rest_of_clause = clause[len(flag):].strip()
            if rest_of_clause:
                trailing.append(rest_of_clause)
            continue

        match = MODIFIER_PATTERN.match(clause)
        if not match:
            state.add_warning(line_number, f'Invalid modifier format: "@{clause}"', IssueCode.INVALID_MODIFIER)
            trailing.append(clause)
            continue

        key = match.group(1).lower()
        value = match.group(2).strip()

        if key not in VALUE_MODIFIERS:
            state.add_warning(line_number, f'Unknown modifier: @{key}', IssueCode.UNKNOWN_MODIFIER)
            trailing.append(clause)
            continue

        field_name, parse_value = VALUE_MODIFIERS[key]
        parsed_value, remaining = parse_value(value, state, line_number)
        if parsed_value is None:
            trailing.append(value)
            continue

        updates[field_name] = parsed_value
        if remaining and remaining.strip():
            trailing.append(remaining.strip())

    return updates, trailing


def parse_set_line(content: str, state: ParserState, line_number: int) -> Optional[ParsedSet]:
    """
    Parse a single set line.

    Modifiers are validated even when the main clause fails, so every
    problem on the line is reported. Returns None if the main clause failed.
    """
    main_part, *modifier_parts = content.split('@')

    updates, modifier_trailing = parse_modifiers(modifier_parts, state, line_number)

    result = parse_main_clause(main_part, state, line_number)
    if result is None:
        return None

    parsed, main_trailing = result
    notes = ' '.join(part for part in [main_trailing, *modifier_trailing] if part).strip()

    return replace(parsed, **updates, notes=notes or None)
