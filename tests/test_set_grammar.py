"""
Tests for the set line grammar

Covers the four main-clause forms, modifier clauses, trailing notes and the
errors/warnings each records on the parser state.
"""

import pytest

from liftmark_parser.parsers.base import ParserState
from liftmark_parser.parsers.models import IssueCode, WeightUnit
from liftmark_parser.parsers.set_grammar import (
    normalize_time_to_seconds,
    normalize_weight_unit,
    parse_main_clause,
    parse_modifiers,
    parse_set_line,
)


@pytest.fixture
def state() -> ParserState:
    return ParserState(lines=[])


def codes(issues):
    return [issue.code for issue in issues]


# ---------------------------------------------------------------------------
# Main clause
# ---------------------------------------------------------------------------


class TestWeightClause:
    """`<weight>[ unit] (x|for) <count|AMRAP>`"""

    def test_weight_without_unit(self, state):
        parsed = parse_set_line("225 x 5", state, 1)

        assert parsed.weight == 225
        assert parsed.weight_unit is None
        assert parsed.reps == 5
        assert parsed.time is None
        assert parsed.notes is None

    @pytest.mark.parametrize("text,unit", [
        ("225 lbs x 5", WeightUnit.LBS),
        ("225lb x 5", WeightUnit.LBS),
        ("100 kg x 8", WeightUnit.KG),
        ("100 KGS x 8", WeightUnit.KG),
    ])
    def test_weight_units(self, state, text, unit):
        parsed = parse_set_line(text, state, 1)
        assert parsed.weight_unit == unit

    def test_decimal_weight(self, state):
        parsed = parse_set_line("22.5 kg x 10", state, 1)
        assert parsed.weight == 22.5

    def test_reps_suffix(self, state):
        parsed = parse_set_line("135 x 10 reps", state, 1)

        assert parsed.reps == 10
        assert parsed.notes is None

    def test_for_time(self, state):
        """A time unit after the count makes it a duration."""
        parsed = parse_set_line("45 lbs for 60s", state, 1)

        assert parsed.weight == 45
        assert parsed.time == 60
        assert parsed.reps is None

    def test_for_minutes(self, state):
        parsed = parse_set_line("50 lbs x 2 min", state, 1)
        assert parsed.time == 120

    def test_weighted_amrap(self, state):
        parsed = parse_set_line("135 x AMRAP", state, 1)

        assert parsed.is_amrap
        assert parsed.weight == 135
        assert parsed.reps is None

    def test_bw_unit_omits_weight(self, state):
        parsed = parse_set_line("0 bw x 12", state, 1)

        assert parsed.weight is None
        assert parsed.weight_unit is None
        assert parsed.reps == 12

    def test_negative_weight_is_error(self, state):
        assert parse_set_line("-10 x 5", state, 7) is None

        assert codes(state.errors) == [IssueCode.NEGATIVE_WEIGHT]
        assert state.errors[0].line == 7

    def test_zero_reps_is_error(self, state):
        assert parse_set_line("135 x 0", state, 3) is None
        assert codes(state.errors) == [IssueCode.INVALID_REPS_TIME]

    def test_high_reps_warns(self, state):
        parsed = parse_set_line("45 x 150", state, 2)

        assert parsed.reps == 150
        assert state.errors == []
        assert codes(state.warnings) == [IssueCode.HIGH_REPS]


class TestBodyweightClause:
    """`[bw|x] x <count|AMRAP>`"""

    def test_bw_x_reps(self, state):
        parsed = parse_set_line("bw x 10", state, 1)

        assert parsed.reps == 10
        assert parsed.weight is None

    def test_bare_x_reps(self, state):
        parsed = parse_set_line("x 10", state, 1)
        assert parsed.reps == 10

    def test_bw_amrap(self, state):
        parsed = parse_set_line("bw x AMRAP", state, 1)

        assert parsed.is_amrap
        assert parsed.reps is None

    def test_bw_time(self, state):
        parsed = parse_set_line("bw x 45s", state, 1)
        assert parsed.time == 45


class TestBareQuantity:
    """`<count>[ unit]` and `AMRAP`"""

    def test_reps(self, state):
        parsed = parse_set_line("10", state, 1)

        assert parsed.reps == 10
        assert parsed.time is None
        assert parsed.weight is None

    @pytest.mark.parametrize("text,seconds", [
        ("60s", 60),
        ("60 sec", 60),
        ("60sec", 60),
        ("45 seconds", 45),
        ("2m", 120),
        ("2 min", 120),
        ("3 minutes", 180),
    ])
    def test_time_units(self, state, text, seconds):
        parsed = parse_set_line(text, state, 1)

        assert parsed.time == seconds
        assert parsed.reps is None
        assert parsed.notes is None

    def test_word_after_count_is_a_note(self, state):
        """'10 squats' is 10 reps, not 10 seconds."""
        parsed = parse_set_line("10 squats", state, 1)

        assert parsed.reps == 10
        assert parsed.time is None
        assert parsed.notes == "squats"

    def test_amrap_alone(self, state):
        parsed = parse_set_line("AMRAP", state, 1)

        assert parsed.is_amrap
        assert parsed.reps is None
        assert parsed.weight is None

    def test_unparsable_is_error(self, state):
        assert parse_set_line("heavy singles", state, 9) is None

        assert codes(state.errors) == [IssueCode.INVALID_SET_FORMAT]
        assert 'Invalid set format: "heavy singles"' in state.errors[0].message

    def test_main_clause_returns_trailing_text(self, state):
        parsed, trailing = parse_main_clause("30s forward", state, 1)

        assert parsed.time == 30
        assert trailing == "forward"


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


class TestModifiers:
    """`@key: value` and flag clauses."""

    def test_rpe(self, state):
        parsed = parse_set_line("225 x 5 @rpe: 8.5", state, 1)
        assert parsed.rpe == 8.5

    @pytest.mark.parametrize("value", ["0", "11", "10.5"])
    def test_rpe_out_of_range(self, state, value):
        parse_set_line(f"225 x 5 @rpe: {value}", state, 4)

        assert codes(state.errors) == [IssueCode.INVALID_RPE]
        assert state.errors[0].line == 4

    def test_rpe_not_a_number(self, state):
        parse_set_line("225 x 5 @rpe: hard", state, 1)
        assert codes(state.errors) == [IssueCode.INVALID_RPE]

    def test_rpe_bounds_inclusive(self, state):
        assert parse_set_line("10 @rpe: 1", state, 1).rpe == 1
        assert parse_set_line("10 @rpe: 10", state, 2).rpe == 10
        assert state.errors == []

    @pytest.mark.parametrize("value,seconds", [
        ("90", 90),
        ("90s", 90),
        ("90 sec", 90),
        ("3m", 180),
        ("2 min", 120),
    ])
    def test_rest(self, state, value, seconds):
        parsed = parse_set_line(f"100 x 5 @rest: {value}", state, 1)

        assert parsed.rest == seconds
        assert parsed.notes is None

    def test_rest_invalid(self, state):
        parse_set_line("100 x 5 @rest: long", state, 1)
        assert codes(state.errors) == [IssueCode.INVALID_REST]

    def test_short_rest_warns(self, state):
        parsed = parse_set_line("100 x 5 @rest: 5s", state, 1)

        assert parsed.rest == 5
        assert codes(state.warnings) == [IssueCode.SHORT_REST]
        assert state.errors == []

    def test_long_rest_warns(self, state):
        parsed = parse_set_line("100 x 5 @rest: 15m", state, 1)

        assert parsed.rest == 900
        assert codes(state.warnings) == [IssueCode.LONG_REST]

    def test_tempo(self, state):
        parsed = parse_set_line("225 x 5 @tempo: 3-0-1-0", state, 1)
        assert parsed.tempo == "3-0-1-0"

    @pytest.mark.parametrize("value", ["3-0-1", "30-1-0-0", "slow"])
    def test_tempo_invalid(self, state, value):
        parse_set_line(f"225 x 5 @tempo: {value}", state, 1)
        assert codes(state.errors) == [IssueCode.INVALID_TEMPO]

    @pytest.mark.parametrize("modifier,field_name,expected,note", [
        ("rpe: 8, x", "rpe", 8, ", x"),
        ("rpe: 7.5. easy", "rpe", 7.5, ". easy"),
        ("rest: 90s, x", "rest", 90, ", x"),
        ("rest: 90s.", "rest", 90, "."),
        ("rest: 60sec, then walk", "rest", 60, ", then walk"),
        ("rest: 2m; stretch", "rest", 120, "; stretch"),
        ("tempo: 3-0-1-0, x", "tempo", "3-0-1-0", ", x"),
    ])
    def test_punctuation_after_value(self, state, modifier, field_name, expected, note):
        """Text right after a valid value is a note, not an error."""
        parsed = parse_set_line(f"100 x 5 @{modifier}", state, 1)

        assert state.errors == []
        assert getattr(parsed, field_name) == expected
        assert parsed.notes == note

    def test_flags(self, state):
        parsed = parse_set_line("30s @perside @dropset", state, 1)

        assert parsed.is_per_side
        assert parsed.is_dropset

    def test_flags_are_case_insensitive(self, state):
        parsed = parse_set_line("15 x 12 @DropSet", state, 1)
        assert parsed.is_dropset

    def test_unknown_modifier_kept_as_note(self, state):
        parsed = parse_set_line("135 x 8 @invalid: value Some note here", state, 5)

        assert codes(state.warnings) == [IssueCode.UNKNOWN_MODIFIER]
        assert state.warnings[0].line == 5
        assert parsed.notes == "invalid: value Some note here"

    def test_malformed_modifier_kept_as_note(self, state):
        parsed = parse_set_line("225 x 5 @rpe: 7 Hit the target @135 for warmup", state, 1)

        assert parsed.rpe == 7
        assert codes(state.warnings) == [IssueCode.INVALID_MODIFIER]
        assert parsed.notes == "Hit the target 135 for warmup"

    def test_modifiers_checked_when_main_clause_fails(self, state):
        """Every problem on the line is reported."""
        assert parse_set_line("lots @rpe: 12", state, 2) is None
        assert codes(state.errors) == [IssueCode.INVALID_RPE, IssueCode.INVALID_SET_FORMAT]

    def test_parse_modifiers_returns_updates(self, state):
        updates, trailing = parse_modifiers(["rest: 120s Really focused", "dropset"], state, 1)

        assert updates == {"rest": 120, "is_dropset": True}
        assert trailing == ["Really focused"]


class TestTrailingNotes:
    """Unconsumed text from every clause is joined into the note."""

    def test_main_clause_note(self, state):
        parsed = parse_set_line("225 x 5 Felt strong today!", state, 1)
        assert parsed.notes == "Felt strong today!"

    def test_notes_after_several_modifiers(self, state):
        parsed = parse_set_line("335 x 3 @rpe: 9 @rest: 180s Tough but doable", state, 1)

        assert parsed.rpe == 9
        assert parsed.rest == 180
        assert parsed.notes == "Tough but doable"

    def test_notes_from_main_and_modifier_are_joined(self, state):
        parsed = parse_set_line("30s each side @perside hold it", state, 1)
        assert parsed.notes == "each side hold it"

    def test_no_notes_is_none(self, state):
        parsed = parse_set_line("225 x 5 @rpe: 8 ", state, 1)
        assert parsed.notes is None


class TestHelpers:
    def test_normalize_weight_unit(self):
        assert normalize_weight_unit("LB") == WeightUnit.LBS
        assert normalize_weight_unit("kgs") == WeightUnit.KG
        assert normalize_weight_unit("bw") is None
        assert normalize_weight_unit("stone") is None
        assert normalize_weight_unit(None) is None

    def test_normalize_time_to_seconds(self):
        assert normalize_time_to_seconds(90, None) == 90
        assert normalize_time_to_seconds(90, "sec") == 90
        assert normalize_time_to_seconds(3, "min") == 180
        assert normalize_time_to_seconds(3, "M") == 180
