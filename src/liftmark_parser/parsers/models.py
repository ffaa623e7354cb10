"""
Parser Models

Pydantic models for the workout template produced by the LMWF markdown parser,
plus the line-addressed issue model shared by every parsing stage.
"""

from typing import List, Optional
from pydantic import BaseModel, Field
from enum import Enum


class WeightUnit(str, Enum):
    """Weight units accepted by @units and set clauses"""
    LBS = "lbs"
    KG = "kg"


class GroupType(str, Enum):
    """Kinds of container exercises"""
    SUPERSET = "superset"  # Performed back-to-back
    SECTION = "section"    # Organizational grouping ("Warmup", "Core")


class IssueCode(str, Enum):
    """Stable machine-readable codes for parse errors and warnings"""
    # Errors
    NO_WORKOUT_HEADER = "NO_WORKOUT_HEADER"
    NO_EXERCISES = "NO_EXERCISES"
    NO_SETS = "NO_SETS"
    INVALID_UNITS = "INVALID_UNITS"
    NEGATIVE_WEIGHT = "NEGATIVE_WEIGHT"
    INVALID_REPS_TIME = "INVALID_REPS_TIME"
    INVALID_RPE = "INVALID_RPE"
    INVALID_REST = "INVALID_REST"
    INVALID_TEMPO = "INVALID_TEMPO"
    INVALID_SET_FORMAT = "INVALID_SET_FORMAT"
    PARSE_EXCEPTION = "PARSE_EXCEPTION"
    FILE_IMPORT_FAILED = "FILE_IMPORT_FAILED"

    # Warnings
    HIGH_REPS = "HIGH_REPS"
    SHORT_REST = "SHORT_REST"
    LONG_REST = "LONG_REST"
    UNKNOWN_MODIFIER = "UNKNOWN_MODIFIER"
    INVALID_MODIFIER = "INVALID_MODIFIER"


class ParseIssue(BaseModel):
    """A single error or warning tied to a source line"""
    line: Optional[int] = Field(default=None, ge=1, description="1-based source line, None for document-level issues")
    message: str
    code: IssueCode

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"Line {self.line}: {self.message}"


class TemplateSet(BaseModel):
    """One prescribed set of a leaf exercise"""
    id: str
    template_exercise_id: str
    order_index: int = Field(..., ge=0, description="Position within the exercise, starting at 0")
    target_weight: Optional[float] = Field(default=None, description="Omitted for bodyweight sets")
    target_weight_unit: Optional[WeightUnit] = None
    target_reps: Optional[int] = Field(default=None, ge=1)
    target_time: Optional[int] = Field(default=None, ge=1, description="Seconds")
    target_rpe: Optional[float] = Field(default=None, ge=1, le=10)
    rest_seconds: Optional[int] = Field(default=None, ge=0)
    tempo: Optional[str] = Field(default=None, description="Eccentric-pause-concentric-pause, e.g. '3-0-1-0'")
    is_amrap: bool = False
    is_dropset: bool = False
    is_per_side: bool = False
    notes: Optional[str] = Field(default=None, description="Trailing free text from the set line")


class TemplateExercise(BaseModel):
    """An exercise, or a superset/section container when group_type is set and sets is empty"""
    id: str
    workout_template_id: str
    exercise_name: str
    order_index: int = Field(..., ge=0, description="Position in the flattened exercise list")
    notes: Optional[str] = None
    equipment_type: Optional[str] = Field(default=None, description="Freeform equipment from @type")
    group_type: Optional[GroupType] = None
    group_name: Optional[str] = None
    parent_exercise_id: Optional[str] = None
    sets: List[TemplateSet] = Field(default_factory=list)

    @property
    def is_container(self) -> bool:
        return self.group_type is not None and not self.sets


class WorkoutTemplate(BaseModel):
    """Parsed workout template"""
    id: str
    name: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    default_weight_unit: Optional[WeightUnit] = None
    source_markdown: str = Field(..., description="Original markdown, kept for re-parsing")
    created_at: str = Field(..., description="ISO datetime string")
    updated_at: str = Field(..., description="ISO datetime string")
    exercises: List[TemplateExercise] = Field(default_factory=list)

    def children_of(self, exercise_id: str) -> List[TemplateExercise]:
        """Direct children of a container, in document order"""
        return [ex for ex in self.exercises if ex.parent_exercise_id == exercise_id]

    def leaf_exercises(self) -> List[TemplateExercise]:
        """Exercises that carry sets"""
        return [ex for ex in self.exercises if ex.sets]


class WorkoutParseError(Exception):
    """Raised by ParseResult.raise_for_errors() when a parse failed"""

    def __init__(self, issues: List[ParseIssue]):
        self.issues = issues
        summary = "; ".join(str(issue) for issue in issues) or "Parse failed"
        super().__init__(summary)


class ParseResult(BaseModel):
    """Result from the markdown parser"""
    success: bool = True
    data: Optional[WorkoutTemplate] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    # Same issues with their codes
    error_details: List[ParseIssue] = Field(default_factory=list)
    warning_details: List[ParseIssue] = Field(default_factory=list)

    @classmethod
    def succeeded(cls, template: WorkoutTemplate, warnings: List[ParseIssue]) -> "ParseResult":
        return cls(
            success=True,
            data=template,
            warnings=[str(w) for w in warnings],
            warning_details=list(warnings),
        )

    @classmethod
    def failed(cls, errors: List[ParseIssue], warnings: List[ParseIssue]) -> "ParseResult":
        return cls(
            success=False,
            errors=[str(e) for e in errors],
            warnings=[str(w) for w in warnings],
            error_details=list(errors),
            warning_details=list(warnings),
        )

    def raise_for_errors(self) -> WorkoutTemplate:
        """Return the template, or raise WorkoutParseError if parsing failed"""
        if not self.success or self.data is None:
            raise WorkoutParseError(self.error_details)
        return self.data


class FileInfo(BaseModel):
    """Information about the file being imported"""
    filename: str
    extension: str
    size_bytes: int = 0
    content_type: Optional[str] = None
    encoding: Optional[str] = None


class FileImportResult(BaseModel):
    """Outcome of reading an imported markdown/text file"""
    success: bool
    markdown: Optional[str] = None
    file_name: Optional[str] = None
    error: Optional[str] = None
