"""
Base Parser

Abstract base class for workout parsers, and the per-invocation parser state
that collects line-addressed errors and warnings.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .file_import import read_import_file
from .lines import Line
from .models import (
    FileInfo,
    IssueCode,
    ParseIssue,
    ParseResult,
)

logger = logging.getLogger(__name__)


@dataclass
class ParserState:
    """
    State owned by a single parse call.

    The cursor is not stored here: consuming routines take a line index and
    return the index they stopped at.
    """
    lines: List[Line]
    workout_header_level: Optional[int] = None
    exercise_header_level: Optional[int] = None
    errors: List[ParseIssue] = field(default_factory=list)
    warnings: List[ParseIssue] = field(default_factory=list)

    def add_error(self, line: Optional[int], message: str, code: IssueCode):
        """Record a hard error"""
        issue = ParseIssue(line=line, message=message, code=code)
        self.errors.append(issue)
        logger.error(f"Parser error: {issue}")

    def add_warning(self, line: Optional[int], message: str, code: IssueCode):
        """Record a non-blocking warning"""
        issue = ParseIssue(line=line, message=message, code=code)
        self.warnings.append(issue)
        logger.warning(f"Parser warning: {issue}")

    def fix_levels(self, workout_header_level: int):
        """Exercises sit exactly one level below the workout header"""
        self.workout_header_level = workout_header_level
        self.exercise_header_level = workout_header_level + 1


class BaseParser(ABC):
    """Abstract base class for workout text parsers"""

    SUPPORTED_EXTENSIONS: Tuple[str, ...] = ()

    @abstractmethod
    def parse(self, text: str) -> ParseResult:
        """
        Parse workout text.

        Args:
            text: Raw document text

        Returns:
            ParseResult with the template, or the errors that blocked it
        """
        pass

    def can_parse(self, file_info: FileInfo) -> bool:
        """
        Check if this parser can handle the given file.

        Args:
            file_info: Information about the file

        Returns:
            True if the file extension is one this parser reads
        """
        return file_info.extension.lower() in self.SUPPORTED_EXTENSIONS

    def parse_file(self, content: bytes, file_info: FileInfo) -> ParseResult:
        """Decode an imported file and parse it"""
        imported = read_import_file(content, file_info, allowed_extensions=self.SUPPORTED_EXTENSIONS)
        if not imported.success:
            return ParseResult.failed(
                [ParseIssue(message=imported.error or "Failed to read file", code=IssueCode.FILE_IMPORT_FAILED)],
                [],
            )

        return self.parse(imported.markdown)
