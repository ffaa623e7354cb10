"""
Line Classifier

Splits raw LMWF text into line-addressed tokens. Each physical line is
classified on its own as a header, list item, metadata directive or plain text.
"""

import re
from dataclasses import dataclass
from typing import List, Optional


HEADER_PATTERN = re.compile(r'^(#{1,6})\s+(.+)$')    # "## Bench Press"
LIST_PATTERN = re.compile(r'^-\s+(.+)$')              # "- 225 x 5"
METADATA_PATTERN = re.compile(r'^@(\w+):\s*(.+)$')    # "@units: lbs"


@dataclass(frozen=True)
class Line:
    """A classified source line. At most one of header/list/metadata is populated."""
    line_number: int
    raw: str
    trimmed: str
    header_level: Optional[int] = None
    header_text: Optional[str] = None
    list_content: Optional[str] = None
    metadata_key: Optional[str] = None
    metadata_value: Optional[str] = None

    @property
    def is_header(self) -> bool:
        return self.header_level is not None

    @property
    def is_list(self) -> bool:
        return self.list_content is not None

    @property
    def is_metadata(self) -> bool:
        return self.metadata_key is not None

    def closes(self, level: int) -> bool:
        """True if this line is a header at or above `level` (ends a frame opened at `level`)"""
        return self.header_level is not None and self.header_level <= level


def normalize_line_endings(text: str) -> str:
    return text.replace('\r\n', '\n').replace('\r', '\n')


def classify_line(raw: str, line_number: int) -> Line:
    trimmed = raw.strip()

    header_match = HEADER_PATTERN.match(trimmed)
    if header_match:
        return Line(
            line_number=line_number,
            raw=raw,
            trimmed=trimmed,
            header_level=len(header_match.group(1)),
            header_text=header_match.group(2).strip(),
        )

    list_match = LIST_PATTERN.match(trimmed)
    if list_match:
        return Line(
            line_number=line_number,
            raw=raw,
            trimmed=trimmed,
            list_content=list_match.group(1).strip(),
        )

    metadata_match = METADATA_PATTERN.match(trimmed)
    if metadata_match:
        return Line(
            line_number=line_number,
            raw=raw,
            trimmed=trimmed,
            metadata_key=metadata_match.group(1).lower(),
            metadata_value=metadata_match.group(2).strip(),
        )

    return Line(line_number=line_number, raw=raw, trimmed=trimmed)


def classify_lines(text: str) -> List[Line]:
    """Classify every line of `text`. Line numbers are 1-based."""
    return [
        classify_line(raw, index + 1)
        for index, raw in enumerate(normalize_line_endings(text).split('\n'))
    ]
