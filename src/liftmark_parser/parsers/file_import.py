"""
File Import

Reads shared/uploaded .md, .markdown and .txt files into markdown text
ready for the parser.
"""

import logging
from typing import Optional, Sequence

from liftmark_parser.config import settings
from .models import FileImportResult, FileInfo

logger = logging.getLogger(__name__)

IMPORT_EXTENSIONS = ('.txt', '.md', '.markdown')

# Tried in order; latin-1 decodes any byte string and is used last
ENCODINGS = ['utf-8-sig', 'cp1252']


def _format_size(size_bytes: int) -> str:
    if size_bytes >= 1_000_000:
        return f"{size_bytes / 1_000_000:g}MB"
    return f"{size_bytes} bytes"


def decode_content(content: bytes) -> str:
    """Decode bytes to string, stripping a UTF-8 BOM if present"""
    for encoding in ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue

    return content.decode('latin-1')


def read_import_file(
    content: bytes,
    file_info: FileInfo,
    allowed_extensions: Sequence[str] = IMPORT_EXTENSIONS,
    max_size_bytes: Optional[int] = None,
) -> FileImportResult:
    """
    Validate and decode an imported file.

    Args:
        content: Raw file bytes
        file_info: Information about the file
        allowed_extensions: Lower-case extensions, including the dot
        max_size_bytes: Size limit, defaults to settings.MAX_FILE_SIZE_BYTES

    Returns:
        FileImportResult with the markdown text, or the reason it was rejected
    """
    limit = settings.MAX_FILE_SIZE_BYTES if max_size_bytes is None else max_size_bytes

    if file_info.extension.lower() not in allowed_extensions:
        return FileImportResult(
            success=False,
            file_name=file_info.filename,
            error="Unsupported file type. Only .txt, .md, and .markdown files are supported.",
        )

    if not content:
        return FileImportResult(success=False, file_name=file_info.filename, error="File is empty.")

    if len(content) > limit:
        logger.warning(f"Rejected {file_info.filename}: {len(content)} bytes exceeds {limit}")
        return FileImportResult(
            success=False,
            file_name=file_info.filename,
            error=f"File is too large (max {_format_size(limit)}).",
        )

    markdown = decode_content(content)
    if not markdown.strip():
        return FileImportResult(success=False, file_name=file_info.filename, error="File is empty.")

    return FileImportResult(success=True, markdown=markdown, file_name=file_info.filename)
