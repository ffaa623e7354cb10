"""
Parse endpoints for LiftMark workout markdown

Provides POST /parse/markdown for pasted text and POST /parse/file for
shared .md/.markdown/.txt files. Both return the ParseResult envelope:
success + data on success, errors (and warnings) on failure.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from liftmark_parser.config import settings
from liftmark_parser.parsers.markdown_parser import MarkdownParser
from liftmark_parser.parsers.models import FileInfo, IssueCode

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class ParseMarkdownRequest(BaseModel):
    """Request model for POST /parse/markdown"""
    markdown: str = Field(
        ...,
        max_length=settings.MAX_MARKDOWN_LENGTH,
        description="LMWF markdown, e.g. '# Push Day\\n## Bench Press\\n- 135 x 5'",
    )


# ---------------------------------------------------------------------------
# API Endpoints
# ---------------------------------------------------------------------------

@router.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "environment": settings.ENVIRONMENT}


@router.post("/parse/markdown")
def parse_markdown(request: ParseMarkdownRequest) -> JSONResponse:
    """
    Parse LMWF markdown into a workout template.

    ## Request Body
    - **markdown**: The workout markdown

    ## Response
    Always 200 for well-formed requests; check `success`:
    - success=true: `data` holds the template, `warnings` any non-blocking issues
    - success=false: `errors` lists every problem found, with line numbers
    """
    if not request.markdown.strip():
        raise HTTPException(status_code=400, detail="Markdown is required")

    result = MarkdownParser().parse(request.markdown)
    if not result.success:
        logger.info(f"Markdown parse failed with {len(result.errors)} errors")

    return JSONResponse(result.model_dump(mode="json"))


@router.post("/parse/file")
async def parse_file(file: UploadFile = File(...)) -> JSONResponse:
    """
    Import and parse a shared workout file.

    Rejects unsupported extensions, empty files and files over the size
    limit with 400. Parse problems come back in the 200 envelope, as for
    /parse/markdown.
    """
    content = await file.read()
    filename = file.filename or ""

    file_info = FileInfo(
        filename=filename,
        extension=Path(filename).suffix.lower(),
        size_bytes=len(content),
        content_type=file.content_type,
    )

    result = MarkdownParser().parse_file(content, file_info)
    import_errors = [e for e in result.error_details if e.code == IssueCode.FILE_IMPORT_FAILED]
    if import_errors:
        logger.warning(f"File import failed for {filename}: {import_errors[0].message}")
        raise HTTPException(status_code=400, detail=import_errors[0].message)

    return JSONResponse(result.model_dump(mode="json"))
