"""
Font Converter Backend - Conversion Route Handlers
=================================================

What:  POST /api/convert (one font, binary response) and
       POST /api/batch-convert (up to `max_batch_files` fonts, JSON response).
How:   Reads and validates the multipart upload through UploadService, then
       hands bytes and the target token to FormatNegotiator.

Request Flow (single file):
    1. Client sends multipart/form-data: `font` file + `targetFormat` field
    2. UploadService: presence → extension → size (400 on failure)
    3. FormatNegotiator: target token → detection → no-op rules → convert
    4. Response body is the font; headers carry type, filename and outcome

Errors are raised, never returned: the global handlers in main.py turn
them into JSON bodies with the right status code.
"""

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, File, Form, Response, UploadFile

from font_converter.schemas.conversion import BatchConvertResponse, ErrorResponse
from font_converter.services.negotiator import format_negotiator, parse_target_format
from font_converter.services.upload_service import upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Convert"])


def _download_name(filename: str, extension: str) -> str:
    """`Roboto-Regular.woff` + `woff2` → `Roboto-Regular.woff2`."""
    # Header values must be latin-1; keep the ASCII part of the name
    stem = Path(filename).stem.encode("ascii", "ignore").decode("ascii").replace('"', "")
    stem = stem or "font"
    return f"{stem}.{extension}"


@router.post(
    "/convert",
    response_class=Response,
    responses={
        200: {
            "description": "Font in the requested format",
            "content": {"font/woff2": {}, "font/woff": {}, "font/ttf": {}, "font/otf": {}},
        },
        400: {"description": "Missing/invalid file, bad target or undetectable font", "model": ErrorResponse},
        500: {"description": "Conversion failed", "model": ErrorResponse},
    },
    summary="Convert a single font",
    description=(
        "Upload a WOFF, WOFF2, TTF or OTF font (max 10MB) and receive it in the "
        "requested format. Files already in that format are returned unchanged."
    ),
)
async def convert_font(
    font: Optional[UploadFile] = File(
        default=None,
        description="Font file (.woff, .woff2, .ttf or .otf)",
    ),
    target_format: Optional[str] = Form(
        default=None,
        alias="targetFormat",
        description="Target format: woff, woff2, ttf or otf",
    ),
) -> Response:
    filename, content = await upload_service.read_upload(font)
    target = parse_target_format(target_format)

    logger.info(
        "Received convert request: filename=%s, size=%d bytes, target=%s",
        filename,
        len(content),
        target.value,
    )

    result = await format_negotiator.negotiate(content, target)

    return Response(
        content=result.output,
        media_type=target.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{_download_name(filename, target.value)}"',
            "X-Font-Converted": "true" if result.converted else "false",
            "X-Font-Source-Format": result.input_label,
        },
    )


@router.post(
    "/batch-convert",
    response_model=BatchConvertResponse,
    responses={
        400: {"description": "No files, too many files, invalid file or bad target", "model": ErrorResponse},
    },
    summary="Convert a batch of fonts",
    description=(
        "Upload up to 50 fonts under the `fonts` field. Each file is converted "
        "independently; a file that fails is reported in `results` with "
        "status 'error' and does not stop the rest of the batch."
    ),
)
async def batch_convert(
    fonts: Optional[List[UploadFile]] = File(
        default=None,
        description="Font files (.woff, .woff2, .ttf or .otf), at most 50",
    ),
    target_format: Optional[str] = Form(
        default=None,
        alias="targetFormat",
        description="Target format applied to every file",
    ),
) -> BatchConvertResponse:
    files = await upload_service.read_batch(fonts)
    target = parse_target_format(target_format)

    logger.info(
        "Received batch request: %d files, %d bytes total, target=%s",
        len(files),
        sum(len(content) for _, content in files),
        target.value,
    )

    results = await format_negotiator.negotiate_batch(files, target)
    return BatchConvertResponse(results=results)
