"""
Font Converter Backend - Upload Validation Service
==================================================

What:  Validates uploaded font files before they reach the negotiator.
How:   Checks the filename extension against an allow-list, the byte size
       against the configured maximum and the batch length against the cap.
Who:   Called by the convert and batch-convert route handlers.
When:  Immediately after FastAPI has parsed the multipart body.
       Starlette and python-multipart buffer the whole body (spooled to a
       temp file past 1MB) before the route runs, so the size limit rejects
       an oversized file after it has been received, not while it streams.

Validation order (cheapest first):
    1. Presence:   a request without a file never reaches the other checks
    2. Extension:  no bytes need to be read
    3. Size:       Content-Length first, then the actual byte count

Content sniffing is not done here. The converter's header detection is the
content check, and its failure is reported as DetectionFailedError.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from fastapi import UploadFile

from font_converter.config import settings
from font_converter.exceptions import InvalidUploadError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".woff", ".woff2", ".ttf", ".otf"}

INVALID_EXTENSION_MESSAGE = "Invalid format. Only WOFF, WOFF2, TTF, OTF are supported."


class UploadService:
    """
    Upload checks shared by the single and batch endpoints.

    Holds no per-request state; limits come from settings unless overridden
    (tests pass explicit limits).
    """

    def __init__(
        self,
        max_file_size: Optional[int] = None,
        max_batch_files: Optional[int] = None,
    ):
        self._max_file_size = max_file_size
        self._max_batch_files = max_batch_files

    @property
    def max_file_size(self) -> int:
        return self._max_file_size or settings.max_file_size

    @property
    def max_batch_files(self) -> int:
        return self._max_batch_files or settings.max_batch_files

    def validate_extension(self, filename: str, field: str = "font") -> str:
        """
        Returns:  Normalized extension (lowercase with dot).
        Raises:   InvalidUploadError if the extension is not allowed.
        """
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise InvalidUploadError(
                message=INVALID_EXTENSION_MESSAGE,
                field=field,
                context={"filename": filename, "extension": ext},
            )
        return ext

    def validate_size(
        self,
        content_length: Optional[int],
        actual_size: int,
        field: str = "font",
    ) -> None:
        """
        Reject files above the configured maximum.

        Args:
            content_length: Size reported by the multipart parser (may be None)
            actual_size:    Byte count actually read
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise InvalidUploadError(
                message=f"File too large. Maximum size is {max_mb:.0f}MB.",
                field=field,
                context={"max_size": self.max_file_size, "reported_size": content_length},
            )

        if actual_size > self.max_file_size:
            raise InvalidUploadError(
                message=(
                    f"File too large ({actual_size / (1024 * 1024):.1f}MB). "
                    f"Maximum size is {max_mb:.0f}MB."
                ),
                field=field,
                context={"max_size": self.max_file_size, "actual_size": actual_size},
            )

    def validate_batch_count(self, count: int) -> None:
        if count == 0:
            raise InvalidUploadError(message="No font files uploaded", field="fonts")
        if count > self.max_batch_files:
            raise InvalidUploadError(
                message=f"Too many files. A batch may contain at most {self.max_batch_files} fonts.",
                field="fonts",
                context={"count": count, "max_files": self.max_batch_files},
            )

    async def read_upload(self, upload: Optional[UploadFile], field: str = "font") -> Tuple[str, bytes]:
        """
        Validate and read a single upload into memory.

        Returns:  (original filename, content bytes)
        Raises:   InvalidUploadError for a missing, disallowed or oversized file.
        """
        if upload is None:
            raise InvalidUploadError(message="No font file uploaded", field=field)

        filename = upload.filename or ""
        try:
            self.validate_extension(filename, field=field)
            self.validate_size(upload.size, 0, field=field)
            content = await upload.read()
            self.validate_size(None, len(content), field=field)
        finally:
            await upload.close()

        logger.debug("Accepted upload %s (%d bytes)", filename, len(content))
        return filename, content

    async def read_batch(self, uploads: Optional[Sequence[UploadFile]]) -> List[Tuple[str, bytes]]:
        """
        Validate and read every file of a batch.

        Any single invalid file rejects the whole request, the same way the
        single-file endpoint rejects its upload.
        """
        uploads = list(uploads or [])
        self.validate_batch_count(len(uploads))

        files: List[Tuple[str, bytes]] = []
        for upload in uploads:
            files.append(await self.read_upload(upload, field="fonts"))
        return files


# ── Singleton Instance ────────────────────────────────────────────────────
upload_service = UploadService()
