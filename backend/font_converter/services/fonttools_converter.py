"""
Font Converter Backend - fontTools Converter Implementation
===========================================================

What:  Concrete FontConverter backed by fontTools' TTFont.
How:   Detection reads the 4-byte container signature. Conversion loads the
       font with TTFont, sets `flavor` (None for plain sfnt, "woff" or
       "woff2") and saves it back into memory.
Who:   Instantiated once at import; called by FormatNegotiator.

Library notes:
    - TTFont auto-detects its input container, so convert() never needs to
      be told the source format.
    - Writing (and reading) WOFF2 requires the `brotli` package; fontTools
      imports it lazily and raises ImportError if it is missing, which
      surfaces here as a ConversionFailedError.
    - Outlines are never converted: a CFF font stays CFF when unwrapped to
      sfnt, whatever token the client used.
"""

import logging
import time
import uuid
from io import BytesIO
from typing import Dict, Optional

import fontTools
from fontTools.ttLib import TTFont

from font_converter.exceptions import ConversionFailedError, DetectionFailedError
from font_converter.models.font import ConverterFormat, SourceFormat
from font_converter.services.converter_base import FontConverter

logger = logging.getLogger(__name__)

# Container signatures (first four bytes of the file)
SIGNATURES: Dict[bytes, SourceFormat] = {
    b"wOFF": SourceFormat.WOFF,
    b"wOF2": SourceFormat.WOFF2,
    b"\x00\x01\x00\x00": SourceFormat.SFNT,  # TrueType outlines
    b"OTTO": SourceFormat.SFNT,              # CFF outlines
    b"true": SourceFormat.SFNT,              # legacy Apple TrueType
}

# TTFont.flavor value for each converter container
FLAVORS: Dict[ConverterFormat, Optional[str]] = {
    ConverterFormat.SFNT: None,
    ConverterFormat.WOFF: "woff",
    ConverterFormat.WOFF2: "woff2",
}


class FontToolsConverter(FontConverter):
    """
    fontTools implementation of the FontConverter contract.

    Stateless: one instance is shared by every request.
    """

    def detect_format(self, data: bytes) -> SourceFormat:
        signature = bytes(data[:4])
        source_format = SIGNATURES.get(signature)
        if source_format is None:
            raise DetectionFailedError(
                context={"signature": signature.hex(), "size": len(data)},
            )
        return source_format

    def convert(self, data: bytes, target: ConverterFormat) -> bytes:
        """
        Transcode `data` into `target` using TTFont.

        Every failure inside fontTools (TTLibError, struct errors from a
        truncated file, missing brotli) is wrapped in ConversionFailedError
        with the library's message preserved.
        """
        conversion_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        logger.info(
            "[%s] Converting %d bytes to %s",
            conversion_id,
            len(data),
            target.value,
        )

        try:
            font = TTFont(BytesIO(data))
            try:
                font.flavor = FLAVORS[target]
                buffer = BytesIO()
                font.save(buffer)
            finally:
                font.close()
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "[%s] fontTools conversion failed after %.0fms: %s",
                conversion_id,
                duration_ms,
                str(e),
            )
            raise ConversionFailedError(
                message=str(e) or type(e).__name__,
                context={
                    "conversion_id": conversion_id,
                    "target": target.value,
                    "error_type": type(e).__name__,
                },
            ) from e

        output = buffer.getvalue()
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "[%s] Conversion to %s completed in %.0fms (%d → %d bytes)",
            conversion_id,
            target.value,
            duration_ms,
            len(data),
            len(output),
        )
        return output

    def describe(self) -> str:
        return f"fonttools {fontTools.version}"


# ── Singleton Instance ────────────────────────────────────────────────────
font_converter = FontToolsConverter()
