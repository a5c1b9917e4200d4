"""
Font Converter Backend - Format Negotiator
==========================================

What:  Decides, per file, whether the converter has to run at all, and
       runs it when it does.
How:   Parses the target token, detects the source container, then applies
       two no-op rules before falling back to the converter.
Who:   Called by the convert and batch-convert route handlers.

Decision table:
    detected   target        outcome
    ────────   ───────────   ──────────────────────────────────────────
    sfnt       ttf / otf     return input unchanged (sfnt equivalence)
    woff       woff          return input unchanged (exact match)
    woff2      woff2         return input unchanged (exact match)
    anything   anything else convert(target.converter_format)

Because TTF and OTF share the sfnt container, an OTF upload with target `ttf`
is returned as-is (CFF outlines are never rewritten to TrueType). The input
label reported to clients still says `otf` for such files.
"""

import base64
import logging
from typing import List, Optional, Sequence, Tuple, Union

from starlette.concurrency import run_in_threadpool

from font_converter.config import settings
from font_converter.exceptions import (
    DetectionFailedError,
    FontConverterError,
    InvalidTargetFormatError,
    InvalidUploadError,
)
from font_converter.models.font import (
    SUPPORTED_FORMATS,
    ConversionResult,
    FontFormat,
    SourceFormat,
    source_label,
)
from font_converter.schemas.conversion import BatchErrorItem, BatchItem, BatchSuccessItem
from font_converter.services.converter_base import FontConverter
from font_converter.services.fonttools_converter import font_converter

logger = logging.getLogger(__name__)

# Batch error text when detection fails (single-file requests get a 400 instead)
BATCH_DETECTION_ERROR = "Could not detect format"


def parse_target_format(value: Union[str, FontFormat, None]) -> FontFormat:
    """
    Resolve a client-supplied target token.

    Raises:
        InvalidTargetFormatError: Missing or unrecognized token.
    """
    if isinstance(value, FontFormat):
        return value
    target = FontFormat.parse(value)
    if target is None:
        raise InvalidTargetFormatError(target=value, supported_formats=SUPPORTED_FORMATS)
    return target


class FormatNegotiator:
    """
    Format negotiation for single files and bounded batches.

    The converter is injected so tests can substitute a mock; by default the
    shared fontTools converter is used.
    """

    def __init__(self, converter: Optional[FontConverter] = None):
        self.converter = converter or font_converter

    @staticmethod
    def is_noop(source_format: SourceFormat, target: FontFormat) -> bool:
        """True when the input can be returned unchanged."""
        if source_format is SourceFormat.SFNT and target.is_sfnt:
            return True
        return source_format.value == target.value

    async def negotiate(
        self,
        source: bytes,
        target_format: Union[str, FontFormat, None],
    ) -> ConversionResult:
        """
        Produce the bytes to return for one file.

        Args:
            source:        Uploaded font bytes.
            target_format: Target token (raw string from the form, or FontFormat).

        Returns:
            ConversionResult; `converted` is False when the input is returned as-is.

        Raises:
            InvalidTargetFormatError: Before any detection, for a bad token.
            DetectionFailedError:     Source container not identified.
            ConversionFailedError:    The converter raised.
        """
        target = parse_target_format(target_format)
        source_format = self.converter.detect_format(source)
        label = source_label(source_format, source)

        logger.info("Detected format: %s (%s), target format: %s", source_format.value, label, target.value)

        if self.is_noop(source_format, target):
            logger.info("Source already in %s, returning original", target.value)
            return ConversionResult(
                output=source,
                converted=False,
                source_format=source_format,
                target_format=target,
                input_label=label,
            )

        output = await run_in_threadpool(self.converter.convert, source, target.converter_format)
        return ConversionResult(
            output=output,
            converted=True,
            source_format=source_format,
            target_format=target,
            input_label=label,
        )

    async def negotiate_batch(
        self,
        files: Sequence[Tuple[str, bytes]],
        target_format: Union[str, FontFormat, None],
    ) -> List[BatchItem]:
        """
        Negotiate every file of a batch, sequentially and in order.

        A failing file is recorded as a BatchErrorItem and processing moves on
        to the next file. Only request-level problems raise: a bad target
        token, an empty batch or one above `max_batch_files`.

        Args:
            files:         (filename, bytes) pairs in upload order.
            target_format: Target token applied to every file.
        """
        target = parse_target_format(target_format)

        if not files:
            raise InvalidUploadError(message="No font files uploaded", field="fonts")
        if len(files) > settings.max_batch_files:
            raise InvalidUploadError(
                message=f"Too many files. A batch may contain at most {settings.max_batch_files} fonts.",
                field="fonts",
                context={"count": len(files)},
            )

        results: List[BatchItem] = []
        for filename, content in files:
            try:
                result = await self.negotiate(content, target)
            except DetectionFailedError:
                logger.warning("Batch item %s: %s", filename, BATCH_DETECTION_ERROR)
                results.append(BatchErrorItem(filename=filename, error=BATCH_DETECTION_ERROR))
                continue
            except FontConverterError as exc:
                logger.warning("Batch item %s failed: %s", filename, exc.message)
                results.append(BatchErrorItem(filename=filename, error=exc.message))
                continue
            except Exception as exc:
                # One broken file never aborts the rest of the batch
                logger.error("Batch item %s failed unexpectedly: %s", filename, exc, exc_info=True)
                results.append(BatchErrorItem(filename=filename, error=str(exc) or type(exc).__name__))
                continue

            results.append(
                BatchSuccessItem(
                    filename=filename,
                    converted=result.converted,
                    input_format=result.input_label,
                    output_format=target.value,
                    data=base64.b64encode(result.output).decode("ascii"),
                )
            )

        failed = sum(1 for item in results if item.status == "error")
        logger.info(
            "Batch to %s finished: %d files, %d failed",
            target.value,
            len(results),
            failed,
        )
        return results


# ── Singleton Instance ────────────────────────────────────────────────────
format_negotiator = FormatNegotiator()
