"""
Font Converter Backend - Custom Exception Hierarchy
===================================================

What:  Application-specific exceptions for the upload and conversion paths.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services; caught by global handlers, or by the batch
       negotiator, which records them per file instead.

Exception Hierarchy:
    FontConverterError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    │   ├── InvalidUploadError       → missing, disallowed or oversized file
    │   ├── InvalidTargetFormatError → unrecognized target token
    │   └── DetectionFailedError     → source container could not be identified
    └── ConversionFailedError        → 500 Internal Server Error (message passthrough)

No exception here is retried anywhere: every failure is terminal for the
request (or, in batch mode, for the single file that raised it).
"""

from typing import Any, Dict, Iterable, List, Optional


class FontConverterError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FontConverterError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidUploadError(ValidationError):
    """
    Raised when the upload itself is unusable.

    When: No file in the request, extension outside the allow-list,
          file larger than the configured limit, too many files in a batch.
    """

    def __init__(
        self,
        message: str = "Invalid upload",
        field: Optional[str] = "font",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, field=field, context=context)


class InvalidTargetFormatError(ValidationError):
    """
    Raised when `targetFormat` is missing or not one of the supported tokens.

    The response body lists the supported tokens so clients can correct the
    request without reading the docs.
    """

    def __init__(
        self,
        target: Optional[str] = None,
        supported_formats: Iterable[str] = (),
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["target"] = target
        super().__init__(message="Invalid target format", field="targetFormat", context=ctx)
        self.target = target
        self.supported_formats: List[str] = list(supported_formats)


class DetectionFailedError(ValidationError):
    """
    Raised when the uploaded bytes do not start with a known font signature.

    HTTP: 400 Bad Request. The file passed the extension check but its
    content is not a WOFF, WOFF2 or SFNT container.
    """

    def __init__(
        self,
        message: str = "Could not detect font format",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, field="font", context=context)


class ConversionFailedError(FontConverterError):
    """
    Raised when the font library fails to transcode the file.

    HTTP: 500 Internal Server Error. The library's own message is surfaced
    to the caller as `message`; the original exception type goes to context.
    """

    def __init__(
        self,
        message: str = "Conversion failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
