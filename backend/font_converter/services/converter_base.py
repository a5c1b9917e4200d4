"""
Font Converter Backend - Abstract Font Converter Interface
==========================================================

What:  Abstract base class defining the contract for font transcoding backends.
How:   Concrete implementations inherit from FontConverter and implement
       detect_format() and convert().
Who:   Called by FormatNegotiator; never by route handlers directly.

The negotiator only needs two things from a backend: "what container is this?"
and "rewrite it as that container". Anything else (table parsing, WOFF2
transforms, brotli/zlib compression) stays inside the implementation.
"""

from abc import ABC, abstractmethod

from font_converter.models.font import ConverterFormat, SourceFormat


class FontConverter(ABC):
    """
    Abstract interface for font container detection and conversion.

    Contract:
        - detect_format() inspects the header only and raises
          DetectionFailedError for unknown content
        - convert() raises ConversionFailedError for any library failure,
          carrying the library's message
        - Both are synchronous and CPU-bound; callers run them in a threadpool

    Implementations:
        - FontToolsConverter: fontTools TTFont (brotli for WOFF2)
    """

    @abstractmethod
    def detect_format(self, data: bytes) -> SourceFormat:
        """
        Classify a byte sequence by its container signature.

        Returns:
            SourceFormat.SFNT for TrueType/OpenType, WOFF or WOFF2 otherwise.

        Raises:
            DetectionFailedError: The header matches no known signature.
        """
        ...

    @abstractmethod
    def convert(self, data: bytes, target: ConverterFormat) -> bytes:
        """
        Rewrite a font into the requested container.

        Args:
            data:   Raw font bytes in any detectable container.
            target: Container to write.

        Raises:
            ConversionFailedError: The library could not read or write the font.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable backend name and version (health check, startup log)."""
        ...
