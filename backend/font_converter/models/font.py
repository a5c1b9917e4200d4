"""
Font Converter Backend - Font Format Domain Models
==================================================

What:  Closed enumerations for every format vocabulary the service deals with,
       plus the result object produced by the negotiator.
Why:   Three vocabularies meet in one request and are easy to mix up:

       FontFormat       what the client asks for:      ttf, otf, woff, woff2
       SourceFormat     what detection reports:        sfnt, woff, woff2
       ConverterFormat  what the converter is told:    sfnt, woff, woff2

       Keeping them as separate enums means a user-facing token can never be
       handed to the converter without going through `converter_format`.

Nothing here is persisted; every object lives for a single request.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

# sfnt version tag of CFF-flavoured OpenType fonts
OPENTYPE_CFF_TAG = b"OTTO"


class ConverterFormat(str, Enum):
    """Container formats the font library can write."""

    SFNT = "sfnt"
    WOFF = "woff"
    WOFF2 = "woff2"


class SourceFormat(str, Enum):
    """Container formats detection can report. TTF and OTF are both `sfnt`."""

    SFNT = "sfnt"
    WOFF = "woff"
    WOFF2 = "woff2"


class FontFormat(str, Enum):
    """User-facing target tokens accepted by the API."""

    WOFF = "woff"
    WOFF2 = "woff2"
    TTF = "ttf"
    OTF = "otf"

    @property
    def media_type(self) -> str:
        return f"font/{self.value}"

    @property
    def converter_format(self) -> ConverterFormat:
        """Map the user token to the converter vocabulary (ttf/otf → sfnt)."""
        if self in (FontFormat.TTF, FontFormat.OTF):
            return ConverterFormat.SFNT
        return ConverterFormat(self.value)

    @property
    def is_sfnt(self) -> bool:
        return self in (FontFormat.TTF, FontFormat.OTF)

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["FontFormat"]:
        """Case-insensitive lookup; returns None for missing or unknown tokens."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @classmethod
    def tokens(cls) -> List[str]:
        return [member.value for member in cls]


# Order matches the public API listing: woff, woff2, ttf, otf
SUPPORTED_FORMATS: List[str] = FontFormat.tokens()


def source_label(source_format: SourceFormat, data: bytes) -> str:
    """
    User-facing name of a detected input.

    SFNT input is reported as `otf` when its version tag is `OTTO` (CFF
    outlines) and as `ttf` otherwise; WOFF/WOFF2 report themselves.
    """
    if source_format is SourceFormat.SFNT:
        return FontFormat.OTF.value if data[:4] == OPENTYPE_CFF_TAG else FontFormat.TTF.value
    return source_format.value


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of negotiating one file.

    Attributes:
        output:        Bytes to send back (the input itself when not converted)
        converted:     False when the input was returned unchanged
        source_format: Container detected for the input
        target_format: Format the client asked for
        input_label:   User-facing name of the input (ttf/otf/woff/woff2)
    """

    output: bytes
    converted: bool
    source_format: SourceFormat
    target_format: FontFormat
    input_label: str
