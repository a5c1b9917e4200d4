"""
Font Converter Backend - Application Package Initializer
========================================================

What: Marks the `font_converter` directory as a Python package.
Who:  Imported by uvicorn (`font_converter.main:app`), pytest and the
      `python -m font_converter` entry point.

Architecture Note:
    The backend follows the same layered shape as any of our FastAPI services:

    +-------------------------------------+
    |           Routes (API Layer)        |  <- HTTP concerns only
    +-------------------------------------+
    |         Services (Negotiation)      |  <- upload checks, format decisions
    +-------------------------------------+
    |     Models & Schemas (Data)         |  <- format enums + pydantic contracts
    +-------------------------------------+
    |     Converter (fontTools adapter)   |  <- byte-level transcoding
    +-------------------------------------+

    Routes never touch fontTools directly; they call the negotiator, which
    decides whether the converter needs to run at all.
"""

__version__ = "1.0.0"
