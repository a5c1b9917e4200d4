"""
Font Converter Backend - Pydantic Response Schemas
==================================================

What:  Pydantic models defining the JSON contract of the API.
How:   FastAPI serializes route return values through these models (by alias,
       so the wire names stay camelCase) and builds the OpenAPI docs from them.

The binary endpoint (POST /api/convert) has no response model for success;
it streams the font bytes. Its error bodies use ErrorResponse.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Returned by GET /api/health."""

    status: str = Field(description="Always 'ok' while the process is serving")
    supported_formats: List[str] = Field(
        alias="supportedFormats",
        description="Target tokens accepted by the convert endpoints",
    )
    version: str = Field(description="Application version")
    converter: str = Field(description="Font library backing the conversions")
    uptime_seconds: float = Field(description="Seconds since service started")

    model_config = {"populate_by_name": True}


class BatchSuccessItem(BaseModel):
    """One converted (or passed-through) file of a batch."""

    filename: str
    status: Literal["success"] = "success"
    converted: bool = Field(description="False when the file was returned unchanged")
    input_format: str = Field(alias="inputFormat", description="Detected input: ttf, otf, woff, woff2")
    output_format: str = Field(alias="outputFormat", description="Requested target token")
    data: str = Field(description="Output font, base64 encoded")

    model_config = {"populate_by_name": True}


class BatchErrorItem(BaseModel):
    """One file of a batch that could not be processed."""

    filename: str
    status: Literal["error"] = "error"
    error: str = Field(description="Why this file failed")


BatchItem = Union[BatchSuccessItem, BatchErrorItem]


class BatchConvertResponse(BaseModel):
    """
    Returned by POST /api/batch-convert.

    `results` has one entry per uploaded file, in upload order.
    """

    results: List[BatchItem]


class ErrorResponse(BaseModel):
    """
    Error body shared by every endpoint.

    Example (400):
        {"error": "Invalid target format",
         "supportedFormats": ["woff", "woff2", "ttf", "otf"],
         "request_id": "a1b2c3d4"}

    Example (500):
        {"error": "Conversion failed",
         "message": "Not a TrueType or OpenType font (bad sfntVersion)",
         "request_id": "a1b2c3d4"}
    """

    error: str = Field(description="Human-readable error summary")
    message: Optional[str] = Field(default=None, description="Underlying failure detail")
    supported_formats: Optional[List[str]] = Field(default=None, alias="supportedFormats")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")

    model_config = {"populate_by_name": True}
