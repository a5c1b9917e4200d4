"""
Font Converter Backend - FastAPI Application Factory
====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn font_converter.main:app`) or by
       `python -m font_converter`.

Application Architecture:
    +-----------------------------------------------------+
    |                   FastAPI App                       |
    |                                                     |
    |  Middleware Chain:                                  |
    |    Request ID  ->  Logging  ->  CORS                |
    |                                                     |
    |  Routes:                                            |
    |    GET /api/health                                  |
    |    POST /api/convert                                |
    |    POST /api/batch-convert                          |
    |                                                     |
    |  Exception Handlers:                                |
    |    ValidationError -> 400   ConversionFailed -> 500 |
    +-----------------------------------------------------+
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from font_converter import __version__
from font_converter.config import settings
from font_converter.exceptions import (
    ConversionFailedError,
    FontConverterError,
    InvalidTargetFormatError,
    ValidationError,
)
from font_converter.middleware.logging import RequestLoggingMiddleware
from font_converter.middleware.request_id import RequestIDMiddleware, request_id_var
from font_converter.models.font import SUPPORTED_FORMATS
from font_converter.routes import convert, health
from font_converter.services.negotiator import format_negotiator

logger = logging.getLogger(__name__)

# Multipart upload field → error text when the field holds no file
UPLOAD_FIELD_MESSAGES = {
    "font": "No font file uploaded",
    "fonts": "No font files uploaded",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before anything else logs.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # fontTools logs table-level detail at INFO while compiling
    logging.getLogger("fontTools").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, log limits, formats and converter backend.
    Shutdown: log only; the service holds no connections or files.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Font Converter API %s starting up...", __version__)
    logger.info("Supported formats: %s", ", ".join(SUPPORTED_FORMATS))
    logger.info("Converter backend: %s", format_negotiator.converter.describe())
    logger.info(
        "Limits: %.0fMB per file, %d files per batch",
        settings.max_file_size_mb,
        settings.max_batch_files,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Font Converter API shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and JSON bodies.

    Handler hierarchy:
        InvalidTargetFormatError → 400 (+ supportedFormats)
        ValidationError          → 400 (upload and detection failures)
        RequestValidationError   → 400 (malformed multipart fields)
        ConversionFailedError    → 500 (library message passed through)
        FontConverterError       → 500 (catch-all for custom)
        Exception                → 500 (unexpected, generic message)
    """

    @app.exception_handler(InvalidTargetFormatError)
    async def handle_invalid_target(request: Request, exc: InvalidTargetFormatError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid target format: %r", rid, exc.target)
        return JSONResponse(
            status_code=400,
            content={
                "error": exc.message,
                "supportedFormats": exc.supported_formats,
                "request_id": rid,
            },
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent something we cannot use; tell them what."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=400,
            content={
                "error": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """A text value sent where an upload field is expected lands here."""
        rid = request_id_var.get("")
        message = "Invalid request"
        for error in exc.errors():
            loc = error.get("loc", ())
            field = loc[1] if len(loc) > 1 else None
            if field in UPLOAD_FIELD_MESSAGES:
                message = UPLOAD_FIELD_MESSAGES[field]
                break
        logger.warning("[%s] Request validation error: %s | Errors: %s", rid, message, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "error": message,
                "request_id": rid,
            },
        )

    @app.exception_handler(ConversionFailedError)
    async def handle_conversion_failed(request: Request, exc: ConversionFailedError):
        rid = request_id_var.get("")
        logger.error("[%s] Conversion error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Conversion failed",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(FontConverterError)
    async def handle_app_error(request: Request, exc: FontConverterError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Conversion failed",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only, never into the response."""
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Font Converter API",
        description=(
            "Convert web and desktop fonts between WOFF, WOFF2, TTF and OTF. "
            "Upload one font or a batch of up to 50 and get them back in the "
            "requested format."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # added CORS → Logging → RequestID, runs RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "Content-Disposition",
            "X-Font-Converted",
            "X-Font-Source-Format",
        ],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(convert.router)

    return app


# uvicorn expects `font_converter.main:app` to be importable
app = create_app()
