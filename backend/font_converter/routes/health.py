"""
Font Converter Backend - Health Check Route
===========================================

What:  GET /api/health for monitoring, load balancers and the browser
       extension (which reads `supportedFormats` to build its menu).
"""

import logging
import time

from fastapi import APIRouter

from font_converter import __version__
from font_converter.models.font import SUPPORTED_FORMATS
from font_converter.schemas.conversion import HealthResponse
from font_converter.services.negotiator import format_negotiator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns service status, supported target formats and version.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        supported_formats=SUPPORTED_FORMATS,
        version=__version__,
        converter=format_negotiator.converter.describe(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
