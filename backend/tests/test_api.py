"""
Font Converter Backend - API Endpoint Tests
===========================================

What:  End-to-end tests through the FastAPI app (routes, middleware and
       exception handlers) with real fontTools conversions.
How:   HTTPX AsyncClient over ASGITransport; no server process needed.
"""

import base64
from unittest.mock import patch

import pytest

from font_converter.exceptions import ConversionFailedError
from font_converter.services.negotiator import format_negotiator
from font_converter.services.upload_service import upload_service

SUPPORTED = ["woff", "woff2", "ttf", "otf"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_reports_formats_and_version(self, test_client):
        response = await test_client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["supportedFormats"] == SUPPORTED
        assert body["version"] == "1.0.0"
        assert body["converter"].startswith("fonttools")

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/api/health", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"


class TestConvert:
    """POST /api/convert"""

    @pytest.mark.asyncio
    async def test_woff_to_woff2(self, test_client, woff_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("Demo-Regular.woff", woff_bytes, "font/woff")},
            data={"targetFormat": "woff2"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "font/woff2"
        assert response.headers["x-font-converted"] == "true"
        assert response.headers["x-font-source-format"] == "woff"
        assert response.headers["content-disposition"] == 'attachment; filename="Demo-Regular.woff2"'
        assert response.content[:4] == b"wOF2"

    @pytest.mark.asyncio
    async def test_ttf_to_ttf_is_byte_identical(self, test_client, ttf_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("demo.ttf", ttf_bytes, "font/ttf")},
            data={"targetFormat": "ttf"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "font/ttf"
        assert response.headers["x-font-converted"] == "false"
        assert response.content == ttf_bytes

    @pytest.mark.asyncio
    async def test_otf_with_ttf_target_is_returned_unchanged(self, test_client, otf_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("demo.otf", otf_bytes, "font/otf")},
            data={"targetFormat": "ttf"},
        )

        assert response.status_code == 200
        assert response.content == otf_bytes
        assert response.headers["x-font-source-format"] == "otf"

    @pytest.mark.asyncio
    async def test_target_is_case_insensitive(self, test_client, ttf_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("demo.ttf", ttf_bytes, "font/ttf")},
            data={"targetFormat": "WOFF"},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "font/woff"
        assert response.content[:4] == b"wOFF"

    @pytest.mark.asyncio
    async def test_txt_extension_rejected(self, test_client):
        with patch.object(format_negotiator, "negotiate") as mock_negotiate:
            response = await test_client.post(
                "/api/convert",
                files={"font": ("notes.txt", b"hello", "text/plain")},
                data={"targetFormat": "woff"},
            )

        assert response.status_code == 400
        assert "Only WOFF, WOFF2, TTF, OTF" in response.json()["error"]
        mock_negotiate.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_file_rejected(self, test_client):
        response = await test_client.post("/api/convert", data={"targetFormat": "woff"})

        assert response.status_code == 400
        assert response.json()["error"] == "No font file uploaded"

    @pytest.mark.asyncio
    async def test_text_value_in_file_field_rejected(self, test_client):
        response = await test_client.post(
            "/api/convert",
            data={"font": "not-a-file", "targetFormat": "woff"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "No font file uploaded"
        assert body["request_id"] == response.headers["X-Request-ID"]
        assert "detail" not in body

    @pytest.mark.asyncio
    async def test_invalid_target_lists_supported_formats(self, test_client, ttf_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("demo.ttf", ttf_bytes, "font/ttf")},
            data={"targetFormat": "eot"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid target format"
        assert body["supportedFormats"] == SUPPORTED

    @pytest.mark.asyncio
    async def test_missing_target_rejected(self, test_client, ttf_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("demo.ttf", ttf_bytes, "font/ttf")},
        )

        assert response.status_code == 400
        assert response.json()["supportedFormats"] == SUPPORTED

    @pytest.mark.asyncio
    async def test_undetectable_content_rejected(self, test_client, garbage_bytes):
        response = await test_client.post(
            "/api/convert",
            files={"font": ("fake.ttf", garbage_bytes, "font/ttf")},
            data={"targetFormat": "woff2"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Could not detect font format"

    @pytest.mark.asyncio
    async def test_oversized_file_rejected(self, test_client, ttf_bytes):
        with patch.object(upload_service, "_max_file_size", 64):
            response = await test_client.post(
                "/api/convert",
                files={"font": ("demo.ttf", ttf_bytes, "font/ttf")},
                data={"targetFormat": "woff"},
            )

        assert response.status_code == 400
        assert "too large" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_conversion_failure_returns_500_with_message(self, test_client, ttf_bytes):
        with patch.object(
            format_negotiator.converter,
            "convert",
            side_effect=ConversionFailedError(message="woff2 compression failed"),
        ):
            response = await test_client.post(
                "/api/convert",
                files={"font": ("demo.ttf", ttf_bytes, "font/ttf")},
                data={"targetFormat": "woff2"},
            )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Conversion failed"
        assert body["message"] == "woff2 compression failed"
        assert body["request_id"] == response.headers["X-Request-ID"]


class TestBatchConvert:
    """POST /api/batch-convert"""

    @pytest.mark.asyncio
    async def test_mixed_batch(self, test_client, ttf_bytes, woff_bytes, garbage_bytes):
        response = await test_client.post(
            "/api/batch-convert",
            files=[
                ("fonts", ("a.ttf", ttf_bytes, "font/ttf")),
                ("fonts", ("broken.woff", garbage_bytes, "font/woff")),
                ("fonts", ("c.woff", woff_bytes, "font/woff")),
            ],
            data={"targetFormat": "woff"},
        )

        assert response.status_code == 200
        results = response.json()["results"]
        assert len(results) == 3

        first, broken, last = results
        assert first["filename"] == "a.ttf"
        assert first["status"] == "success"
        assert first["converted"] is True
        assert first["inputFormat"] == "ttf"
        assert first["outputFormat"] == "woff"
        assert base64.b64decode(first["data"])[:4] == b"wOFF"

        assert broken == {"filename": "broken.woff", "status": "error", "error": "Could not detect format"}

        assert last["converted"] is False
        assert base64.b64decode(last["data"]) == woff_bytes

    @pytest.mark.asyncio
    async def test_batch_invalid_target(self, test_client, ttf_bytes):
        response = await test_client.post(
            "/api/batch-convert",
            files=[("fonts", ("a.ttf", ttf_bytes, "font/ttf"))],
            data={"targetFormat": "svg"},
        )

        assert response.status_code == 400
        assert response.json()["supportedFormats"] == SUPPORTED

    @pytest.mark.asyncio
    async def test_batch_without_files(self, test_client):
        response = await test_client.post("/api/batch-convert", data={"targetFormat": "woff"})

        assert response.status_code == 400
        assert response.json()["error"] == "No font files uploaded"

    @pytest.mark.asyncio
    async def test_batch_text_value_in_files_field_rejected(self, test_client):
        response = await test_client.post(
            "/api/batch-convert",
            data={"fonts": "not-a-file", "targetFormat": "woff"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "No font files uploaded"
        assert "detail" not in body

    @pytest.mark.asyncio
    async def test_batch_rejects_disallowed_extension(self, test_client, ttf_bytes):
        response = await test_client.post(
            "/api/batch-convert",
            files=[
                ("fonts", ("a.ttf", ttf_bytes, "font/ttf")),
                ("fonts", ("readme.txt", b"hello", "text/plain")),
            ],
            data={"targetFormat": "woff"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_batch_above_cap_rejected(self, test_client):
        files = [("fonts", (f"f{i}.ttf", b"\x00\x01\x00\x00", "font/ttf")) for i in range(51)]
        response = await test_client.post(
            "/api/batch-convert",
            files=files,
            data={"targetFormat": "ttf"},
        )

        assert response.status_code == 400
        assert "at most 50" in response.json()["error"]
