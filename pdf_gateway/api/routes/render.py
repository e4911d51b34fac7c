"""
Render Routes
=============

FastAPI routes for HTML rendering endpoints.
Render failures raise RenderError, which the application maps to a
500 JSON error response.
"""

import base64

from fastapi import APIRouter, Response

from pdf_gateway.config.logging import get_logger
from pdf_gateway.config.settings import get_settings
from pdf_gateway.core.rendering.pdf_generator import (
    generate_pdf_from_html,
    generate_screenshot_from_html,
    generate_selftest_pdf,
)
from pdf_gateway.models.schemas import DebugRenderRequest, RenderRequest, ScreenshotResponse

logger = get_logger(__name__)
router = APIRouter(tags=["Rendering"])

SELFTEST_FILENAME = "selftest.pdf"


def build_content_disposition(filename: str) -> str:
    """
    Build an inline Content-Disposition header value.

    Quotes and line breaks are dropped and characters outside latin-1 are
    replaced, since header values must stay a single latin-1 line.
    """
    cleaned = "".join(ch for ch in filename if ch not in '"\r\n\\')
    cleaned = cleaned.encode("latin-1", "replace").decode("latin-1").replace("?", "_")
    return f'inline; filename="{cleaned or get_settings().default_filename}"'


def pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": build_content_disposition(filename)},
    )


@router.post("/pdf", response_class=Response)
async def render_pdf(request: RenderRequest) -> Response:
    """
    Render HTML to PDF.

    Returns the PDF as binary content with inline disposition.
    """
    pdf_bytes = await generate_pdf_from_html(
        request.html,
        base_url=request.base_url,
        page_format=request.page_format,
        margin=request.margin.overrides() if request.margin else None,
        force_system_fonts=request.force_system_fonts,
    )
    return pdf_response(pdf_bytes, request.filename or get_settings().default_filename)


@router.get("/selftest", response_class=Response)
async def selftest() -> Response:
    """Render a built-in HTML document to PDF."""
    pdf_bytes = await generate_selftest_pdf()
    logger.info("Self-test completed", file_size=len(pdf_bytes))
    return pdf_response(pdf_bytes, SELFTEST_FILENAME)


@router.post("/pdf-debug", response_model=ScreenshotResponse)
async def render_pdf_debug(request: DebugRenderRequest) -> ScreenshotResponse:
    """Render HTML to a full-page PNG screenshot, returned base64 encoded."""
    png_bytes = await generate_screenshot_from_html(
        request.html,
        base_url=request.base_url,
        force_system_fonts=request.force_system_fonts,
    )
    return ScreenshotResponse(
        screenshot_base64=base64.b64encode(png_bytes).decode("utf-8"),
        html_len=len(request.html),
    )
