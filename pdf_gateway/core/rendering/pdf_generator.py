"""
PDF Generator
=============

Playwright-based PDF and screenshot rendering from HTML content.
Every render runs the same recipe in a freshly launched browser:
screen media, content load with network-idle wait, style overrides,
best-effort font readiness, then the print or capture step.
"""

from html import escape
import re
from typing import Any, Dict, Mapping, Optional, Union

from playwright.async_api import Browser, Page

from pdf_gateway.config.logging import get_logger
from pdf_gateway.config.settings import Settings, get_settings
from pdf_gateway.core.rendering.browser import browser_session
from pdf_gateway.core.rendering.styles import get_style_fragments

logger = get_logger(__name__)

DEFAULT_MARGIN: Dict[str, Union[str, float]] = {
    "top": "12mm",
    "right": "12mm",
    "bottom": "16mm",
    "left": "12mm",
}

FONTS_READY_SCRIPT = "() => document.fonts ? document.fonts.ready.then(() => true) : true"

_BASE_TAG = re.compile(r"<base[\s>/]", re.IGNORECASE)
_HEAD_OPEN = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
_DOCTYPE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)

SELFTEST_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Render Gateway Self-Test</title>
  <style>
    body { font-family: sans-serif; margin: 0; }
    h1 { font-size: 24px; margin-bottom: 4px; }
    table { border-collapse: collapse; margin-top: 16px; }
    th, td { border: 1px solid #999; padding: 4px 10px; text-align: left; }
    .swatch { width: 120px; height: 40px; background: #2b6cb0; margin-top: 16px; }
    @media print { body { display: none; } }
  </style>
</head>
<body>
  <h1>Render Gateway Self-Test</h1>
  <p>If you can read this sentence, text rendering works.</p>
  <table>
    <tr><th>Check</th><th>Expected</th></tr>
    <tr><td>Screen media</td><td>Visible despite the print rule hiding the body</td></tr>
    <tr><td>Backgrounds</td><td>Blue swatch below</td></tr>
    <tr><td>Fonts</td><td>Readable glyphs, no empty boxes</td></tr>
  </table>
  <div class="swatch"></div>
</body>
</html>
"""


class RenderError(Exception):
    """Exception raised when a render fails at any step."""

    def __init__(self, operation: str, details: str):
        super().__init__(f"{operation}: {details}")
        self.operation = operation
        self.details = details


def resolve_margin(
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Union[str, float]]:
    """
    Merge margin overrides onto the default edges.

    Unknown keys and ``None`` values are ignored, so every edge the caller
    did not name keeps its default.
    """
    margin = dict(DEFAULT_MARGIN)
    if overrides:
        margin.update(
            {edge: value for edge, value in overrides.items() if edge in margin and value is not None}
        )
    return margin


def with_base_href(html: str, base_url: Optional[str]) -> str:
    """
    Insert a ``<base href>`` so relative references resolve against ``base_url``.

    ``set_content`` loads the document as ``about:blank``, where the page's
    own base URL has no effect on ``<img src>`` or ``<link href>``. A document
    that already declares a ``<base>`` element is returned unchanged.
    """
    if not base_url or _BASE_TAG.search(html):
        return html

    tag = f'<base href="{escape(base_url, quote=True)}">'
    for pattern in (_HEAD_OPEN, _DOCTYPE):
        match = pattern.search(html)
        if match:
            return html[: match.end()] + tag + html[match.end() :]
    return tag + html


class RenderGateway:
    """Drives one browser per call through the render recipe."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = logger.bind(component="render_gateway")

    async def render_pdf(
        self,
        html: str,
        base_url: Optional[str] = None,
        page_format: Optional[str] = None,
        margin: Optional[Mapping[str, Any]] = None,
        force_system_fonts: bool = False,
        operation: str = "PDF rendering failed",
    ) -> bytes:
        """
        Render HTML content to PDF bytes.

        Args:
            html: HTML document to render
            base_url: Base URL for relative references inside the document
            page_format: Page size keyword, defaults to the configured format
            margin: Per-edge margin overrides
            force_system_fonts: Force a system font family on text elements
            operation: Message reported if the render fails

        Returns:
            PDF bytes

        Raises:
            RenderError: If any step of the render fails
        """
        page_format = page_format or self.settings.default_format
        pdf_margin = resolve_margin(margin)

        self.logger.info(
            "Rendering PDF",
            html_length=len(html),
            format=page_format,
            margin=pdf_margin,
            base_url=base_url,
            force_system_fonts=force_system_fonts,
        )

        try:
            async with browser_session(self.settings) as browser:
                page = await self._prepare_page(browser, html, base_url, force_system_fonts)
                pdf_bytes = await page.pdf(
                    format=page_format,
                    print_background=True,
                    prefer_css_page_size=True,
                    display_header_footer=False,
                    margin=pdf_margin,
                )
        except Exception as e:
            self.logger.error(operation, error=str(e))
            raise RenderError(operation, str(e)) from e

        self.logger.info("PDF rendered", file_size=len(pdf_bytes))
        return pdf_bytes

    async def render_screenshot(
        self,
        html: str,
        base_url: Optional[str] = None,
        force_system_fonts: bool = False,
        operation: str = "Screenshot rendering failed",
    ) -> bytes:
        """
        Render HTML content to full-page PNG bytes.

        Runs the same recipe as :meth:`render_pdf` and captures a screenshot
        instead of printing.
        """
        self.logger.info(
            "Rendering screenshot",
            html_length=len(html),
            base_url=base_url,
            force_system_fonts=force_system_fonts,
        )

        try:
            async with browser_session(self.settings) as browser:
                page = await self._prepare_page(browser, html, base_url, force_system_fonts)
                png_bytes = await page.screenshot(type="png", full_page=True)
        except Exception as e:
            self.logger.error(operation, error=str(e))
            raise RenderError(operation, str(e)) from e

        self.logger.info("Screenshot rendered", file_size=len(png_bytes))
        return png_bytes

    async def render_selftest(self) -> bytes:
        """Render the built-in self-test document with default options."""
        return await self.render_pdf(SELFTEST_HTML, operation="Self-test rendering failed")

    async def _prepare_page(
        self, browser: Browser, html: str, base_url: Optional[str], force_system_fonts: bool
    ) -> Page:
        """Open a page and run every recipe step that precedes capture."""
        page = await browser.new_page(base_url=base_url)

        # Print stylesheets in the source may hide content
        await page.emulate_media(media="screen")

        await page.set_content(
            with_base_href(html, base_url),
            wait_until="networkidle",
            timeout=self.settings.render_timeout_ms,
        )

        # set_content replaces the document, so overrides go in afterwards
        for css in get_style_fragments(force_system_fonts):
            await page.add_style_tag(content=css)

        await self._wait_for_fonts(page)
        return page

    async def _wait_for_fonts(self, page: Page) -> None:
        """Wait for ``document.fonts.ready``; failures are not fatal."""
        try:
            await page.evaluate(FONTS_READY_SCRIPT)
        except Exception as e:
            self.logger.debug("Font readiness wait failed, continuing", error=str(e))


async def generate_pdf_from_html(
    html: str,
    base_url: Optional[str] = None,
    page_format: Optional[str] = None,
    margin: Optional[Mapping[str, Any]] = None,
    force_system_fonts: bool = False,
) -> bytes:
    """Render HTML to PDF with a gateway built from the current settings."""
    gateway = RenderGateway()
    return await gateway.render_pdf(
        html,
        base_url=base_url,
        page_format=page_format,
        margin=margin,
        force_system_fonts=force_system_fonts,
    )


async def generate_screenshot_from_html(
    html: str, base_url: Optional[str] = None, force_system_fonts: bool = False
) -> bytes:
    """Render HTML to a full-page PNG with a gateway built from the current settings."""
    gateway = RenderGateway()
    return await gateway.render_screenshot(
        html, base_url=base_url, force_system_fonts=force_system_fonts
    )


async def generate_selftest_pdf() -> bytes:
    """Render the built-in self-test document."""
    return await RenderGateway().render_selftest()
