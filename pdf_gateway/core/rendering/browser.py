"""
Browser Sessions
================

Launches one isolated headless Chromium per render and guarantees it is
closed again, whatever happens inside the session.
"""

from typing import Any, AsyncGenerator, Dict, Optional
from contextlib import asynccontextmanager

from playwright.async_api import async_playwright, Browser

from pdf_gateway.config.logging import get_logger
from pdf_gateway.config.settings import Settings, get_settings

logger = get_logger(__name__)

# Safe for containers and restricted hosts: no inherited sandbox privileges,
# no /dev/shm dependency, no GPU, deterministic glyph hinting.
CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--font-render-hinting=none",
]


def get_launch_options(settings: Settings) -> Dict[str, Any]:
    """Build keyword arguments for ``chromium.launch``."""
    options: Dict[str, Any] = {
        "headless": settings.playwright_headless,
        "args": list(CHROMIUM_ARGS),
    }
    if settings.chromium_executable:
        options["executable_path"] = settings.chromium_executable
    return options


@asynccontextmanager
async def browser_session(settings: Optional[Settings] = None) -> AsyncGenerator[Browser, None]:
    """
    Launch a Chromium instance scoped to a single request.

    The browser is closed and the Playwright driver stopped on every exit
    path, including when the body of the ``async with`` block raises.
    """
    settings = settings or get_settings()
    log = logger.bind(component="browser_session")

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(**get_launch_options(settings))
        log.debug("Browser launched", version=browser.version)
        try:
            yield browser
        finally:
            await browser.close()
            log.debug("Browser closed")
