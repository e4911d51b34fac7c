"""
Browser Rendering Tests
=======================

End-to-end tests against a real headless Chromium. Skipped when Playwright
cannot launch a browser on this host.
"""

import base64
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import re
import threading
import time
from typing import Generator, List, Tuple

import psutil
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from pdf_gateway.api.main import create_app
from pdf_gateway.core.rendering.browser import get_launch_options

from tests.utils.assertions import assert_error_response, assert_pdf_bytes, assert_png_bytes
from tests.utils.mocks import SAMPLE_PNG_BYTES

pytestmark = pytest.mark.browser

PAGE_OBJECT = re.compile(rb"/Type\s*/Page\b")


@pytest.fixture(scope="module")
def chromium_available(test_settings) -> None:
    """Skip the module unless Chromium can actually be launched."""
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(**get_launch_options(test_settings))
            browser.close()
    except Exception as e:
        pytest.skip(f"Chromium is not available: {e}")


@pytest.fixture
def browser_client(chromium_available, test_settings) -> Generator[TestClient, None, None]:
    with TestClient(create_app(test_settings)) as client:
        yield client


@pytest.fixture
def asset_server() -> Generator[Tuple[str, List[str]], None, None]:
    """Local HTTP server that answers every GET with a PNG and records the paths."""
    requested: List[str] = []

    class AssetHandler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:
            requested.append(self.path)
            self.send_response(200)
            self.send_header("Content-Type", "image/png")
            self.send_header("Content-Length", str(len(SAMPLE_PNG_BYTES)))
            self.end_headers()
            self.wfile.write(SAMPLE_PNG_BYTES)

        def log_message(self, format: str, *args) -> None:
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), AssetHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}", requested
    finally:
        server.shutdown()
        server.server_close()


def live_children() -> List[psutil.Process]:
    """Child processes of the test process that have not exited."""
    alive = []
    for child in psutil.Process().children(recursive=True):
        try:
            if child.status() != psutil.STATUS_ZOMBIE:
                alive.append(child)
        except psutil.NoSuchProcess:
            continue
    return alive


def wait_for_children(limit: int, timeout: float = 10.0) -> int:
    """Poll until at most ``limit`` live children remain; return the final count."""
    deadline = time.monotonic() + timeout
    count = len(live_children())
    while count > limit and time.monotonic() < deadline:
        time.sleep(0.1)
        count = len(live_children())
    return count


def test_pdf_has_pdf_signature(browser_client, sample_html):
    response = browser_client.post("/pdf", json={"html": sample_html, "filename": "invoice.pdf"})

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["content-disposition"] == 'inline; filename="invoice.pdf"'
    assert_pdf_bytes(response.content)


def test_identical_requests_produce_same_layout(browser_client, sample_html):
    payload = {"html": sample_html, "format": "A4", "margin": {"top": "5mm"}}

    first = browser_client.post("/pdf", json=payload)
    second = browser_client.post("/pdf", json=payload)

    assert first.status_code == second.status_code == status.HTTP_200_OK
    assert len(PAGE_OBJECT.findall(first.content)) == len(PAGE_OBJECT.findall(second.content))


def test_selftest_returns_pdf(browser_client):
    response = browser_client.get("/selftest")

    assert response.status_code == status.HTTP_200_OK
    assert len(response.content) > 0
    assert_pdf_bytes(response.content)


def test_pdf_debug_returns_png(browser_client, sample_html):
    response = browser_client.post("/pdf-debug", json={"html": sample_html, "forceSystemFonts": True})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["html_len"] == len(sample_html)
    assert_png_bytes(base64.b64decode(data["screenshot_base64"]))


def test_failed_render_leaves_no_browser_running(browser_client, sample_html):
    baseline = wait_for_children(limit=len(live_children()))

    response = browser_client.post("/pdf", json={"html": sample_html, "format": "NotAPaperSize"})

    body = assert_error_response(
        response, status.HTTP_500_INTERNAL_SERVER_ERROR, "PDF rendering failed"
    )
    assert body["details"]
    assert wait_for_children(limit=baseline) <= baseline


@pytest.mark.parametrize("route", ["/pdf", "/pdf-debug"])
def test_relative_references_resolve_against_base_url(browser_client, asset_server, route):
    origin, requested = asset_server
    html = '<!DOCTYPE html><html><head></head><body><img src="logo.png"></body></html>'

    response = browser_client.post(route, json={"html": html, "baseURL": f"{origin}/assets/"})

    assert response.status_code == status.HTTP_200_OK
    assert "/assets/logo.png" in requested
