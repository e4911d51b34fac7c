"""
HTML to PDF Render Gateway
==========================

An HTTP service that renders HTML documents to PDF (or PNG screenshots for
debugging) by driving headless Chromium through Playwright.

This package provides:
- FastAPI REST endpoints for HTTP access
- A per-request browser session with guaranteed teardown
- A fixed pre-render recipe against blank or invisible output
"""

__version__ = "1.0.0"
__author__ = "PDF Gateway Team"
