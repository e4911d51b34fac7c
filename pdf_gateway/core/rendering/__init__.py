"""
Rendering Module
===============

HTML to PDF and screenshot rendering with browser automation.

Components:
- browser: Chromium launch flags and per-request browser sessions
- styles: Style overrides injected before capture
- pdf_generator: The render gateway and its PDF/screenshot operations
"""
