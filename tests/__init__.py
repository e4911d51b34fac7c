"""
Test Suite
==========

Test suite matching the pdf_gateway/ package structure.

Test Categories:
- unit: Unit tests for individual components, with Playwright mocked
- integration: HTTP contract tests, plus real-browser tests marked ``browser``
"""
