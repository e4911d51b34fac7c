"""
Core Business Logic
==================

Core business logic for turning HTML into PDF and PNG bytes.

Modules:
- rendering: Browser session management and the render recipe
"""
