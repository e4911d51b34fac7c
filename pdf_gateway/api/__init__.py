"""
FastAPI REST Endpoints
======================

REST API endpoints for HTTP access to the render gateway.

Endpoints:
- GET /healthz: Liveness check
- POST /pdf: Render HTML to PDF
- GET /selftest: Render a built-in document to PDF
- POST /pdf-debug: Render HTML to a base64 PNG screenshot
"""
