"""
API Routes
==========

Routers for the gateway's HTTP surface.

Routers:
- health: Liveness check
- render: PDF, self-test, and debug screenshot rendering
"""
