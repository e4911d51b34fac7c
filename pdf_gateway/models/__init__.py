"""
Data Models
===========

Pydantic data models for request/response validation.

Models:
- schemas: API request and response schemas
"""
