"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, application clients, and Playwright mocks.
"""

import os

os.environ.setdefault("PDF_GATEWAY_ENVIRONMENT", "testing")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from pydantic_settings import SettingsConfigDict

from pdf_gateway.api.main import create_app
from pdf_gateway.config.settings import Settings

from tests.utils.mocks import PlaywrightMock


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    render_timeout_ms: int = 30000

    model_config = SettingsConfigDict(env_file=".env.test")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture
def app(test_settings: TestSettings):
    """FastAPI application built with test settings."""
    return create_app(test_settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """FastAPI test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def playwright_mock() -> Generator[PlaywrightMock, None, None]:
    """Patch Playwright so no real browser is launched."""
    mock = PlaywrightMock()
    with mock.patch():
        yield mock


@pytest.fixture
def sample_html() -> str:
    """Small but complete HTML document."""
    return (
        "<!DOCTYPE html><html><head><title>Invoice</title>"
        "<style>@media print { .content { display: none; } }</style></head>"
        "<body><h1>Invoice #42</h1><p class='content'>Total: $10.00</p></body></html>"
    )
