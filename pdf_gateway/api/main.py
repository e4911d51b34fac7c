"""
FastAPI Application
==================

Main FastAPI application exposing the render gateway over HTTP.
Every rendering request launches its own browser; nothing is pooled or
shared between requests.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Any, Dict, List, Optional

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog
import uvicorn

from pdf_gateway import __version__
from pdf_gateway.config.settings import get_settings, Settings
from pdf_gateway.config.logging import get_logger
from pdf_gateway.core.rendering.pdf_generator import RenderError
from pdf_gateway.api.routes.health import router as health_router
from pdf_gateway.api.routes.render import router as render_router
from pdf_gateway.models.schemas import ErrorResponse

logger = get_logger(__name__)

HTML_FIELD_ERROR = "Missing or invalid 'html' field"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info("PDF server listening", host=settings.host, port=settings.port)
    try:
        yield
    finally:
        logger.info("Shutting down PDF server")


def error_response(
    request: Request, status_code: int, error: str, details: Optional[Any] = None
) -> JSONResponse:
    """Build a JSON error response in the standard shape."""
    body = ErrorResponse(
        error=error,
        details=details,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
    )


def is_html_field_error(errors: List[Dict[str, Any]]) -> bool:
    """Whether validation failed because the ``html`` field is absent or not text."""
    for err in errors:
        loc = tuple(err.get("loc", ()))
        if loc[:2] == ("body", "html"):
            return True
        # Missing body, or a body that is not a JSON object
        if loc == ("body",) and err.get("type") != "json_invalid":
            return True
    return False


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function for creating a FastAPI app instance.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Render HTML documents to PDF with headless Chromium",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    # Body size limit middleware
    @app.middleware("http")
    async def limit_body_size(request: Request, call_next: Any) -> Response:
        """Reject request bodies larger than the configured limit."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > settings.max_body_bytes:
                logger.warning(
                    "Request body too large",
                    content_length=int(content_length),
                    limit=settings.max_body_bytes,
                )
                return error_response(
                    request,
                    413,
                    "Request body too large",
                    f"Limit is {settings.max_body_bytes} bytes",
                )
        return await call_next(request)

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Response:
        """Add request ID to all requests."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report invalid request bodies as 400 without touching the browser."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        error = HTML_FIELD_ERROR if is_html_field_error(errors) else "Invalid request body"

        logger.warning("Request validation failed", path=request.url.path, errors=errors)
        return error_response(request, 400, error, errors)

    @app.exception_handler(RenderError)
    async def render_exception_handler(request: Request, exc: RenderError) -> JSONResponse:
        """Report render failures with the underlying diagnostic."""
        logger.debug(
            "Render failed",
            path=request.url.path,
            error=exc.operation,
            details=exc.details,
        )
        return error_response(request, 500, exc.operation, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def custom_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Custom HTTP exception handler with structured error response."""
        logger.error("HTTP exception", status_code=exc.status_code, detail=exc.detail)
        return error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """General exception handler for unexpected errors."""
        logger.error("Unhandled exception", exception=str(exc), exc_info=True)
        return error_response(
            request, 500, "Internal server error", str(exc) if settings.debug else None
        )

    app.include_router(health_router)
    app.include_router(render_router)

    @app.get("/", tags=["General"])
    async def root() -> Dict[str, Any]:
        """Root endpoint with basic API information."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "health_check": "/healthz",
            "endpoints": {
                "render_pdf": "POST /pdf",
                "selftest": "GET /selftest",
                "render_debug": "POST /pdf-debug",
            },
        }

    return app


app = create_app()


def run_server() -> None:
    """Run the gateway with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(
        "pdf_gateway.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_server()
