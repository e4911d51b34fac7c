"""
Pydantic Models and Schemas
===========================

API request and response models for the render gateway. Request models
accept the camelCase keys clients send (``baseURL``, ``forceSystemFonts``)
and are frozen once validated.
"""

from typing import Optional, Dict, Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.types import StrictStr

# A CSS length ("12mm", "0.5in") or a number of pixels
MarginValue = Union[StrictStr, float]


class MarginOptions(BaseModel):
    """Per-edge page margins. Edges left unset keep their defaults."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    top: Optional[MarginValue] = None
    right: Optional[MarginValue] = None
    bottom: Optional[MarginValue] = None
    left: Optional[MarginValue] = None

    @field_validator("top", "right", "bottom", "left", mode="before")
    @classmethod
    def drop_unusable_edge(cls, v: Any) -> Any:
        """Edges that are neither text nor a number are treated as unset."""
        if isinstance(v, bool) or not isinstance(v, (str, int, float)):
            return None
        return v

    def overrides(self) -> Dict[str, MarginValue]:
        """Return only the edges the caller actually set."""
        return self.model_dump(exclude_none=True)


class DebugRenderRequest(BaseModel):
    """Request model for screenshot (debug) rendering."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    html: StrictStr = Field(..., min_length=1, description="HTML document to render")
    base_url: Optional[str] = Field(
        None, alias="baseURL", description="Base URL for resolving relative references"
    )
    force_system_fonts: bool = Field(
        False, alias="forceSystemFonts", description="Force a system font family on text"
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def drop_non_text_base_url(cls, v: Any) -> Optional[str]:
        """A base URL that is not text is ignored rather than rejected."""
        return v if isinstance(v, str) else None

    @field_validator("force_system_fonts", mode="before")
    @classmethod
    def only_true_enables_system_fonts(cls, v: Any) -> bool:
        return v is True


class RenderRequest(DebugRenderRequest):
    """Request model for HTML to PDF rendering."""

    page_format: Optional[str] = Field(
        None, alias="format", description="Page size keyword (Letter, A4, Legal, ...)"
    )
    margin: Optional[MarginOptions] = Field(None, description="Page margin overrides")
    filename: Optional[str] = Field(None, description="Filename advertised in the response")

    @field_validator("page_format", "filename", mode="before")
    @classmethod
    def coerce_to_text(cls, v: Any) -> Optional[str]:
        """Optional text fields take the string form of whatever was sent."""
        return None if v is None else str(v)

    @field_validator("margin", mode="before")
    @classmethod
    def drop_non_object_margin(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, MarginOptions)) else None


class ScreenshotResponse(BaseModel):
    """Response model for debug screenshot rendering."""

    screenshot_base64: str = Field(..., description="Base64 encoded full-page PNG")
    html_len: int = Field(..., ge=0, description="Length of the submitted HTML")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Underlying diagnostic")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
