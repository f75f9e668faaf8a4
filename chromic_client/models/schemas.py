"""
Pydantic Models and Schemas
===========================

Core data models for rendering requests and results: content sources, the
option set attached to a request, the operation table for the remote service
and the result handed back to callers.
"""

from typing import Optional, Dict, Any, TypedDict, Union
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# Enums
class Mode(str, Enum):
    """Rendering backend selection."""
    LOCAL_ENGINE = "local_engine"
    REMOTE_SERVICE = "remote_service"


class SourceType(str, Enum):
    """Kinds of renderable content."""
    HTML = "html"
    URL = "url"


class Operation(str, Enum):
    """Rendering operations, valued by their remote endpoint name."""
    PRINT_TO_PDF = "print"
    PRINT_TO_PDFA = "print_pdfa"
    CONVERT_TO_PDFA = "convert_pdfa"
    CAPTURE_SCREENSHOT = "screenshot"

    @property
    def path(self) -> str:
        """Remote service path for this operation."""
        return f"/v1/{self.value}"

    @property
    def body_field(self) -> str:
        """JSON field carrying the content in the request body."""
        return "pdf" if self is Operation.CONVERT_TO_PDFA else "html"

    @property
    def method_name(self) -> str:
        """Name of the matching engine and dispatcher method."""
        return _METHOD_NAMES[self]


_METHOD_NAMES = {
    Operation.PRINT_TO_PDF: "print_to_pdf",
    Operation.PRINT_TO_PDFA: "print_to_pdfa",
    Operation.CONVERT_TO_PDFA: "convert_to_pdfa",
    Operation.CAPTURE_SCREENSHOT: "capture_screenshot",
}


# Source Models
class Source(BaseModel):
    """Content to render: inline markup or a remote address."""
    model_config = ConfigDict(frozen=True)

    type: SourceType = Field(..., description="Source kind")
    content: str = Field(..., description="HTML markup or URL")

    @classmethod
    def html(cls, content: str) -> "Source":
        return cls(type=SourceType.HTML, content=content)

    @classmethod
    def url(cls, address: str) -> "Source":
        return cls(type=SourceType.URL, content=address)


class OptionSet(TypedDict, total=False):
    """
    Rendering parameters attached to a request.

    Every key is optional; absent keys fall back to the backend's defaults.
    Values are forwarded without validation.
    """
    # Local only, never sent to the remote service
    output: Union[str, Path]

    # PDF layout, paper and margins in inches
    print_to_pdf_options: Dict[str, Any]
    landscape: bool
    print_background: bool
    scale: float
    paper_width: float
    paper_height: float
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float

    # Screenshot viewport in pixels
    width: int
    height: int
    full_page: bool

    # PDF/A
    pdfa_version: str


# Result Models
class RenderResult(BaseModel):
    """Result of a rendering call."""
    content: Optional[bytes] = Field(None, description="Rendered bytes", exclude=True)
    output_path: Optional[Path] = Field(None, description="Path the bytes were written to")
    file_size: int = Field(..., ge=0, description="Size of the rendered content in bytes")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Dispatch metadata")

    @property
    def written(self) -> bool:
        """Whether the content was written to ``output_path``."""
        return self.output_path is not None
