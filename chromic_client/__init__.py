"""
Chromic Client
==============

Rendering client exposing ``print_to_pdf``, ``print_to_pdfa``,
``convert_to_pdfa`` and ``capture_screenshot``. Calls run either on a local
Playwright engine or on a remote rendering service over HTTP, selected by
the ``mode`` setting.

Example::

    result = await print_to_pdf(Source.html("<h1>Hello</h1>"))
    pdf_bytes = result.content

    await print_to_pdf(("html", "<h1>Hello</h1>"), output="hello.pdf")

Importing the package leaves logging untouched. Applications that want the
client's structlog and stdlib handlers call ``setup_logging()`` once at
startup.
"""

from chromic_client.config.logging import setup_logging
from chromic_client.config.settings import Settings, get_settings, reload_settings
from chromic_client.core.dispatcher import (
    Dispatcher,
    capture_screenshot,
    convert_to_pdfa,
    print_to_pdf,
    print_to_pdfa,
)
from chromic_client.core.errors import (
    ChromicClientError,
    EmptyInputError,
    EngineUnavailableError,
    FileWriteError,
    InvalidSourceError,
    LocalEngineError,
    RemoteStatusError,
    TransportError,
)
from chromic_client.models.schemas import Mode, OptionSet, RenderResult, Source, SourceType

__version__ = "0.1.0"

__all__ = [
    "ChromicClientError",
    "Dispatcher",
    "EmptyInputError",
    "EngineUnavailableError",
    "FileWriteError",
    "InvalidSourceError",
    "LocalEngineError",
    "Mode",
    "OptionSet",
    "RemoteStatusError",
    "RenderResult",
    "Settings",
    "Source",
    "SourceType",
    "TransportError",
    "capture_screenshot",
    "convert_to_pdfa",
    "get_settings",
    "print_to_pdf",
    "print_to_pdfa",
    "reload_settings",
    "setup_logging",
]
