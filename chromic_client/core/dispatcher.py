"""
Request Dispatcher
==================

Routes each rendering call to the local engine or the remote rendering
service, depending on the configured mode.

Each call normalizes its input, reads the mode, runs the operation on the
selected backend once and either returns the rendered bytes or writes them
to the ``output`` path.
"""

import importlib.util
from pathlib import Path
from typing import Any, Optional, Union, TYPE_CHECKING

from chromic_client.config.logging import get_logger
from chromic_client.config.settings import Settings, get_settings
from chromic_client.core.errors import EngineUnavailableError, FileWriteError
from chromic_client.core.normalizer import PdfInput, normalize_input, resolve_pdf_input
from chromic_client.core.remote_client import RenderServiceClient
from chromic_client.models.schemas import Mode, Operation, OptionSet, RenderResult, Source

if TYPE_CHECKING:
    from chromic_client.core.local_engine import RenderEngine

logger = get_logger(__name__)

# Marks "detect the local engine" as opposed to an explicit ``None``
_DETECT = object()


def local_engine_available() -> bool:
    """Check whether the Playwright local engine can be loaded."""
    return importlib.util.find_spec("playwright") is not None


def create_local_engine(settings: Optional[Settings] = None) -> Optional["RenderEngine"]:
    """Create the Playwright local engine, or return None if it is not installed."""
    if not local_engine_available():
        logger.info("Local rendering engine not installed")
        return None

    from chromic_client.core.local_engine import PlaywrightEngine

    return PlaywrightEngine(settings)


def write_output(content: bytes, path: Union[str, Path]) -> Path:
    """
    Write rendered content to ``path``.

    Raises:
        FileWriteError: If the file cannot be written; a partial file may remain
    """
    output_path = Path(path)
    try:
        output_path.write_bytes(content)
    except OSError as e:
        logger.error("Failed to write output", path=str(output_path), error=str(e))
        raise FileWriteError(output_path, e) from e
    return output_path


class Dispatcher:
    """Dispatches rendering operations to the configured backend."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        engine: Any = _DETECT,
        client: Optional[RenderServiceClient] = None,
    ):
        self.settings = settings or get_settings()
        self.engine: Optional["RenderEngine"] = (
            create_local_engine(self.settings) if engine is _DETECT else engine
        )
        self.client = client or RenderServiceClient(
            self.settings.api_url,
            receive_timeout=self.settings.receive_timeout,
            connect_timeout=self.settings.connect_timeout,
        )
        self.logger: Any = logger.bind(component="dispatcher")  # structlog.BoundLoggerBase

    async def print_to_pdf(self, input: Any, **options: Any) -> RenderResult:
        """
        Print HTML or a URL to PDF.

        Args:
            input: Source, ``(source, options)`` pair, or list of pairs
            **options: Print options, see ``OptionSet``

        Returns:
            RenderResult with the PDF bytes, or the path they were written to
        """
        source, merged = normalize_input(input, options)
        return await self._dispatch(Operation.PRINT_TO_PDF, source, merged)

    async def print_to_pdfa(self, input: Any, **options: Any) -> RenderResult:
        """Print HTML or a URL to PDF/A. Accepts the same options as ``print_to_pdf``."""
        source, merged = normalize_input(input, options)
        return await self._dispatch(Operation.PRINT_TO_PDFA, source, merged)

    async def convert_to_pdfa(self, pdf_input: PdfInput, **options: Any) -> RenderResult:
        """
        Convert an existing PDF to PDF/A.

        Args:
            pdf_input: Path to a PDF file, or the PDF content itself
            **options: ``output`` and ``pdfa_version``
        """
        pdf = resolve_pdf_input(pdf_input)
        return await self._dispatch(Operation.CONVERT_TO_PDFA, pdf, dict(options))

    async def capture_screenshot(self, input: Any, **options: Any) -> RenderResult:
        """Capture a screenshot of HTML or a URL with ``width``, ``height`` and ``full_page``."""
        source, merged = normalize_input(input, options)
        return await self._dispatch(Operation.CAPTURE_SCREENSHOT, source, merged)

    async def _dispatch(
        self, operation: Operation, payload: Union[Source, bytes], options: OptionSet
    ) -> RenderResult:
        mode = self.settings.mode
        self.logger.debug("Dispatching render request", operation=operation.value, mode=mode.value)

        if mode is Mode.LOCAL_ENGINE:
            if self.engine is None:
                self.logger.error("Local engine requested but not available")
                raise EngineUnavailableError()
            method = getattr(self.engine, operation.method_name)
            content = await method(payload, options)
        else:
            remote_content = payload if isinstance(payload, bytes) else payload.content
            content = await self.client.render(operation, remote_content, options)

        return self._finalize(operation, mode, content, options)

    def _finalize(
        self, operation: Operation, mode: Mode, content: bytes, options: OptionSet
    ) -> RenderResult:
        metadata = {"operation": operation.value, "mode": mode.value}
        output = options.get("output")

        if output is None:
            return RenderResult(content=content, file_size=len(content), metadata=metadata)

        output_path = write_output(content, output)
        self.logger.info(
            "Rendered content written",
            operation=operation.value,
            path=str(output_path),
            file_size=len(content),
        )
        return RenderResult(output_path=output_path, file_size=len(content), metadata=metadata)


# Module-level operations, resolving settings on every call


async def print_to_pdf(input: Any, **options: Any) -> RenderResult:
    """Print HTML or a URL to PDF using the current settings."""
    return await Dispatcher(get_settings()).print_to_pdf(input, **options)


async def print_to_pdfa(input: Any, **options: Any) -> RenderResult:
    """Print HTML or a URL to PDF/A using the current settings."""
    return await Dispatcher(get_settings()).print_to_pdfa(input, **options)


async def convert_to_pdfa(pdf_input: PdfInput, **options: Any) -> RenderResult:
    """Convert a PDF file or PDF bytes to PDF/A using the current settings."""
    return await Dispatcher(get_settings()).convert_to_pdfa(pdf_input, **options)


async def capture_screenshot(input: Any, **options: Any) -> RenderResult:
    """Capture a screenshot of HTML or a URL using the current settings."""
    return await Dispatcher(get_settings()).capture_screenshot(input, **options)
