"""
Local Rendering Engine
======================

In-process rendering with Playwright-driven Chromium, used when the client
runs in ``local_engine`` mode. PDF/A output is produced by passing the PDF
through Ghostscript.

The engine returns raw bytes; writing to ``output`` is left to the
dispatcher so both backends share the same output handling.
"""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

from playwright.async_api import async_playwright, Page

from chromic_client.config.logging import get_logger
from chromic_client.config.settings import Settings, get_settings
from chromic_client.core.errors import LocalEngineError
from chromic_client.models.schemas import Source, SourceType

logger = get_logger(__name__)


@runtime_checkable
class RenderEngine(Protocol):
    """Interface of an in-process rendering engine."""

    async def print_to_pdf(self, source: Source, options: Mapping[str, Any]) -> bytes: ...

    async def print_to_pdfa(self, source: Source, options: Mapping[str, Any]) -> bytes: ...

    async def convert_to_pdfa(self, pdf: bytes, options: Mapping[str, Any]) -> bytes: ...

    async def capture_screenshot(self, source: Source, options: Mapping[str, Any]) -> bytes: ...


# Print defaults, paper and margins in inches
PRINT_DEFAULTS: Dict[str, Any] = {
    "landscape": False,
    "print_background": True,
    "scale": 1.0,
    "paper_width": 8.5,
    "paper_height": 11.0,
    "margin_top": 0.4,
    "margin_bottom": 0.4,
    "margin_left": 0.4,
    "margin_right": 0.4,
}

SCREENSHOT_DEFAULTS: Dict[str, Any] = {"width": 1280, "height": 720, "full_page": False}

DEFAULT_PDFA_VERSION = "3b"

# Chrome DevTools ``Page.printToPDF`` parameter names accepted in
# ``print_to_pdf_options``
CDP_OPTION_NAMES = {
    "landscape": "landscape",
    "printBackground": "print_background",
    "scale": "scale",
    "paperWidth": "paper_width",
    "paperHeight": "paper_height",
    "marginTop": "margin_top",
    "marginBottom": "margin_bottom",
    "marginLeft": "margin_left",
    "marginRight": "margin_right",
    "displayHeaderFooter": "display_header_footer",
    "headerTemplate": "header_template",
    "footerTemplate": "footer_template",
    "pageRanges": "page_ranges",
    "preferCSSPageSize": "prefer_css_page_size",
}


def build_pdf_kwargs(options: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Translate print options into ``Page.pdf`` keyword arguments.

    Entries of ``print_to_pdf_options`` are applied last and may use either
    DevTools or option names. Unknown names are passed through untouched.
    """
    resolved = dict(PRINT_DEFAULTS)
    resolved.update({key: options[key] for key in PRINT_DEFAULTS if key in options})
    for name, value in (options.get("print_to_pdf_options") or {}).items():
        resolved[CDP_OPTION_NAMES.get(name, name)] = value

    kwargs: Dict[str, Any] = {
        "landscape": resolved.pop("landscape"),
        "print_background": resolved.pop("print_background"),
        "scale": resolved.pop("scale"),
        "width": f"{resolved.pop('paper_width')}in",
        "height": f"{resolved.pop('paper_height')}in",
        "margin": {
            side: f"{resolved.pop('margin_' + side)}in"
            for side in ("top", "bottom", "left", "right")
        },
    }
    kwargs.update(resolved)
    return kwargs


def pdfa_level(version: Any) -> int:
    """Return the PDF/A part number (1, 2 or 3) of a version such as ``"3b"``."""
    text = str(version).strip()
    if not text or text[0] not in "123":
        raise LocalEngineError(f"Unsupported PDF/A version: {version!r}")
    return int(text[0])


class PlaywrightEngine:
    """Playwright-based rendering engine implementation."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(engine="playwright")  # structlog.BoundLoggerBase

    async def print_to_pdf(self, source: Source, options: Mapping[str, Any]) -> bytes:
        """
        Print a source to PDF.

        Args:
            source: Markup or URL to print
            options: Print options

        Returns:
            PDF bytes
        """
        pdf_kwargs = build_pdf_kwargs(options)
        self.logger.info("Printing PDF", source_type=source.type.value, **_loggable(pdf_kwargs))

        async with async_playwright() as p:
            browser = await p.chromium.launch(**self._launch_options())
            try:
                page = await browser.new_page()
                await self._load(page, source)
                pdf_bytes = await page.pdf(**pdf_kwargs)
            finally:
                await browser.close()

        self.logger.info("PDF printed", file_size=len(pdf_bytes))
        return pdf_bytes

    async def print_to_pdfa(self, source: Source, options: Mapping[str, Any]) -> bytes:
        """Print a source to PDF and convert the result to PDF/A."""
        pdf_bytes = await self.print_to_pdf(source, options)
        return await self.convert_to_pdfa(pdf_bytes, options)

    async def convert_to_pdfa(self, pdf: bytes, options: Mapping[str, Any]) -> bytes:
        """
        Convert PDF bytes to PDF/A with Ghostscript.

        Raises:
            LocalEngineError: If Ghostscript is missing or fails
        """
        level = pdfa_level(options.get("pdfa_version", DEFAULT_PDFA_VERSION))
        gs = shutil.which(self.settings.ghostscript_executable)
        if gs is None:
            raise LocalEngineError(
                f"Ghostscript executable not found: {self.settings.ghostscript_executable}"
            )

        with tempfile.TemporaryDirectory(prefix="chromic_client_") as tmp:
            source_path = Path(tmp) / "source.pdf"
            target_path = Path(tmp) / "pdfa.pdf"
            source_path.write_bytes(pdf)

            self.logger.info("Converting PDF to PDF/A", level=level, input_size=len(pdf))
            process = await asyncio.create_subprocess_exec(
                gs,
                f"-dPDFA={level}",
                "-dBATCH",
                "-dNOPAUSE",
                "-dQUIET",
                "-dPDFACompatibilityPolicy=1",
                "-sColorConversionStrategy=RGB",
                "-sDEVICE=pdfwrite",
                f"-sOutputFile={target_path}",
                str(source_path),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()

            if process.returncode != 0:
                message = stderr.decode("utf-8", errors="replace").strip()
                self.logger.error(
                    "Ghostscript conversion failed", returncode=process.returncode, error=message
                )
                raise LocalEngineError(
                    f"Ghostscript exited with status {process.returncode}: {message}"
                )

            return target_path.read_bytes()

    async def capture_screenshot(self, source: Source, options: Mapping[str, Any]) -> bytes:
        """
        Capture a PNG screenshot of a source.

        Args:
            source: Markup or URL to capture
            options: Viewport ``width``/``height`` and ``full_page``

        Returns:
            PNG bytes
        """
        width = options.get("width", SCREENSHOT_DEFAULTS["width"])
        height = options.get("height", SCREENSHOT_DEFAULTS["height"])
        full_page = options.get("full_page", SCREENSHOT_DEFAULTS["full_page"])

        self.logger.info(
            "Capturing screenshot",
            source_type=source.type.value,
            width=width,
            height=height,
            full_page=full_page,
        )

        async with async_playwright() as p:
            browser = await p.chromium.launch(**self._launch_options())
            try:
                page = await browser.new_page(viewport={"width": width, "height": height})
                await self._load(page, source)
                png_bytes = await page.screenshot(type="png", full_page=full_page)
            finally:
                await browser.close()

        self.logger.info("Screenshot captured", file_size=len(png_bytes))
        return png_bytes

    def _launch_options(self) -> Dict[str, Any]:
        launch: Dict[str, Any] = {"headless": True}
        if self.settings.chrome_executable:
            launch["executable_path"] = self.settings.chrome_executable
        return launch

    async def _load(self, page: Page, source: Source) -> None:
        """Load markup or navigate to a URL and wait for the network to settle."""
        if source.type is SourceType.URL:
            await page.goto(source.content, wait_until="networkidle")
        else:
            await page.set_content(source.content, wait_until="networkidle")


def _loggable(pdf_kwargs: Mapping[str, Any]) -> Dict[str, Any]:
    # Header and footer templates can be large
    return {k: v for k, v in pdf_kwargs.items() if not k.endswith("_template")}
