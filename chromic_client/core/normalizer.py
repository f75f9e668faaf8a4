"""
Input Normalizer
================

Reduces the accepted input shapes to a single ``(Source, OptionSet)`` pair.

Accepted shapes:
- a bare source: ``Source.html("<h1>Hi</h1>")`` or ``("html", "<h1>Hi</h1>")``
- a source with embedded options: ``(source, {"landscape": True})``
- a list of the above, of which only the first is rendered
"""

import os
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from chromic_client.config.logging import get_logger
from chromic_client.core.errors import EmptyInputError, InvalidSourceError
from chromic_client.models.schemas import OptionSet, Source, SourceType

logger = get_logger(__name__)

PdfInput = Union[str, bytes, "os.PathLike[str]"]


def coerce_source(value: Any) -> Source:
    """Turn a ``Source`` or a ``(kind, content)`` tuple into a ``Source``."""
    if isinstance(value, Source):
        return value

    if (
        isinstance(value, tuple)
        and len(value) == 2
        and isinstance(value[1], str)
        and value[0] in {t.value for t in SourceType}
    ):
        return Source(type=SourceType(value[0]), content=value[1])

    raise InvalidSourceError(f"Not a renderable source: {value!r}")


def _is_source_and_options(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and isinstance(value[1], Mapping)


def normalize_input(
    value: Any, options: Optional[Mapping[str, Any]] = None
) -> Tuple[Source, OptionSet]:
    """
    Normalize a rendering input into a canonical source and option set.

    Options embedded next to the source are merged with the caller's options;
    the caller's value wins on a key collision.

    Args:
        value: Source, ``(source, options)`` pair, or list of either
        options: Caller-supplied options

    Returns:
        Tuple of the source and the merged options

    Raises:
        EmptyInputError: If an empty list is given
        InvalidSourceError: If the input has none of the accepted shapes
    """
    caller_options: OptionSet = dict(options or {})  # type: ignore[assignment]

    if isinstance(value, list):
        if not value:
            raise EmptyInputError()
        if len(value) > 1:
            # Merging several sources into one document is not supported
            logger.warning("Multiple sources given, rendering the first only", count=len(value))
        return normalize_input(value[0], caller_options)

    if _is_source_and_options(value):
        source, embedded = value
        merged: OptionSet = {**embedded, **caller_options}  # type: ignore[typeddict-item]
        return coerce_source(source), merged

    return coerce_source(value), caller_options


def resolve_pdf_input(pdf_input: PdfInput) -> bytes:
    """
    Resolve the input of a PDF/A conversion to PDF bytes.

    A value naming an existing file is read from disk. Anything else is taken
    to be the PDF content itself. Binary content that also happens to be a
    valid path is read as a file.

    Raises:
        InvalidSourceError: If a ``Path`` is given that cannot be read
    """
    if isinstance(pdf_input, os.PathLike):
        try:
            return Path(pdf_input).read_bytes()
        except OSError as e:
            raise InvalidSourceError(
                f"Cannot read PDF file {os.fspath(pdf_input)}: {e}", cause=e
            ) from e

    if os.path.isfile(pdf_input):
        logger.debug("Reading PDF from file", path=os.fsdecode(pdf_input))
        with open(pdf_input, "rb") as f:
            return f.read()

    if isinstance(pdf_input, str):
        return pdf_input.encode("utf-8")
    return bytes(pdf_input)
