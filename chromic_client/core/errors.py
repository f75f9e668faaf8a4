"""
Client Errors
=============

Exception hierarchy raised by the dispatcher and its backends.
"""

from pathlib import Path
from typing import Optional, Union


class ChromicClientError(Exception):
    """Base exception for rendering client failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class EmptyInputError(ChromicClientError):
    """Raised when an empty sequence of sources is given."""

    def __init__(self, message: str = "No sources given"):
        super().__init__(message)


class InvalidSourceError(ChromicClientError):
    """Raised when the input is neither a source, a pair nor a sequence."""

    pass


class EngineUnavailableError(ChromicClientError):
    """Raised when local mode is selected but no local engine is present."""

    def __init__(
        self,
        message: str = "Local rendering engine is not available. "
        "Install playwright or switch to remote_service mode.",
    ):
        super().__init__(message)


class RemoteStatusError(ChromicClientError):
    """Raised when the rendering service answers with a non-200 status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"API returned status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class TransportError(ChromicClientError):
    """Raised when the rendering service cannot be reached."""

    def __init__(self, cause: BaseException):
        reason = str(cause) or type(cause).__name__
        super().__init__(f"Rendering service request failed: {reason}", cause)


class FileWriteError(ChromicClientError):
    """Raised when rendered content cannot be written to the output path."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        super().__init__(f"Failed to write output to {path}: {cause}", cause)
        self.path = Path(path)


class LocalEngineError(ChromicClientError):
    """Raised when an external tool used by the local engine fails."""

    pass
