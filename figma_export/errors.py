"""
Errors raised by the export pipeline stages.
"""
from typing import List, Optional, Tuple


class ExportError(Exception):
    """Base class for every failure that aborts an export run."""


class FigmaConnectionError(ExportError):
    """Bad or missing token, unreachable API, or an HTTP error from Figma."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DiscoveryError(ExportError):
    """No exportable nodes under the resolved root."""


class ResolutionError(ExportError):
    """The render endpoint reported an error for one format group."""

    def __init__(self, group_key: str, api_error: str):
        self.group_key = group_key
        self.api_error = api_error
        super().__init__(f"render request for '{group_key}' failed:\n{api_error}")


class DownloadError(ExportError):
    """One or more images could not be written to the output directory."""

    def __init__(self, message: str, failures: Optional[List[Tuple[str, str]]] = None):
        self.failures = failures or []
        super().__init__(message)


class CompressionError(ExportError):
    """The minify stage failed."""
