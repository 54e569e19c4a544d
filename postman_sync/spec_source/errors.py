"""Typed exception hierarchy for specification source errors.

Any of these aborts the run before anything is written to Postman.
"""

from typing import Optional

from postman_sync.postman_client.errors import SyncError


class SpecSourceError(SyncError):
    """Base exception for all specification source errors."""
    pass


class SpecParseError(SpecSourceError):
    """Raised when a specification file cannot be read or parsed."""

    def __init__(self, file_path: str, reason: Optional[str] = None):
        message = f"Failed to parse specification {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.reason = reason


class ConversionError(SpecSourceError):
    """Raised when converting a specification into a collection fails."""

    def __init__(self, service_name: str, reason: str):
        super().__init__(f"Conversion failed for service '{service_name}': {reason}")
        self.service_name = service_name
        self.reason = reason
