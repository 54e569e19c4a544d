"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError and include descriptive messages with
context to help with debugging.
"""

from typing import Optional

from postman_sync.postman_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
