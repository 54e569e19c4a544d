"""Command-line interface for Postman collection sync.

This package provides the `postman-sync` CLI tool that regenerates a Postman
collection from OpenAPI specifications and reconciles it with the persisted
collection, preserving user-authored scripts, auth and variables.
"""

from .config import ConfigLoader, SyncConfig
from .errors import CLIError, ConfigError
from .models import ExitCode, SyncSummary
from .sync_command import SyncCommand

__all__ = [
    'ConfigLoader',
    'SyncConfig',
    'CLIError',
    'ConfigError',
    'ExitCode',
    'SyncSummary',
    'SyncCommand',
]
