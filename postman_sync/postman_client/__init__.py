"""Postman client library for collection sync.

This package provides Python abstractions over the Postman collections
REST API: credential loading, typed errors, rate-limit retry and the
fetch/create/replace calls used to persist reconciled collections.
"""

from .api_wrapper import APIWrapper
from .auth import Authenticator, Credentials
from .errors import (
    SyncError,
    PostmanError,
    InvalidCredentialsError,
    CollectionNotFoundError,
    APIUnreachableError,
    APIAccessError,
)

__all__ = [
    "APIWrapper",
    "Authenticator",
    "Credentials",
    "SyncError",
    "PostmanError",
    "InvalidCredentialsError",
    "CollectionNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
]
