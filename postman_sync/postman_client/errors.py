"""Typed exception hierarchy for Postman API errors.

This module defines all custom exceptions used by the Postman client library.
All exceptions inherit from PostmanError, itself a SyncError, for easy
catching and include descriptive messages with context to help with debugging.
"""

from typing import Optional


class SyncError(Exception):
    """Base exception for all postman-sync errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class PostmanError(SyncError):
    """Base exception for all Postman-related errors."""
    pass


class InvalidCredentialsError(PostmanError):
    """Raised when the API key is missing, invalid or not allowed access."""

    def __init__(self, endpoint: str, reason: Optional[str] = None):
        message = f"API key is invalid (endpoint: {endpoint})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.endpoint = endpoint
        self.reason = reason


class CollectionNotFoundError(PostmanError):
    """Raised when the requested collection does not exist."""

    def __init__(self, collection_uid: str):
        super().__init__(f"Collection {collection_uid} not found")
        self.collection_uid = collection_uid


class APIUnreachableError(PostmanError):
    """Raised when the Postman API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(PostmanError):
    """Raised when an API call returns a non-success status or retries run out."""

    def __init__(
        self,
        message: str = "Postman API failure (after 3 retries)",
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
