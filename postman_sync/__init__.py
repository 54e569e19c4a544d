"""Postman collection sync with metadata-preserving reconciliation."""

__version__ = "0.1.0"
