"""Authentication module for loading Postman API credentials.

This module handles loading the Postman API key from environment variables
using python-dotenv. It validates that the key is present and raises an
appropriate error if it is missing.
"""

import os
from typing import NamedTuple

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

DEFAULT_API_BASE = "https://api.getpostman.com"


class Credentials(NamedTuple):
    """Postman API credentials."""
    base_url: str
    api_key: str


class Authenticator:
    """Loads and validates Postman credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Environment variables:
        POSTMAN_API_KEY: Postman API key (required)
        POSTMAN_API_BASE: API base URL (optional, defaults to https://api.getpostman.com)

    Raises:
        InvalidCredentialsError: If the API key is missing

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.base_url}")
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get Postman credentials from environment variables.

        Returns:
            Credentials: A named tuple containing base_url and api_key

        Raises:
            InvalidCredentialsError: If POSTMAN_API_KEY is missing
        """
        base_url = (os.getenv('POSTMAN_API_BASE') or DEFAULT_API_BASE).rstrip('/')
        api_key = os.getenv('POSTMAN_API_KEY')

        if not api_key:
            raise InvalidCredentialsError(
                endpoint=base_url,
                reason="POSTMAN_API_KEY is not set"
            )

        return Credentials(base_url=base_url, api_key=api_key)
