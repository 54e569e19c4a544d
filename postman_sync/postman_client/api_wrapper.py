"""API wrapper for the Postman collections REST API.

This module wraps a requests Session configured with the Postman API key and
provides error translation from HTTP exceptions to our typed exception
hierarchy. It integrates with the retry logic for handling rate limits.
"""

import logging
import re
from typing import Any, Dict, Optional

import requests
from requests.exceptions import ConnectionError, HTTPError, Timeout

from .auth import Authenticator, Credentials
from .errors import (
    APIAccessError,
    APIUnreachableError,
    CollectionNotFoundError,
    InvalidCredentialsError,
    PostmanError,
)
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

# Collection UIDs look like "<owner>-<uuid>"
_UID_RE = re.compile(r'^[\w-]+$')

# Maximum characters of a response body kept in error messages
MAX_ERROR_BODY = 500


class APIWrapper:
    """Wrapper around the Postman API with error translation.

    This class provides a thin layer over ``requests`` that:
    1. Authenticates every call with the X-Api-Key header
    2. Translates HTTP errors to typed exceptions
    3. Integrates retry logic for 429 rate limits
    4. Exposes fetch, create and replace for collections

    Example:
        >>> api = APIWrapper(Authenticator())
        >>> data = api.get_collection("12345-abcd")
        >>> api.update_collection("12345-abcd", data["collection"])
    """

    def __init__(self, authenticator: Authenticator, timeout: int = 30):
        """Initialize the API wrapper.

        Args:
            authenticator: Authenticator instance for loading credentials
            timeout: Per-request timeout in seconds
        """
        self._authenticator = authenticator
        self._timeout = timeout
        self._session: Optional[requests.Session] = None
        self._credentials: Optional[Credentials] = None

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session.

        The session is created lazily on first use so that missing
        credentials are only reported when the API is actually needed.

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        if self._session is None:
            self._credentials = self._authenticator.get_credentials()
            session = requests.Session()
            session.headers.update({
                'X-Api-Key': self._credentials.api_key,
                'Content-Type': 'application/json',
                'Accept': 'application/json',
            })
            self._session = session
        return self._session

    def _validate_uid(self, collection_uid: str) -> None:
        """Reject UIDs that could alter the request path.

        Raises:
            ValueError: If the UID is empty or contains unexpected characters
        """
        if not collection_uid or not str(collection_uid).strip():
            raise ValueError("collection_uid cannot be empty")
        if not _UID_RE.match(str(collection_uid).strip()):
            raise ValueError(
                f"Invalid collection_uid format: '{collection_uid}'. "
                f"UIDs may contain only letters, digits, '_' and '-'."
            )

    def _sanitize_credentials(self, text: str) -> str:
        """Mask API keys in error messages before they are logged or raised.

        Example:
            >>> api._sanitize_credentials("bad key PMAK-0123456789abcdef")
            'bad key ***REDACTED***'
        """
        if not text:
            return text
        sanitized = re.sub(r'PMAK-[A-Za-z0-9-]+', '***REDACTED***', text)
        sanitized = re.sub(
            r'(x-api-key)["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _endpoint(self) -> str:
        if self._credentials is not None:
            return self._credentials.base_url
        return "unknown"

    def _translate_error(
        self,
        exception: Exception,
        operation: str,
        collection_uid: Optional[str] = None,
    ) -> Exception:
        """Translate HTTP exceptions to typed Postman exceptions.

        Args:
            exception: The original exception from requests
            operation: Description of the operation that failed
            collection_uid: UID involved in the operation, if any

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        if isinstance(exception, (Timeout, ConnectionError)):
            return APIUnreachableError(endpoint=self._endpoint())

        response = getattr(exception, 'response', None)
        status_code = getattr(response, 'status_code', None)

        if status_code in (401, 403):
            return InvalidCredentialsError(
                endpoint=self._endpoint(),
                reason=f"HTTP {status_code} during {operation}"
            )

        if status_code == 404 and collection_uid:
            return CollectionNotFoundError(collection_uid)

        body = ""
        if response is not None:
            body = self._sanitize_credentials((response.text or "")[:MAX_ERROR_BODY])
        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")

        if status_code is not None:
            message = f"Postman API failure during {operation}: {status_code} {body}".rstrip()
        else:
            message = f"Postman API failure during {operation}"
        return APIAccessError(message, status_code=status_code, body=body or None)

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        collection_uid: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send one API request with retry and error translation.

        Raises:
            InvalidCredentialsError, CollectionNotFoundError,
            APIUnreachableError, APIAccessError
        """
        session = self._get_session()
        url = f"{self._credentials.base_url}{path}"

        def _send() -> requests.Response:
            response = session.request(method, url, json=payload, timeout=self._timeout)
            response.raise_for_status()
            return response

        logger.info(f"Postman API: {method} {path}")
        try:
            response = retry_on_rate_limit(_send)
        except PostmanError:
            raise
        except (HTTPError, Timeout, ConnectionError) as e:
            raise self._translate_error(e, operation, collection_uid) from e

        try:
            return response.json()
        except ValueError as e:
            raise APIAccessError(
                f"Postman API returned invalid JSON during {operation}",
                status_code=response.status_code,
            ) from e

    def get_collection(self, collection_uid: str) -> Dict[str, Any]:
        """Fetch a collection by UID.

        Args:
            collection_uid: Postman collection UID

        Returns:
            Response body, ``{"collection": {...}}``

        Raises:
            CollectionNotFoundError: If the collection does not exist
            InvalidCredentialsError: If the API key is rejected
            APIUnreachableError: If the API is unreachable
            APIAccessError: For any other failure
        """
        self._validate_uid(collection_uid)
        return self._request(
            'GET',
            f"/collections/{collection_uid}",
            operation=f"get_collection({collection_uid})",
            collection_uid=collection_uid,
        )

    def create_collection(self, collection: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new collection.

        Args:
            collection: Collection JSON (wrapped as ``{"collection": ...}`` on the wire)

        Returns:
            Response body from Postman

        Raises:
            InvalidCredentialsError, APIUnreachableError, APIAccessError
        """
        return self._request(
            'POST',
            "/collections",
            operation="create_collection",
            payload={'collection': collection},
        )

    def update_collection(self, collection_uid: str, collection: Dict[str, Any]) -> Dict[str, Any]:
        """Replace an existing collection.

        Args:
            collection_uid: Postman collection UID
            collection: Collection JSON (wrapped as ``{"collection": ...}`` on the wire)

        Returns:
            Response body from Postman

        Raises:
            CollectionNotFoundError, InvalidCredentialsError,
            APIUnreachableError, APIAccessError
        """
        self._validate_uid(collection_uid)
        return self._request(
            'PUT',
            f"/collections/{collection_uid}",
            operation=f"update_collection({collection_uid})",
            collection_uid=collection_uid,
            payload={'collection': collection},
        )
