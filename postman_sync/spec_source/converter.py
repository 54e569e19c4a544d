"""OpenAPI to Postman conversion through the openapi2postmanv2 CLI.

The converter is an external tool: each specification is written to a
temporary directory, the CLI is run against it, and the collection it writes
is read back. Only the converted items are kept; the fragment is named after
the service it came from.
"""

import json
import logging
import os
import shlex
import subprocess
import tempfile
from typing import Any, Dict, List

from .errors import ConversionError

logger = logging.getLogger(__name__)

DEFAULT_CONVERTER_COMMAND = "openapi2postmanv2"

# Converter timeout in seconds
CONVERTER_TIMEOUT = 120


class OpenAPIConverter:
    """Converts one specification document into a collection fragment.

    Example:
        >>> converter = OpenAPIConverter()
        >>> fragment = converter.convert(spec, "orders")
        >>> fragment["name"], len(fragment["item"])
        ('orders', 12)
    """

    def __init__(self, command: str = DEFAULT_CONVERTER_COMMAND, timeout: int = CONVERTER_TIMEOUT):
        """Initialize the converter.

        Args:
            command: Converter executable, optionally with extra arguments
            timeout: Seconds to wait for one conversion
        """
        self.command = command
        self.timeout = timeout

    def _build_args(self, spec_path: str, output_path: str) -> List[str]:
        return shlex.split(self.command) + ["-s", spec_path, "-o", output_path]

    def convert(self, spec: Dict[str, Any], service_name: str) -> Dict[str, Any]:
        """Convert a normalized specification.

        Args:
            spec: Normalized OpenAPI document
            service_name: Label for the resulting fragment

        Returns:
            ``{"name": service_name, "item": [...]}``

        Raises:
            ConversionError: If the converter is missing, fails, times out
                or writes no usable collection
        """
        with tempfile.TemporaryDirectory(prefix="postman-sync-") as tmp_dir:
            spec_path = os.path.join(tmp_dir, "spec.json")
            output_path = os.path.join(tmp_dir, "collection.json")

            with open(spec_path, 'w', encoding='utf-8') as f:
                json.dump(spec, f)

            args = self._build_args(spec_path, output_path)
            logger.debug(f"Running converter: {' '.join(args)}")

            try:
                result = subprocess.run(
                    args,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except FileNotFoundError as e:
                raise ConversionError(
                    service_name,
                    f"converter '{self.command}' not found"
                ) from e
            except subprocess.TimeoutExpired as e:
                raise ConversionError(
                    service_name,
                    f"converter timed out after {self.timeout}s"
                ) from e

            if result.returncode != 0:
                reason = (result.stderr or result.stdout or "").strip()
                raise ConversionError(
                    service_name,
                    f"converter exited with code {result.returncode}: {reason}"
                )

            try:
                with open(output_path, 'r', encoding='utf-8') as f:
                    collection = json.load(f)
            except FileNotFoundError as e:
                reason = (result.stderr or result.stdout or "no output written").strip()
                raise ConversionError(service_name, reason) from e
            except ValueError as e:
                raise ConversionError(service_name, f"invalid converter output: {e}") from e

        if not isinstance(collection, dict):
            raise ConversionError(service_name, "converter output is not a collection")

        items = collection.get('item') or []
        logger.info(f"Converted service '{service_name}' ({len(items)} top-level item(s))")
        return {'name': service_name, 'item': items}
