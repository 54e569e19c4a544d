"""Discovery, loading and normalization of API specification files.

Specifications live under ``services/<service>/designtime/`` and are JSON or
YAML OpenAPI/Swagger documents. Before conversion each document is patched
into a shape the converter accepts: Swagger 2.0 markers are replaced by an
OpenAPI 3.0.0 marker, invalid versions are reset and missing titles filled.
"""

import glob
import json
import logging
import os
import re
from typing import Any, Dict, List

import yaml

from .errors import SpecParseError

logger = logging.getLogger(__name__)

DEFAULT_OPENAPI_VERSION = "3.0.0"
DEFAULT_INFO_VERSION = "1.0.0"

_SEMVER_RE = re.compile(r'^\d+\.\d+\.\d+$')


class SpecLoader:
    """Loads specification documents from disk.

    Example:
        >>> for path in SpecLoader.discover("services/**/designtime/*_API.json"):
        ...     spec = SpecLoader.normalize(SpecLoader.load(path), path)
        ...     service = SpecLoader.service_name(path)
    """

    YAML_SUFFIXES = ('.yaml', '.yml')

    @classmethod
    def discover(cls, pattern: str) -> List[str]:
        """Find specification files matching a glob pattern.

        Args:
            pattern: Glob pattern, ``**`` matches any depth

        Returns:
            Sorted list of matching file paths
        """
        files = sorted(
            path for path in glob.glob(pattern, recursive=True)
            if os.path.isfile(path)
        )
        logger.info(f"Found {len(files)} specification file(s) for pattern {pattern}")
        return files

    @classmethod
    def load(cls, file_path: str) -> Dict[str, Any]:
        """Read and parse one specification file.

        Raises:
            SpecParseError: If the file cannot be read, parsed, or is not a mapping
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise SpecParseError(file_path, str(e)) from e

        try:
            if file_path.lower().endswith(cls.YAML_SUFFIXES):
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (ValueError, yaml.YAMLError) as e:
            raise SpecParseError(file_path, str(e)) from e

        if not isinstance(data, dict):
            raise SpecParseError(
                file_path,
                f"expected a mapping at top level, got {type(data).__name__}"
            )
        return data

    @classmethod
    def normalize(cls, spec: Dict[str, Any], file_path: str) -> Dict[str, Any]:
        """Patch a specification so the converter accepts it.

        Mutates and returns ``spec``.
        """
        if 'swagger' in spec:
            logger.warning(
                f"{file_path}: replacing swagger:{spec['swagger']} -> "
                f"openapi:{DEFAULT_OPENAPI_VERSION}"
            )
            del spec['swagger']
            spec['openapi'] = DEFAULT_OPENAPI_VERSION
        if not spec.get('openapi'):
            spec['openapi'] = DEFAULT_OPENAPI_VERSION

        if not isinstance(spec.get('info'), dict):
            spec['info'] = {}
        info = spec['info']

        version = info.get('version')
        if not version or not _SEMVER_RE.match(str(version)):
            logger.warning(f"{file_path}: fixing info.version -> {DEFAULT_INFO_VERSION}")
            info['version'] = DEFAULT_INFO_VERSION

        if not info.get('title'):
            info['title'] = os.path.basename(file_path)

        return spec

    @classmethod
    def service_name(cls, file_path: str) -> str:
        """Service label for a file laid out as ``services/<service>/designtime/<file>``."""
        return os.path.basename(os.path.dirname(os.path.dirname(os.path.abspath(file_path))))
