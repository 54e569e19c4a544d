"""Comparison keys for matching nodes across independently built trees.

Generated collections carry no stable IDs, so identity is derived from the
node's display name (or URL) and HTTP method. Normalization is deliberately
lossy: case, whitespace, underscores, hyphens and a trailing "controller"
token are ignored, so "Order Controller", "order-controller" and
"ordercontroller" all collide.
"""

import hashlib
import re
from typing import Any, Dict, Optional

from .models import RequestNode

_WHITESPACE_RE = re.compile(r'\s+')
_SEPARATOR_RE = re.compile(r'[_-]+')
# One or more trailing tokens, so normalize() stays idempotent
_CONTROLLER_SUFFIX_RE = re.compile(r'(?:controller)+$')

FOLDER_PREFIX = "FOLDER::"


def normalize(value: Optional[str]) -> str:
    """Canonicalize a display name or URL into a comparison key.

    Args:
        value: Name or URL (None is treated as empty)

    Returns:
        Lower-cased string with whitespace, '_' and '-' removed and any
        trailing "controller" suffix stripped

    Example:
        >>> normalize("Order Controller")
        'order'
    """
    if not value:
        return ""
    key = value.lower()
    key = _WHITESPACE_RE.sub("", key)
    key = _SEPARATOR_RE.sub("", key)
    return _CONTROLLER_SUFFIX_RE.sub("", key)


def canonical_url(url: Any) -> str:
    """Render a Postman URL value as a single string.

    Strings are returned as-is, objects with ``raw`` return that, and
    structured objects are assembled from protocol, host and path.
    """
    if not url:
        return ""
    if isinstance(url, str):
        return url
    if not isinstance(url, dict):
        return str(url)
    if url.get('raw'):
        return url['raw']

    protocol = f"{url['protocol']}://" if url.get('protocol') else ""

    host = url.get('host') or ""
    if isinstance(host, list):
        host = ".".join(str(label) for label in host)

    path = url.get('path')
    if isinstance(path, list):
        path = "/" + "/".join(str(segment) for segment in path)
    elif path:
        path = f"/{path}"
    else:
        path = ""

    return f"{protocol}{host}{path}"


def request_key(node: Any) -> Optional[str]:
    """Identity key of a request node, or None for anything else."""
    if not isinstance(node, RequestNode):
        return None
    name_or_url = node.name if node.name and node.name.strip() else canonical_url(node.url)
    return f"{node.method}::{normalize(name_or_url)}"


def folder_key(name: Optional[str]) -> str:
    return f"{FOLDER_PREFIX}{normalize(name or '')}"


def event_identity(entry: Dict[str, Any]) -> str:
    """Identity key of an event entry.

    Script ids are used when present; otherwise the script type plus a short
    content hash of its source lines identifies the entry.
    """
    listen = entry.get('listen') or ""
    script = entry.get('script') or {}
    if script.get('id'):
        return f"{listen}:{script['id']}"

    exec_lines = script.get('exec') or []
    if isinstance(exec_lines, str):
        source = exec_lines
    else:
        source = "\n".join(str(line) for line in exec_lines)
    content_hash = hashlib.md5(source.encode()).hexdigest()[:8]
    return f"{listen}:{script.get('type') or ''}:{content_hash}"
