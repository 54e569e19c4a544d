"""Data models for Postman collection trees.

This module defines the tree types used by the reconciliation engine.
A collection is a root object holding an ordered list of nodes, where each
node is either a folder (with children of its own) or a request (a leaf
describing one HTTP operation). All models use dataclasses and keep any
field they do not interpret in ``extra`` so that a tree can be parsed and
re-emitted without losing data.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

SCHEMA_V21 = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"

DEFAULT_METHOD = "GET"


@dataclass
class RequestNode:
    """Leaf node describing a single HTTP operation.

    Attributes:
        name: Display name (not unique, may be empty)
        request: Raw Postman request object (dict) or a bare URL string
        event: Lifecycle scripts attached to the request (None if absent)
        variable: Variables attached to the item (None if absent)
        extra: Every other item field, re-emitted untouched (id, response, ...)
    """
    name: str
    request: Any
    event: Optional[List[Dict[str, Any]]] = None
    variable: Optional[List[Dict[str, Any]]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def method(self) -> str:
        if isinstance(self.request, dict):
            return self.request.get('method') or DEFAULT_METHOD
        return DEFAULT_METHOD

    @property
    def url(self) -> Any:
        if isinstance(self.request, dict):
            return self.request.get('url')
        return self.request

    @property
    def auth(self) -> Optional[Any]:
        """Request-level auth, stored under ``request.auth``."""
        if isinstance(self.request, dict):
            return self.request.get('auth')
        return None

    @auth.setter
    def auth(self, value: Optional[Any]) -> None:
        if not isinstance(self.request, dict):
            if value is None:
                return
            # Bare URL string form: promote to object form to hold auth
            self.request = {'url': self.request}
        if value is None:
            self.request.pop('auth', None)
        else:
            self.request['auth'] = value

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'name': self.name}
        data.update(self.extra)
        data['request'] = self.request
        if self.event is not None:
            data['event'] = self.event
        if self.variable is not None:
            data['variable'] = self.variable
        return data


@dataclass
class FolderNode:
    """Named grouping node holding ordered child nodes.

    Attributes:
        name: Display name (not unique)
        item: Ordered child nodes
        event: Lifecycle scripts attached to the folder (None if absent)
        variable: Folder-scoped variables (None if absent)
        auth: Folder-level auth config (None if absent)
        extra: Every other folder field, re-emitted untouched
    """
    name: str
    item: List['CollectionNode'] = field(default_factory=list)
    event: Optional[List[Dict[str, Any]]] = None
    variable: Optional[List[Dict[str, Any]]] = None
    auth: Optional[Any] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'name': self.name}
        data.update(self.extra)
        data['item'] = [child.to_dict() for child in self.item]
        _emit_metadata(data, self.event, self.variable, self.auth)
        return data


CollectionNode = Union[FolderNode, RequestNode]


@dataclass
class CollectionTree:
    """Root of a Postman collection.

    Attributes:
        info: Collection info block (name, schema, _postman_id, ...)
        item: Top-level nodes (usually one folder per service)
        event: Collection-level scripts (None if absent)
        variable: Collection variables (None if absent)
        auth: Collection-level auth config (None if absent)
        extra: Every other root field, re-emitted untouched
    """
    info: Dict[str, Any]
    item: List[CollectionNode] = field(default_factory=list)
    event: Optional[List[Dict[str, Any]]] = None
    variable: Optional[List[Dict[str, Any]]] = None
    auth: Optional[Any] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.info.get('name', '')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CollectionTree':
        """Parse a collection JSON object into a tree."""
        extra = {
            k: v for k, v in data.items()
            if k not in ('info', 'item', 'event', 'variable', 'auth')
        }
        return cls(
            info=dict(data.get('info') or {}),
            item=_children_from_list(data.get('item')),
            event=data.get('event'),
            variable=data.get('variable'),
            auth=data.get('auth'),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'info': self.info}
        data.update(self.extra)
        data['item'] = [child.to_dict() for child in self.item]
        _emit_metadata(data, self.event, self.variable, self.auth)
        return data


def node_from_dict(data: Dict[str, Any]) -> CollectionNode:
    """Build a node from a Postman item object.

    An item carrying ``request`` is a request; anything else is treated as a
    folder whose children default to an empty list.
    """
    if 'request' in data:
        extra = {
            k: v for k, v in data.items()
            if k not in ('name', 'request', 'event', 'variable')
        }
        return RequestNode(
            name=data.get('name') or '',
            request=data['request'],
            event=data.get('event'),
            variable=data.get('variable'),
            extra=extra,
        )

    extra = {
        k: v for k, v in data.items()
        if k not in ('name', 'item', 'event', 'variable', 'auth')
    }
    return FolderNode(
        name=data.get('name') or '',
        item=_children_from_list(data.get('item')),
        event=data.get('event'),
        variable=data.get('variable'),
        auth=data.get('auth'),
        extra=extra,
    )


def _children_from_list(raw: Any) -> List[CollectionNode]:
    """Parse an ``item`` list, skipping entries that are not item objects."""
    if not isinstance(raw, list):
        return []
    children = []
    for child in raw:
        if not isinstance(child, dict):
            logger.warning(f"Skipping malformed collection item: {child!r}")
            continue
        children.append(node_from_dict(child))
    return children


def empty_collection(name: str) -> CollectionTree:
    """Create the default empty collection used when nothing is persisted yet."""
    return CollectionTree(info={'name': name, 'schema': SCHEMA_V21}, item=[])


def ensure_collection(raw: Optional[Dict[str, Any]], name: str) -> CollectionTree:
    """Parse ``raw`` if it looks like a collection, else return the empty default.

    Args:
        raw: Collection JSON object (may be None or malformed)
        name: Collection name used for the empty default

    Returns:
        CollectionTree parsed from raw, or an empty collection named ``name``
    """
    if isinstance(raw, dict) and isinstance(raw.get('item'), list):
        return CollectionTree.from_dict(raw)
    return empty_collection(name)


def _emit_metadata(
    data: Dict[str, Any],
    event: Optional[List[Dict[str, Any]]],
    variable: Optional[List[Dict[str, Any]]],
    auth: Optional[Any],
) -> None:
    if event is not None:
        data['event'] = event
    if variable is not None:
        data['variable'] = variable
    if auth is not None:
        data['auth'] = auth
