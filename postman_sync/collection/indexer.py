"""Key-based lookup maps over collection trees."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .keys import folder_key, request_key
from .models import CollectionNode, FolderNode, RequestNode

logger = logging.getLogger(__name__)


@dataclass
class TreeIndex:
    """Lookup maps from normalized key to node.

    Attributes:
        requests_by_key: Request key -> request node (last seen wins)
        folders_by_key: Folder key -> folder node (last seen wins)
    """
    requests_by_key: Dict[str, RequestNode] = field(default_factory=dict)
    folders_by_key: Dict[str, FolderNode] = field(default_factory=dict)


def build_index(items: List[CollectionNode]) -> TreeIndex:
    """Index every request and folder at every depth below ``items``.

    Duplicate keys are not deduplicated here; the last node walked wins.
    """
    index = TreeIndex()
    _walk(items, index)
    logger.debug(
        f"Indexed {len(index.requests_by_key)} request key(s), "
        f"{len(index.folders_by_key)} folder key(s)"
    )
    return index


def index_children(items: List[CollectionNode]) -> TreeIndex:
    """Index only the direct children of a folder (no recursion).

    Unlike build_index, duplicate sibling keys resolve to the first sibling,
    matching how the structural merger picks its merge target.
    """
    index = TreeIndex()
    for node in items:
        if isinstance(node, RequestNode):
            index.requests_by_key.setdefault(request_key(node), node)
        elif isinstance(node, FolderNode):
            index.folders_by_key.setdefault(folder_key(node.name), node)
    return index


def _walk(items: List[CollectionNode], index: TreeIndex) -> None:
    for node in items:
        if isinstance(node, RequestNode):
            index.requests_by_key[request_key(node)] = node
        elif isinstance(node, FolderNode):
            index.folders_by_key[folder_key(node.name)] = node
            _walk(node.item, index)
