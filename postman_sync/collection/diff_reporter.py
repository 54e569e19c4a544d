"""Removal detection between a persisted and a generated collection.

The diff is informational only: it never alters either tree. In replace mode
it shows what is about to be dropped; in merge mode it shows what is being
kept although it is no longer generated.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .keys import folder_key, request_key
from .models import CollectionNode, CollectionTree, FolderNode, RequestNode
from .structural_merger import UNTITLED_FOLDER

logger = logging.getLogger(__name__)


@dataclass
class CollectedKeys:
    """Every request key and folder key found in a tree."""
    requests: Set[str] = field(default_factory=set)
    folders: Set[str] = field(default_factory=set)


@dataclass
class CollectionDiff:
    """Keys present in the persisted tree but absent from the generated one.

    Attributes:
        removed_requests: Sorted request keys no longer generated
        removed_folders: Sorted folder keys no longer generated
    """
    removed_requests: List[str] = field(default_factory=list)
    removed_folders: List[str] = field(default_factory=list)

    @property
    def has_removals(self) -> bool:
        return bool(self.removed_requests or self.removed_folders)


def collect_keys(
    items: List[CollectionNode],
    out: Optional[CollectedKeys] = None,
) -> CollectedKeys:
    """Flatten a tree into its request and folder key sets."""
    if out is None:
        out = CollectedKeys()
    for node in items:
        if isinstance(node, RequestNode):
            out.requests.add(request_key(node))
        elif isinstance(node, FolderNode):
            out.folders.add(folder_key(node.name or UNTITLED_FOLDER))
            collect_keys(node.item, out)
    return out


def diff_collections(existing: CollectionTree, incoming: CollectionTree) -> CollectionDiff:
    """Report folders and requests of ``existing`` missing from ``incoming``.

    Args:
        existing: Persisted collection
        incoming: Generated collection

    Returns:
        CollectionDiff with sorted key lists
    """
    existing_keys = collect_keys(existing.item)
    incoming_keys = collect_keys(incoming.item)

    result = CollectionDiff(
        removed_requests=sorted(existing_keys.requests - incoming_keys.requests),
        removed_folders=sorted(existing_keys.folders - incoming_keys.folders),
    )

    if result.has_removals:
        logger.info(
            f"Detected {len(result.removed_folders)} removed folder(s) and "
            f"{len(result.removed_requests)} removed request(s)"
        )
        for key in result.removed_folders:
            logger.debug(f"  - folder: {key}")
        for key in result.removed_requests:
            logger.debug(f"  - request: {key}")
    else:
        logger.info("No removals detected")

    return result
