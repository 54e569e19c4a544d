"""Incremental merge of a generated collection into a persisted one.

Used by the merge strategy only. The persisted tree is the base: folders are
found or created by key, new requests are appended, and requests present on
both sides keep their persisted body and URL while absorbing any new
metadata. Nothing in the persisted tree is ever removed.
"""

import copy
import logging
from typing import List

from .keys import folder_key, request_key
from .merge_policies import merge_auth, merge_events, merge_variables
from .models import CollectionNode, CollectionTree, FolderNode, RequestNode

logger = logging.getLogger(__name__)

UNTITLED_FOLDER = "Untitled"


class CollectionMerger:
    """Merges an incoming collection into a copy of an existing one.

    Attributes:
        added_requests: Requests appended during the last merge
        added_folders: Folders created during the last merge
        merged_requests: Requests found on both sides during the last merge
    """

    def __init__(self):
        self.added_requests = 0
        self.added_folders = 0
        self.merged_requests = 0

    def merge(self, existing: CollectionTree, incoming: CollectionTree) -> CollectionTree:
        """Merge ``incoming`` into a deep copy of ``existing``.

        Args:
            existing: Persisted collection (not modified)
            incoming: Generated collection (not modified)

        Returns:
            New collection containing every existing node plus new ones
        """
        self.added_requests = 0
        self.added_folders = 0
        self.merged_requests = 0

        merged = copy.deepcopy(existing)
        merged.auth = merge_auth(incoming.auth, merged.auth)
        merged.event = merge_events(merged.event, incoming.event)
        merged.variable = merge_variables(merged.variable, incoming.variable)

        self._merge_items(merged.item, incoming.item, merged.name or "<root>")

        logger.info(
            f"Merge added {self.added_folders} folder(s) and {self.added_requests} "
            f"request(s); {self.merged_requests} request(s) already present"
        )
        return merged

    def _merge_items(
        self,
        dst_items: List[CollectionNode],
        src_items: List[CollectionNode],
        parent_name: str,
    ) -> None:
        for src in src_items:
            if isinstance(src, RequestNode):
                self._merge_request(dst_items, src, parent_name)
            elif isinstance(src, FolderNode):
                folder = self._find_or_create_folder(dst_items, src.name or UNTITLED_FOLDER)
                folder.event = merge_events(folder.event, src.event)
                folder.variable = merge_variables(folder.variable, src.variable)
                folder.auth = merge_auth(src.auth, folder.auth)
                self._merge_items(folder.item, src.item, folder.name)

    def _merge_request(
        self,
        dst_items: List[CollectionNode],
        src: RequestNode,
        parent_name: str,
    ) -> None:
        key = request_key(src)
        for dst in dst_items:
            if isinstance(dst, RequestNode) and request_key(dst) == key:
                dst.event = merge_events(dst.event, src.event)
                dst.auth = merge_auth(src.auth, dst.auth)
                self.merged_requests += 1
                logger.debug(f"Request already present: {src.name or key} under {parent_name}")
                return

        dst_items.append(copy.deepcopy(src))
        self.added_requests += 1
        logger.info(f"Adding request: {src.name or key} under {parent_name}")

    def _find_or_create_folder(self, dst_items: List[CollectionNode], name: str) -> FolderNode:
        key = folder_key(name)
        for dst in dst_items:
            if isinstance(dst, FolderNode) and folder_key(dst.name) == key:
                return dst

        folder = FolderNode(name=name, item=[])
        dst_items.append(folder)
        self.added_folders += 1
        logger.info(f"Adding folder: {name}")
        return folder


def merge_collections(existing: CollectionTree, incoming: CollectionTree) -> CollectionTree:
    """Convenience wrapper around CollectionMerger.merge()."""
    return CollectionMerger().merge(existing, incoming)
