"""Metadata preservation for regenerated collections.

This module provides the MetadataPreserver class which carries user-authored
metadata (auth configs, lifecycle scripts and variables) from a persisted
collection onto a freshly generated one. Generated trees are rebuilt from API
specifications on every run and never contain that metadata, so without this
step replacing the persisted collection would silently discard it.

Nodes are paired by normalized key. Folders are matched first against the
folder at the same position in the persisted tree, then anywhere in it, so
folders that moved keep their metadata. Requests are matched the same way,
falling back to the global index so a request that moved folders is found.
"""

import logging
from typing import Optional

from .indexer import TreeIndex, build_index, index_children
from .keys import folder_key, request_key
from .merge_policies import merge_auth, merge_events, merge_variables
from .models import CollectionTree, FolderNode, RequestNode

logger = logging.getLogger(__name__)


class MetadataPreserver:
    """Copies persisted metadata onto matching nodes of a generated tree.

    The incoming tree is mutated in place and returned. Callers that still
    need the unmodified incoming tree must pass a deep copy.

    Attributes:
        matched_requests: Requests paired with a persisted request in the last run
        matched_folders: Folders paired with a persisted folder in the last run

    Example:
        >>> preserver = MetadataPreserver()
        >>> incoming = preserver.preserve(existing, copy.deepcopy(generated))
        >>> print(f"{preserver.matched_requests} request(s) kept their scripts")
    """

    def __init__(self):
        self.matched_requests = 0
        self.matched_folders = 0
        self._global_index: Optional[TreeIndex] = None

    def preserve(self, existing: CollectionTree, incoming: CollectionTree) -> CollectionTree:
        """Carry metadata from ``existing`` onto ``incoming``.

        Args:
            existing: Persisted collection (read only)
            incoming: Generated collection (mutated in place)

        Returns:
            The incoming collection with preserved metadata
        """
        self.matched_requests = 0
        self.matched_folders = 0

        incoming.auth = merge_auth(incoming.auth, existing.auth)
        incoming.event = merge_events(existing.event, incoming.event)
        incoming.variable = merge_variables(existing.variable, incoming.variable)

        self._global_index = build_index(existing.item)
        # Root acts as an implicit folder whose local view is the existing root
        self._preserve_children(incoming.item, index_children(existing.item))

        logger.info(
            f"Preserved metadata for {self.matched_folders} folder(s) and "
            f"{self.matched_requests} request(s)"
        )
        return incoming

    def _preserve_children(self, items, local_index: TreeIndex) -> None:
        """Pair each incoming child with an existing node and copy metadata."""
        for node in items:
            if isinstance(node, RequestNode):
                match = self._find_request(node, local_index)
                if match is not None:
                    self._preserve_request(node, match)
            elif isinstance(node, FolderNode):
                match = self._find_folder(node, local_index)
                if match is not None:
                    self._preserve_folder(node, match)
                    self._preserve_children(node.item, index_children(match.item))
                else:
                    # Unmatched folder: children may still have moved in from elsewhere
                    self._preserve_children(node.item, TreeIndex())

    def _find_request(self, node: RequestNode, local_index: TreeIndex) -> Optional[RequestNode]:
        key = request_key(node)
        match = local_index.requests_by_key.get(key)
        if match is None:
            match = self._global_index.requests_by_key.get(key)
        return match

    def _find_folder(self, node: FolderNode, local_index: TreeIndex) -> Optional[FolderNode]:
        key = folder_key(node.name)
        match = local_index.folders_by_key.get(key)
        if match is None:
            match = self._global_index.folders_by_key.get(key)
        return match

    def _preserve_request(self, node: RequestNode, match: RequestNode) -> None:
        node.event = merge_events(match.event, node.event)
        node.auth = merge_auth(node.auth, match.auth)
        self.matched_requests += 1
        logger.debug(f"Request matched: {request_key(node)}")

    def _preserve_folder(self, node: FolderNode, match: FolderNode) -> None:
        node.event = merge_events(match.event, node.event)
        node.variable = merge_variables(match.variable, node.variable)
        node.auth = merge_auth(node.auth, match.auth)
        self.matched_folders += 1
        logger.debug(f"Folder matched: {folder_key(node.name)}")


def preserve_metadata(existing: CollectionTree, incoming: CollectionTree) -> CollectionTree:
    """Convenience wrapper around MetadataPreserver.preserve()."""
    return MetadataPreserver().preserve(existing, incoming)
