"""Collection reconciliation engine.

This package reconciles a freshly generated Postman collection with a
persisted one: it pairs nodes by normalized key, carries user-authored
metadata across, merges or replaces the structure, and reports removals.
It performs no I/O.
"""

from .diff_reporter import CollectedKeys, CollectionDiff, collect_keys, diff_collections
from .indexer import TreeIndex, build_index, index_children
from .keys import canonical_url, event_identity, folder_key, normalize, request_key
from .merge_policies import is_empty_auth, merge_auth, merge_events, merge_variables
from .metadata_preserver import MetadataPreserver, preserve_metadata
from .models import (
    SCHEMA_V21,
    CollectionNode,
    CollectionTree,
    FolderNode,
    RequestNode,
    empty_collection,
    ensure_collection,
    node_from_dict,
)
from .reconciler import MergeStrategy, ReconcileResult, reconcile
from .structural_merger import CollectionMerger, merge_collections

__all__ = [
    'SCHEMA_V21',
    'CollectionNode',
    'CollectionTree',
    'FolderNode',
    'RequestNode',
    'empty_collection',
    'ensure_collection',
    'node_from_dict',
    'normalize',
    'canonical_url',
    'request_key',
    'folder_key',
    'event_identity',
    'TreeIndex',
    'build_index',
    'index_children',
    'merge_events',
    'merge_variables',
    'merge_auth',
    'is_empty_auth',
    'MetadataPreserver',
    'preserve_metadata',
    'CollectionMerger',
    'merge_collections',
    'CollectedKeys',
    'CollectionDiff',
    'collect_keys',
    'diff_collections',
    'MergeStrategy',
    'ReconcileResult',
    'reconcile',
]
