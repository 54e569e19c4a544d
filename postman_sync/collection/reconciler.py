"""Reconciliation pipeline combining diff, preservation and merge.

Fixed order: the diff is taken against the untouched generated tree, metadata
is preserved onto a deep copy of it, and the payload is either that copy
(replace) or the persisted tree with the copy merged in (merge).
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum

from .diff_reporter import CollectionDiff, diff_collections
from .metadata_preserver import MetadataPreserver
from .models import CollectionTree
from .structural_merger import CollectionMerger

logger = logging.getLogger(__name__)


class MergeStrategy(Enum):
    """Output strategy for a run.

    REPLACE: the generated structure wins, removals propagate
    MERGE: the generated structure is unioned into the persisted one
    """
    REPLACE = "replace"
    MERGE = "merge"


@dataclass
class ReconcileResult:
    """Outcome of a reconciliation.

    Attributes:
        payload: Collection to hand to the document store
        diff: Removals detected between persisted and generated trees
        strategy: Strategy used to build the payload
        preserved_requests: Generated requests that received persisted metadata
        preserved_folders: Generated folders that received persisted metadata
    """
    payload: CollectionTree
    diff: CollectionDiff
    strategy: MergeStrategy
    preserved_requests: int = 0
    preserved_folders: int = 0


def reconcile(existing: CollectionTree, incoming: CollectionTree, prune: bool) -> ReconcileResult:
    """Build the payload for one run.

    Args:
        existing: Persisted collection (not modified)
        incoming: Generated collection (not modified)
        prune: True for replace strategy, False for merge strategy

    Returns:
        ReconcileResult holding the payload and the removal report
    """
    strategy = MergeStrategy.REPLACE if prune else MergeStrategy.MERGE
    logger.info(f"Reconciling '{incoming.name}' using {strategy.value} strategy")

    diff = diff_collections(existing, incoming)

    preserver = MetadataPreserver()
    preserved = preserver.preserve(existing, copy.deepcopy(incoming))

    if strategy is MergeStrategy.REPLACE:
        payload = preserved
    else:
        payload = CollectionMerger().merge(existing, preserved)

    return ReconcileResult(
        payload=payload,
        diff=diff,
        strategy=strategy,
        preserved_requests=preserver.matched_requests,
        preserved_folders=preserver.matched_folders,
    )
