"""Merge policies for user-authored metadata.

Three independent policies, one per metadata kind. They hold no
level-specific logic and are used unchanged for the collection root,
folders and requests. Each returns new containers with copied entries so the
result never shares objects with either input.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from .keys import event_identity

logger = logging.getLogger(__name__)


def merge_events(
    existing: Optional[List[Dict[str, Any]]],
    incoming: Optional[List[Dict[str, Any]]],
) -> Optional[List[Dict[str, Any]]]:
    """Union two event lists, keeping existing entries first.

    Existing entries are kept in order; incoming entries are appended in
    order when their identity key is not already present. The result never
    holds two entries with one identity key, so duplicates already present in
    ``existing`` collapse to their first occurrence. ``merge_events(E, [])``
    equals ``E`` only when ``E`` is itself free of duplicates.

    Args:
        existing: Persisted events (None if absent)
        incoming: Freshly generated events (None if absent)

    Returns:
        Merged list without duplicate identity keys, or None when both
        sides are absent
    """
    if existing is None and incoming is None:
        return None

    merged: List[Dict[str, Any]] = []
    seen = set()
    for entry in list(existing or []) + list(incoming or []):
        key = event_identity(entry)
        if key in seen:
            continue
        seen.add(key)
        merged.append(copy.deepcopy(entry))
    return merged


def merge_variables(
    existing: Optional[List[Dict[str, Any]]],
    incoming: Optional[List[Dict[str, Any]]],
) -> Optional[List[Dict[str, Any]]]:
    """Union two variable lists by ``key``; the existing value always wins.

    Variables without a ``key`` cannot be identified and are dropped.
    """
    if existing is None and incoming is None:
        return None

    by_key: Dict[str, Dict[str, Any]] = {}
    for variable in list(existing or []) + list(incoming or []):
        key = variable.get('key') if isinstance(variable, dict) else None
        if not key:
            logger.debug(f"Dropping variable without key: {variable!r}")
            continue
        if key not in by_key:
            by_key[key] = copy.deepcopy(variable)
    return list(by_key.values())


def is_empty_auth(auth: Optional[Any]) -> bool:
    """True for None, empty sequences and mappings without keys."""
    if auth is None:
        return True
    if isinstance(auth, (list, tuple, dict, str)):
        return len(auth) == 0
    return False


def merge_auth(incoming: Optional[Any], existing: Optional[Any]) -> Optional[Any]:
    """Pick the auth config to keep, preferring a non-empty existing one.

    Args:
        incoming: Freshly generated auth (may be None or empty)
        existing: Persisted auth (may be None or empty)

    Returns:
        Copy of the existing auth if non-empty, else of the incoming auth if
        non-empty, else None
    """
    if not is_empty_auth(existing):
        return copy.deepcopy(existing)
    if not is_empty_auth(incoming):
        return copy.deepcopy(incoming)
    return None
