"""Data models for CLI operations.

This module defines the data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Config issues, unreadable or unconvertible specifications
    - AUTH_ERROR (3): API key missing or rejected
    - NETWORK_ERROR (4): Postman API unreachable or returned a failure

    Example:
        >>> sys.exit(ExitCode.SUCCESS)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class SyncSummary:
    """Summary of one sync run for display to the user.

    Attributes:
        strategy: "replace" or "merge"
        folder_count: Folders in the payload (all depths)
        request_count: Requests in the payload (all depths)
        preserved_count: Generated nodes that received persisted metadata
        removed_folders: Folder keys no longer generated
        removed_requests: Request keys no longer generated
        created: True if the collection was created rather than replaced
        dry_run: True if nothing was written
    """
    strategy: str = "replace"
    folder_count: int = 0
    request_count: int = 0
    preserved_count: int = 0
    removed_folders: List[str] = field(default_factory=list)
    removed_requests: List[str] = field(default_factory=list)
    created: bool = False
    dry_run: bool = False
    collection_uid: Optional[str] = None
