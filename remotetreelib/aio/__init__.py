"""Asynchronous implementation of RemoteTreeLib.

This package contains the native async/await traversal engine, the
paginated page source contract and the high-level listing API.
"""

# Core abstractions
from .core import (
    Entry,
    Permission,
    Page,
    PagePair,
    RemotePageSource,
    BranchStatus,
    TraversalState,
    RemoteTreeTraverser,
)

# Page sources
from .adapters import MemoryDrive

# Root lookup policies
from .error_policies import (
    ErrorPolicy,
    SkipMissingRootsPolicy,
    CollectMissingRootsPolicy,
    FailFastPolicy,
)

# High-level API
from .api import (
    RemoteLister,
    list_remote,
    list_matches,
    list_shared,
)

# Configuration (re-exported from _common)
from .._common import (
    TypeMask,
    ListOptions,
    PresentationOptions,
    MatchPredicate,
    build_match_predicate,
    sort_keys_from_meta,
)

__all__ = [
    # Core abstractions
    'Entry',
    'Permission',
    'Page',
    'PagePair',
    'RemotePageSource',
    'BranchStatus',
    'TraversalState',
    'RemoteTreeTraverser',
    # Page sources
    'MemoryDrive',
    # Policies
    'ErrorPolicy',
    'SkipMissingRootsPolicy',
    'CollectMissingRootsPolicy',
    'FailFastPolicy',
    # High-level API
    'RemoteLister',
    'list_remote',
    'list_matches',
    'list_shared',
    # Configuration
    'TypeMask',
    'ListOptions',
    'PresentationOptions',
    'MatchPredicate',
    'build_match_predicate',
    'sort_keys_from_meta',
]
