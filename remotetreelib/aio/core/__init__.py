"""Core abstractions for async remote traversal.

This module defines the entry model, the paginated page source contract
and the depth-bounded traversal engine built on top of them.
"""

from .entry import Entry, Permission
from .source import Page, PagePair, RemotePageSource
from .traverser import BranchStatus, TraversalState, RemoteTreeTraverser

__all__ = [
    # Entries
    'Entry',
    'Permission',
    # Page source
    'Page',
    'PagePair',
    'RemotePageSource',
    # Traversal
    'BranchStatus',
    'TraversalState',
    'RemoteTreeTraverser',
]
