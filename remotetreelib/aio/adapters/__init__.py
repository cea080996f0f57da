"""Page sources for specific remote stores.

This module contains sources that bridge a concrete store to the
paginated RemotePageSource contract.
"""

from .memory import MemoryDrive

__all__ = [
    'MemoryDrive',
]
