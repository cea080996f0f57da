"""RemoteTreeLib - Remote Tree Traversal and Query Library.

RemoteTreeLib walks hierarchical file stores that are only reachable
through a paginated, asynchronous listing API. It bounds traversal
depth, filters with compound match predicates, sorts each directory
level and streams matched entries as formatted lines.

    from remotetreelib.aio import RemoteLister, ListOptions
"""

__version__ = "0.1.0"

from . import errors
from . import aio

__all__ = [
    "__version__",
    "errors",
    "aio",
]
