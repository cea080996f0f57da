"""Exception types raised by RemoteTreeLib.

A fetch error aborts only the branch it happened in. A missing root
locator is tolerated by the default lookup policy, while any other
lookup failure is fatal for the whole listing.
"""

from typing import Optional


class RemoteTreeError(Exception):
    """Base class for all RemoteTreeLib errors."""


class FetchError(RemoteTreeError):
    """A page fetch from the remote source failed.

    Attributes:
        query: Query expression that was being paged, if known
        cause: Original exception raised by the source
    """

    def __init__(self, message: str, query: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.query = query
        self.cause = cause


class PathNotFoundError(RemoteTreeError):
    """A root locator does not resolve to any remote entry."""

    def __init__(self, locator: str):
        super().__init__(f"{locator!r} cannot be found remotely")
        self.locator = locator


class IllogicalStateError(RemoteTreeError):
    """Lookup failed for a reason other than the entry being absent."""


class QuerySyntaxError(RemoteTreeError, ValueError):
    """A query expression could not be parsed."""

    def __init__(self, message: str, position: int = -1):
        if position >= 0:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position
