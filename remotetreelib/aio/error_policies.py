"""
Root locator lookup policies for RemoteTreeLib.

When a listing resolves its root locators, a missing locator and a
failed lookup are handed to a policy, which either skips that root
(returns None) or raises to abort the whole listing.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..console import OutputSink
from ..errors import IllogicalStateError, PathNotFoundError


class ErrorPolicy(ABC):
    """
    Base class for root lookup policies.
    """

    @abstractmethod
    def handle(self, error: Exception, locator: str) -> None:
        """
        Handle an error raised while resolving a root locator.

        Args:
            error: The exception raised by the page source
            locator: Path or id being resolved

        Returns:
            None to skip this root and continue with the others

        Raises:
            Exception: To abort the whole listing
        """
        pass


class SkipMissingRootsPolicy(ErrorPolicy):
    """
    Warn about missing roots and keep going; any other failure is fatal.

    This is the default: one mistyped path does not hide the listing of
    the other roots, but an unreachable remote does stop everything.
    """

    def __init__(self, sink: Optional[OutputSink] = None):
        self.sink = sink or OutputSink()
        self.missing: List[str] = []

    def handle(self, error: Exception, locator: str) -> None:
        if isinstance(error, PathNotFoundError):
            self.missing.append(locator)
            self.sink.log_errf("'%s' cannot be found remotely\n", locator)
            return None
        raise IllogicalStateError(f"{error}: '{locator}'") from error


class CollectMissingRootsPolicy(SkipMissingRootsPolicy):
    """
    Like SkipMissingRootsPolicy but without the warning, for batch callers
    that report missing roots themselves.
    """

    def handle(self, error: Exception, locator: str) -> None:
        if isinstance(error, PathNotFoundError):
            self.missing.append(locator)
            return None
        raise IllogicalStateError(f"{error}: '{locator}'") from error


class FailFastPolicy(ErrorPolicy):
    """
    Any lookup error, including a missing root, aborts the listing.
    """

    def handle(self, error: Exception, locator: str) -> None:
        raise error
