"""Remote page source abstraction.

Defines the contract between the traversal engine and a paginated
remote listing API. A listing is delivered as a PagePair: an entry
channel and an error channel populated by a producer task that walks
page tokens until the listing is exhausted.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Set

from ..._common.config import DEFAULT_PAGE_SIZE
from ..._common.match import MatchPredicate, custom_quote
from ..._common.paths import ROOT_ALIAS, is_hidden, root_like
from ..._common.query import join_expression
from ...errors import FetchError, PathNotFoundError
from .entry import Entry

logger = logging.getLogger(__name__)

_CLOSED = object()


@dataclass
class Page:
    """One batch of entries and the token for the next batch, if any."""
    entries: List[Entry] = field(default_factory=list)
    next_page_token: Optional[str] = None


class PagePair:
    """Entry channel plus error channel for one remote listing.

    The producer calls ``send`` for each entry, then exactly one of
    ``close`` (natural completion) or ``fail`` (fatal error). The consumer
    pulls with ``next_entry`` or ``async for``. Both channels are checked
    on every pull and a signalled error wins over entries still queued,
    so consumption stops on the first error.

    Use as an async context manager to cancel the producer when the
    consumer stops early.
    """

    def __init__(self, maxsize: int = 0, query: Optional[str] = None):
        """Initialize empty channels.

        Args:
            maxsize: Bound of the entry channel, 0 for unbounded
            query: Query being paged, kept for error reports
        """
        self.query = query
        self._entries: asyncio.Queue = asyncio.Queue(maxsize)
        self._errors: asyncio.Queue = asyncio.Queue()
        self._finished = False
        self._producer: Optional[asyncio.Task] = None

    # Producer side

    async def send(self, entry: Entry) -> None:
        await self._entries.put(entry)

    def fail(self, error: BaseException) -> None:
        if not isinstance(error, FetchError):
            error = FetchError(str(error), query=self.query, cause=error)
        self._errors.put_nowait(error)

    async def close(self) -> None:
        await self._entries.put(_CLOSED)

    def attach(self, producer: asyncio.Task) -> None:
        self._producer = producer

    # Consumer side

    def _pending_error(self) -> Optional[FetchError]:
        if self._errors.empty():
            return None
        return self._errors.get_nowait()

    def _accept(self, item: Any) -> Optional[Entry]:
        if item is _CLOSED:
            self._finished = True
            return None
        return item

    async def next_entry(self) -> Optional[Entry]:
        """Pull the next entry.

        Returns:
            The next Entry, or None once the entry channel is closed

        Raises:
            FetchError: As soon as the producer signalled a failure
        """
        if self._finished:
            return None

        error = self._pending_error()
        if error is not None:
            self._finished = True
            raise error
        if not self._entries.empty():
            return self._accept(self._entries.get_nowait())

        entry_get = asyncio.ensure_future(self._entries.get())
        error_get = asyncio.ensure_future(self._errors.get())
        done, pending = await asyncio.wait(
            {entry_get, error_get}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

        if error_get in done:
            self._finished = True
            raise error_get.result()
        return self._accept(entry_get.result())

    def __aiter__(self):
        return self

    async def __anext__(self) -> Entry:
        entry = await self.next_entry()
        if entry is None:
            raise StopAsyncIteration
        return entry

    async def aclose(self) -> None:
        """Stop the producer if it is still running."""
        self._finished = True
        producer = self._producer
        if producer is not None and not producer.done():
            producer.cancel()
            await asyncio.gather(producer, return_exceptions=True)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


FetchPage = Callable[[str, int, Optional[str]], Awaitable[Page]]


class RemotePageSource(ABC):
    """Abstract base class for paginated remote listing APIs.

    Subclasses implement ``fetch_page`` for one request and
    ``find_by_id``; paging, hidden-entry filtering and the PagePair
    protocol are provided here. Retries, if any, belong in ``fetch_page``.
    """

    def __init__(self, max_concurrent: int = 10):
        """Initialize source with concurrency control.

        Args:
            max_concurrent: Maximum concurrent page requests
        """
        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self.fetch_count = 0
        self._capabilities = self._define_capabilities()

    @abstractmethod
    async def fetch_page(self, query: str, page_size: int, page_token: Optional[str]) -> Page:
        """Request one page of entries matching ``query``.

        Args:
            query: Remote query expression
            page_size: Maximum entries in the page
            page_token: Token from the previous page, None for the first

        Returns:
            The page
        """
        pass

    @abstractmethod
    async def find_by_id(self, entry_id: str) -> Entry:
        """Look up an entry by its remote id.

        Raises:
            PathNotFoundError: If no entry has that id
        """
        pass

    async def fetch_team_drives_page(self, query: str, page_size: int, page_token: Optional[str]) -> Page:
        """Request one page of team drives. Optional capability."""
        raise NotImplementedError(f"{self.__class__.__name__} does not list team drives")

    def list_page(self, query: str, page_size: int = DEFAULT_PAGE_SIZE, include_hidden: bool = False) -> PagePair:
        """Start paging through the entries matching ``query``.

        Must be called from a running event loop.

        Args:
            query: Remote query expression
            page_size: Entries per request
            include_hidden: Keep dot-files

        Returns:
            PagePair fed by a background producer task
        """
        return self._start(self.fetch_page, query, page_size, include_hidden)

    def list_team_drives(self, query: str, page_size: int = DEFAULT_PAGE_SIZE, include_hidden: bool = False) -> PagePair:
        """Like ``list_page`` but over team drives."""
        return self._start(self.fetch_team_drives_page, query, page_size, include_hidden)

    def _start(self, fetch: FetchPage, query: str, page_size: int, include_hidden: bool) -> PagePair:
        pair = PagePair(maxsize=page_size, query=query)
        logger.debug("listing %r (page size %d)", query, page_size)
        producer = asyncio.get_running_loop().create_task(
            self._paginate(pair, fetch, query, page_size, include_hidden)
        )
        pair.attach(producer)
        return pair

    async def _paginate(
        self,
        pair: PagePair,
        fetch: FetchPage,
        query: str,
        page_size: int,
        include_hidden: bool,
    ) -> None:
        token = None
        try:
            while True:
                async with self.semaphore:
                    page = await fetch(query, page_size, token)
                self.fetch_count += 1
                for entry in page.entries:
                    if entry is None or is_hidden(entry.name, include_hidden):
                        continue
                    await pair.send(entry)
                token = page.next_page_token
                if not token:
                    break
        except Exception as exc:
            logger.debug("listing %r failed: %s", query, exc)
            pair.fail(exc)
            return
        await pair.close()

    async def find_by_path(self, path: str) -> Entry:
        """Resolve a slash separated path from the root, one segment at a time.

        Raises:
            PathNotFoundError: If any segment is missing
            FetchError: If a lookup request fails
        """
        current = await self.find_by_id(ROOT_ALIAS)
        if root_like(path):
            return current
        for segment in (s for s in path.split("/") if s):
            query = (
                f"{custom_quote(current.id)} in parents and "
                f"title = {custom_quote(segment)} and trashed=false"
            )
            async with self.list_page(query, page_size=1, include_hidden=True) as pages:
                found = await pages.next_entry()
            if found is None:
                raise PathNotFoundError(path)
            current = found
        return current

    async def find_matches(self, predicate: MatchPredicate, page_size: int = DEFAULT_PAGE_SIZE) -> PagePair:
        """Page through the children of ``predicate.dir_path`` matching it."""
        parent = await self.find_by_path(predicate.dir_path)
        base = (
            f"{custom_quote(parent.id)} in parents and "
            f"trashed={'true' if predicate.in_trash else 'false'}"
        )
        return self.list_page(join_expression(base, predicate), page_size, include_hidden=True)

    def find_shared_by_path(self, path: str, page_size: int = DEFAULT_PAGE_SIZE) -> PagePair:
        """Page through entries shared with the caller.

        A non root-like path narrows the listing to entries titled like
        its last segment.
        """
        query = "sharedWithMe=true"
        segments = [s for s in path.split("/") if s]
        if segments and not root_like(path):
            query = f"title = {custom_quote(segments[-1])} and {query}"
        return self.list_page(query, page_size, include_hidden=False)

    def supports_capability(self, capability: str) -> bool:
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define source capabilities.

        Override in subclasses to declare supported features.
        """
        return {'list_page', 'find_by_id', 'find_by_path', 'find_matches', 'find_shared'}

    async def get_stats(self) -> dict:
        """Get source statistics."""
        return {
            'max_concurrent': self.max_concurrent,
            'fetch_count': self.fetch_count,
        }

    async def close(self):
        """Clean up source resources.

        Override if the source holds connections.
        """
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
