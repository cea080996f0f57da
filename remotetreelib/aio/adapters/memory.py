"""In-memory remote page source.

MemoryDrive keeps a whole remote store in a dict and answers listing
queries by parsing and evaluating them, paginating results by offset
tokens. It is useful for tests, demos and offline tooling built on the
traversal engine.
"""

import asyncio
import itertools
from datetime import datetime
from functools import lru_cache
from typing import Dict, List, Optional

from ..._common.paths import REMOTE_ROOT_NAME, ROOT_ALIAS
from ..._common.query import QueryNode, evaluate, parse_query
from ...errors import PathNotFoundError
from ..core import Entry, Page, Permission, RemotePageSource


@lru_cache(maxsize=256)
def _parsed(query: str) -> QueryNode:
    return parse_query(query)


class MemoryDrive(RemotePageSource):
    """Remote store held entirely in memory.

    Example:
        >>> drive = MemoryDrive()
        >>> docs = drive.add_folder("root", "docs")
        >>> drive.add_file(docs.id, "report.csv", size=120)
    """

    def __init__(self, page_delay: float = 0.0, max_concurrent: int = 10, root_id: str = ROOT_ALIAS):
        """Initialize an empty store holding only the root folder.

        Args:
            page_delay: Seconds to sleep before answering each page
            max_concurrent: Maximum concurrent page requests
            root_id: Canonical id of the root folder; the ``root`` alias
                always resolves to it
        """
        super().__init__(max_concurrent=max_concurrent)
        self.page_delay = page_delay
        self.entries: Dict[str, Entry] = {}
        self.team_drives: List[Entry] = []
        self.queries: List[str] = []
        self._failures: Dict[str, BaseException] = {}
        self._ids = itertools.count(1)
        self.root = Entry(id=root_id, name=REMOTE_ROOT_NAME, is_dir=True,
                          owner_names=["me"], user_permission=Permission("owner"))
        self.entries[self.root.id] = self.root

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids):04d}"

    def add(self, entry: Entry) -> Entry:
        """Store a fully built entry, replacing any entry with the same id."""
        self.entries[entry.id] = entry
        return entry

    def _parent(self, parent_id: str) -> str:
        return self.root.id if parent_id == ROOT_ALIAS else parent_id

    def add_folder(self, parent_id: str, name: str, **attrs) -> Entry:
        """Add a directory under ``parent_id``."""
        attrs.setdefault("id", self._next_id("d"))
        attrs.setdefault("mod_time", datetime(2015, 1, 1))
        return self.add(Entry(name=name, is_dir=True, parents=[self._parent(parent_id)], **attrs))

    def add_file(self, parent_id: str, name: str, **attrs) -> Entry:
        """Add a file under ``parent_id``."""
        attrs.setdefault("id", self._next_id("f"))
        attrs.setdefault("mod_time", datetime(2015, 1, 1))
        return self.add(Entry(name=name, is_dir=False, parents=[self._parent(parent_id)], **attrs))

    def add_team_drive(self, name: str, **attrs) -> Entry:
        attrs.setdefault("id", self._next_id("t"))
        entry = Entry(name=name, is_dir=True, **attrs)
        self.team_drives.append(entry)
        self.entries[entry.id] = entry
        return entry

    def trash(self, entry_id: str) -> Entry:
        entry = self.entries[entry_id]
        entry.trashed = True
        return entry

    def inject_failure(self, parent_id: str, error: BaseException) -> None:
        """Make every listing of ``parent_id``'s children fail with ``error``."""
        self.inject_query_failure(f"'{self._parent(parent_id)}' in parents", error)

    def inject_query_failure(self, fragment: str, error: BaseException) -> None:
        """Make every page request whose query contains ``fragment`` fail."""
        self._failures[fragment] = error

    def _check_failures(self, query: str) -> None:
        for fragment, error in self._failures.items():
            if fragment in query:
                raise error

    def _slice_page(self, candidates: List[Entry], page_size: int, page_token: Optional[str]) -> Page:
        offset = int(page_token) if page_token else 0
        batch = candidates[offset:offset + page_size]
        next_offset = offset + page_size
        next_token = str(next_offset) if next_offset < len(candidates) else None
        return Page(entries=batch, next_page_token=next_token)

    async def fetch_page(self, query: str, page_size: int, page_token: Optional[str]) -> Page:
        self.queries.append(query)
        if self.page_delay:
            await asyncio.sleep(self.page_delay)
        else:
            await asyncio.sleep(0)
        self._check_failures(query)
        node = _parsed(query)
        candidates = [
            entry for entry in self.entries.values()
            if entry is not self.root and evaluate(node, entry)
        ]
        return self._slice_page(candidates, page_size, page_token)

    async def fetch_team_drives_page(self, query: str, page_size: int, page_token: Optional[str]) -> Page:
        # Team drives have no parents, so the listing is not narrowed by query
        self.queries.append(query)
        self._check_failures(query)
        await asyncio.sleep(self.page_delay)
        return self._slice_page(list(self.team_drives), page_size, page_token)

    async def find_by_id(self, entry_id: str) -> Entry:
        await asyncio.sleep(0)
        if entry_id == ROOT_ALIAS:
            return self.root
        try:
            return self.entries[entry_id]
        except KeyError:
            raise PathNotFoundError(entry_id) from None

    def _define_capabilities(self):
        return super()._define_capabilities() | {'team_drives'}

    async def get_stats(self) -> dict:
        stats = await super().get_stats()
        stats.update({
            'entries': len(self.entries),
            'team_drives': len(self.team_drives),
            'queries': len(self.queries),
        })
        return stats
