"""High-level async API for RemoteTreeLib.

RemoteLister turns root locators into traversal states and hands them
to the traversal engine. Three entry points are provided: listing by
path or id, listing by title match, and listing what is shared with
the caller. Module-level functions wrap them for one-shot use.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .._common.config import ListOptions, trashed
from .._common.match import (
    JoinOperator,
    MatchClause,
    MatchMode,
    MatchPredicate,
    build_match_predicate,
)
from .._common.paths import normalize_head_path, parent_path, remote_root_like
from ..console import (
    BusyIndicator,
    ConsolePrompter,
    NullIndicator,
    OutputSink,
    Prompter,
)
from ..errors import FetchError
from .core import Entry, RemotePageSource, RemoteTreeTraverser, TraversalState
from .error_policies import ErrorPolicy, SkipMissingRootsPolicy

logger = logging.getLogger(__name__)

RootList = List[Tuple[str, Entry]]


class RemoteLister:
    """Lists remote trees according to a set of ListOptions.

    Example:
        >>> lister = RemoteLister(drive, ListOptions(sources=["/docs"], depth=2))
        >>> ok = await lister.list()
    """

    def __init__(
        self,
        source: RemotePageSource,
        options: ListOptions,
        sink: Optional[OutputSink] = None,
        indicator: Optional[BusyIndicator] = None,
        prompter: Optional[Prompter] = None,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """Initialize the lister.

        Args:
            source: Remote page source
            options: What to list and how
            sink: Output sink, stdout/stderr by default
            indicator: Busy indicator, none by default
            prompter: Continuation prompter, the terminal by default
            error_policy: How root lookup errors are handled
        """
        self.source = source
        self.options = options
        self.sink = sink or OutputSink()
        self.indicator = indicator or NullIndicator()
        self.prompter = prompter or ConsolePrompter()
        self.error_policy = error_policy or SkipMissingRootsPolicy(self.sink)
        self.traverser = RemoteTreeTraverser(
            source,
            sink=self.sink,
            indicator=self.indicator,
            prompter=self.prompter,
            page_size=options.page_size,
            hidden=options.hidden,
        )

    def _state(
        self,
        entry: Entry,
        head_path: str,
        predicate: Optional[MatchPredicate] = None,
        sorted_: bool = True,
    ) -> TraversalState:
        if predicate is not None and predicate.is_empty():
            predicate = None
        return TraversalState(
            entry=entry,
            head_path=head_path,
            depth=self.options.depth,
            mask=self.options.type_mask,
            in_trash=self.options.in_trash,
            explicit_no_prompt=not self.options.can_prompt(),
            sort_keys=tuple(self.options.sort_keys) if sorted_ else (),
            match_predicate=predicate,
        )

    def _sources(self) -> List[str]:
        return list(self.options.sources) or ["/"]

    async def resolve_roots(self, by_id: bool = False) -> RootList:
        """Resolve every root locator to ``(head path, entry)``.

        Lookup errors go to the error policy, which skips the root or
        aborts the listing.
        """
        resolve = self.source.find_by_id if by_id else self.source.find_by_path
        roots = []
        for i, locator in enumerate(self._sources()):
            self.sink.debugf("resolving root #%d %r", i, locator)
            try:
                entry = await resolve(locator)
            except Exception as exc:
                self.error_policy.handle(exc, locator)
                continue

            head = entry.id if by_id else parent_path(locator)
            head = normalize_head_path(head)
            if remote_root_like(entry.name):
                entry = entry.renamed("")
            roots.append((head, entry))
        return roots

    async def _traverse_all(self, roots: RootList, predicate: Optional[MatchPredicate] = None,
                            sorted_: bool = True) -> bool:
        for head, entry in roots:
            status = await self.traverser.traverse(self._state(entry, head, predicate, sorted_))
            if not status:
                logger.debug("stopping after %s branch %r", status.value, entry.name)
                return False
        return True

    async def list(self, by_id: bool = False) -> bool:
        """List each root locator as a path (or an id when ``by_id``).

        Returns:
            True if every root was traversed successfully; missing roots
            skipped by the error policy do not count as failures

        Raises:
            IllogicalStateError: If a root lookup fails for a reason other
                than the root not existing
        """
        predicate = build_match_predicate(
            self.options.meta,
            exact_match=True,
            in_trash=self.options.in_trash,
            dir_path=self.options.path,
        )
        roots = await self.resolve_roots(by_id)

        self.indicator.play()
        try:
            return await self._traverse_all(roots, predicate)
        finally:
            self.indicator.stop()

    async def list_matches(self) -> bool:
        """List entries under ``options.path`` whose titles match the sources.

        Returns:
            True unless a matched branch failed or was declined

        Raises:
            FetchError: If the match listing itself fails
        """
        in_trash = self.options.in_trash or trashed(self.options.type_mask)
        predicate = build_match_predicate(
            self.options.meta,
            exact_match=self.options.exact_title,
            in_trash=in_trash,
            dir_path=self.options.path,
        )
        predicate.title_clauses.append(MatchClause(
            MatchMode.EQUALS if self.options.exact_title else MatchMode.LIKE,
            list(self.options.sources),
            restrict_to_trash=in_trash,
            joiner=JoinOperator.OR,
        ))

        count = 0
        ok = True
        self.indicator.play()
        try:
            pages = await self.source.find_matches(predicate, self.options.page_size)
            async with pages:
                async for match in pages:
                    count += 1
                    status = await self.traverser.traverse(self._state(match, self.options.path))
                    if not status:
                        ok = False
                        break
        finally:
            self.indicator.stop()

        if count < 1:
            self.sink.log_errln("no matches found!")
        return ok

    async def shared_roots(self, locator: str) -> RootList:
        """Collect the shared entries for one locator.

        Raises:
            FetchError: After logging it, if the shared listing fails
        """
        head = normalize_head_path(parent_path(locator))
        roots = []
        try:
            async with self.source.find_shared_by_path(locator, self.options.page_size) as pages:
                async for entry in pages:
                    if remote_root_like(entry.name):
                        entry = entry.renamed("")
                    roots.append((head, entry))
        except FetchError as exc:
            self.sink.log_errf("%s: '%s'\n", exc, locator)
            raise
        return roots

    async def list_shared(self) -> bool:
        """List the entries shared with the caller under each locator.

        Returns:
            True if every shared entry was traversed successfully
        """
        self.indicator.play()
        try:
            roots = []
            for locator in self._sources():
                roots.extend(await self.shared_roots(locator))
            return await self._traverse_all(roots, sorted_=False)
        finally:
            self.indicator.stop()


async def list_remote(
    source: RemotePageSource,
    sources: Sequence[str],
    by_id: bool = False,
    sink: Optional[OutputSink] = None,
    prompter: Optional[Prompter] = None,
    **options,
) -> bool:
    """List remote paths (or ids) in one call.

    Args:
        source: Remote page source
        sources: Root paths or ids
        by_id: Treat ``sources`` as ids
        sink: Output sink
        prompter: Continuation prompter
        **options: Remaining ListOptions fields, e.g. ``depth=2``

    Returns:
        True if the listing succeeded

    Example:
        >>> await list_remote(drive, ["/docs"], depth=-1, no_prompt=True)
    """
    lister = RemoteLister(source, ListOptions(sources=list(sources), **options),
                          sink=sink, prompter=prompter)
    return await lister.list(by_id=by_id)


async def list_matches(
    source: RemotePageSource,
    titles: Sequence[str],
    sink: Optional[OutputSink] = None,
    prompter: Optional[Prompter] = None,
    **options,
) -> bool:
    """List entries whose titles match any of ``titles``."""
    lister = RemoteLister(source, ListOptions(sources=list(titles), **options),
                          sink=sink, prompter=prompter)
    return await lister.list_matches()


async def list_shared(
    source: RemotePageSource,
    sources: Sequence[str] = ("/",),
    sink: Optional[OutputSink] = None,
    prompter: Optional[Prompter] = None,
    **options,
) -> bool:
    """List entries shared with the caller."""
    lister = RemoteLister(source, ListOptions(sources=list(sources), **options),
                          sink=sink, prompter=prompter)
    return await lister.list_shared()
