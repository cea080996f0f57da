"""Depth-bounded traversal of a remote directory tree.

The traverser walks depth-first: each directory's listing is drained
completely, sorted, rendered, and only then are its child directories
visited in sorted order, each finishing its whole subtree before the
next sibling starts.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from ..._common.config import (
    DEFAULT_PAGE_SIZE,
    PresentationOptions,
    TypeMask,
    folders_only,
    non_folders_only,
    team_drives,
    trashed,
)
from ..._common.match import MatchPredicate
from ..._common.paths import is_hidden, join_head_path
from ..._common.query import build_expression, join_expression
from ..._common.sorting import sort_entries
from ...console import BusyIndicator, NeverPrompter, NullIndicator, OutputSink, Prompter
from ...errors import FetchError
from .entry import Entry
from .source import PagePair, RemotePageSource

logger = logging.getLogger(__name__)


class BranchStatus(Enum):
    """Outcome of traversing one branch.

    Only SUCCESS is truthy. DECLINED means the user chose to stop; it
    ends the traversal like a failure but is not an error.
    """
    SUCCESS = "success"
    FAILED = "failed"
    DECLINED = "declined"

    def __bool__(self) -> bool:
        return self is BranchStatus.SUCCESS


@dataclass(frozen=True)
class TraversalState:
    """Everything one traversal step needs.

    A fresh state is built for every recursive step; states are never
    shared or mutated.

    Attributes:
        entry: Entry being visited
        head_path: Display path of the entry's parent
        depth: Levels left to descend, negative for unbounded
        mask: Type mask of the traversal
        in_trash: Browsing the trash
        explicit_no_prompt: Never prompt in this branch
        sort_keys: Sort keys applied to each directory listing
        match_predicate: Extra predicate applied to children
        starting_root: Entry is where the traversal started
    """
    entry: Entry
    head_path: str = ""
    depth: int = -1
    mask: TypeMask = TypeMask.NONE
    in_trash: bool = False
    explicit_no_prompt: bool = False
    sort_keys: Tuple[str, ...] = ()
    match_predicate: Optional[MatchPredicate] = None
    starting_root: bool = True

    def descend(self, child: Entry, head_path: str, depth: int) -> "TraversalState":
        """State for a child directory, inheriting everything else."""
        return replace(self, entry=child, head_path=head_path, depth=depth,
                       starting_root=False)

    @property
    def browsing_trash(self) -> bool:
        return self.in_trash or trashed(self.mask)


class RemoteTreeTraverser:
    """Walks a remote tree, rendering matched entries as it goes.

    Example:
        >>> traverser = RemoteTreeTraverser(drive, OutputSink())
        >>> status = await traverser.traverse(TraversalState(root, depth=2))
    """

    def __init__(
        self,
        source: RemotePageSource,
        sink: Optional[OutputSink] = None,
        indicator: Optional[BusyIndicator] = None,
        prompter: Optional[Prompter] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        hidden: bool = False,
        team_drives: bool = False,
    ):
        """Initialize traverser with its collaborators.

        Args:
            source: Remote page source to list directories with
            sink: Where rendered lines go
            indicator: Busy indicator paused around prompts
            prompter: Asks whether to continue into the next level
            page_size: Entries requested per page
            hidden: Include dot-files
            team_drives: List team drives at the starting root, as the
                TEAM_DRIVES mask bit also does
        """
        self.source = source
        self.sink = sink or OutputSink()
        self.indicator = indicator or NullIndicator()
        self.prompter = prompter or NeverPrompter()
        self.page_size = page_size
        self.hidden = hidden
        self.team_drives = team_drives

    async def traverse(self, state: TraversalState) -> BranchStatus:
        """Traverse the branch rooted at ``state.entry``.

        Args:
            state: Traversal state of the branch root

        Returns:
            SUCCESS, FAILED on a fetch error or an empty trash listing,
            DECLINED when the user declined to continue
        """
        opt = PresentationOptions.from_mask(state.mask, state.head_path)
        entry = state.entry

        if entry.is_leaf():
            self.sink.render(entry, opt)
            return BranchStatus.SUCCESS

        opt.parent = join_head_path(opt.parent, entry.name)

        # A depth of < 0 means traverse as deep as the tree goes
        depth = state.depth
        if depth == 0:
            return BranchStatus.SUCCESS
        if depth > 0:
            depth -= 1

        self.indicator.pause()
        can_prompt = not state.explicit_no_prompt and self.prompter.can_prompt()
        self.indicator.play()

        try:
            collected = await self._collect(entry, state)
        except FetchError as exc:
            self.sink.log_errf("%s\n", exc)
            return BranchStatus.FAILED

        if state.sort_keys:
            collected = sort_entries(collected, *state.sort_keys)

        children, rendered = self._render_level(collected, state.mask, opt)

        if state.browsing_trash:
            return BranchStatus.SUCCESS if rendered >= 1 else BranchStatus.FAILED

        # Prompt once per level, only after the whole level was listed,
        # so asynchronously arriving pages never trigger a prompt.
        if depth != 0 and children and can_prompt:
            self.indicator.pause()
            try:
                proceed = self.prompter.confirm_continue()
            finally:
                self.indicator.play()
            if not proceed:
                return BranchStatus.DECLINED

        for child in children:
            status = await self.traverse(state.descend(child, opt.parent, depth))
            if not status:
                return status
        return BranchStatus.SUCCESS

    def _open_listing(self, entry: Entry, state: TraversalState) -> PagePair:
        query = join_expression(
            build_expression(entry.id, state.mask, state.in_trash),
            state.match_predicate,
        )
        logger.debug("listing children of %s (%s)", entry.id, query)
        if state.starting_root and (self.team_drives or team_drives(state.mask)):
            return self.source.list_team_drives(query, self.page_size, self.hidden)
        return self.source.list_page(query, self.page_size, self.hidden)

    async def _collect(self, entry: Entry, state: TraversalState) -> List[Entry]:
        """Drain a directory's whole listing before anything is sorted or visited."""
        collected = []
        async with self._open_listing(entry, state) as pages:
            async for child in pages:
                if not is_hidden(child.name, self.hidden):
                    collected.append(child)
        return collected

    def _render_level(self, collected: List[Entry], mask: int, opt: PresentationOptions):
        """Render one level and pick out its directories, keeping order.

        Returns:
            Tuple of (child directories, number of rendered entries)
        """
        skip_dirs = non_folders_only(mask)
        skip_files = folders_only(mask)

        children = []
        rendered = 0
        for child in collected:
            if child.is_dir:
                children.append(child)
                # Still descended into, just not shown
                if skip_dirs:
                    continue
            elif skip_files:
                continue
            self.sink.render(child, opt)
            rendered += 1
        return children, rendered
