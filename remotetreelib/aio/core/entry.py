"""Remote entry model.

An Entry is one file or directory as reported by the remote listing
API. Entries are owned by the page source; the traversal engine only
reads them, apart from blanking root-like names on its own copy.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

from ..._common.query import FOLDER_MIME_TYPE


@dataclass(frozen=True)
class Permission:
    """The caller's access role on an entry (``owner``, ``writer``, ...)."""
    role: str


@dataclass
class Entry:
    """A remote file or directory."""

    id: str
    name: str
    is_dir: bool = False
    shared: bool = False
    size: int = 0
    mod_time: Optional[datetime] = None
    version: int = 0
    owner_names: List[str] = field(default_factory=list)
    user_permission: Optional[Permission] = None
    parents: List[str] = field(default_factory=list)
    mime_type: str = "application/octet-stream"
    trashed: bool = False
    starred: bool = False

    def __post_init__(self):
        if self.is_dir:
            self.mime_type = FOLDER_MIME_TYPE
        elif self.mime_type == FOLDER_MIME_TYPE:
            self.is_dir = True

    @property
    def parent_id(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    def is_leaf(self) -> bool:
        return not self.is_dir

    def renamed(self, name: str) -> "Entry":
        """Copy of this entry with a different display name."""
        return replace(self, name=name)

    def __repr__(self) -> str:
        kind = "dir" if self.is_dir else "file"
        return f"Entry({self.id!r}, {self.name!r}, {kind})"
