"""Configuration system for RemoteTreeLib.

This module defines how callers describe a listing: which roots to
visit, how deep to go, which entries to show and how to present them.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict, List, Optional

# Keys understood in the generic ``meta`` option map.
SKIP_MIME_KEY = "skip-mime"
MATCH_MIME_KEY = "match-mime"
EXACT_TITLE_KEY = "exact-title"
EXACT_OWNER_KEY = "exact-owner"
MATCH_OWNER_KEY = "match-owner"
EXCLUDE_OWNER_KEY = "exclude-owner"
SORT_KEY = "sort"

DEFAULT_PAGE_SIZE = 100


class TypeMask(IntFlag):
    """Display and filter flags bundled into one value.

    Bit positions are stable so masks can be stored as plain integers.
    """
    NONE = 0
    MINIMAL = 1 << 0            # Path only
    DISK_USAGE_ONLY = 1 << 1    # Size and path only, wins over MINIMAL
    OWNERS = 1 << 2             # Append owner names
    VERSION = 1 << 3            # Append version number
    SHARED = 1 << 4             # Only entries shared with the caller
    IN_TRASH = 1 << 5           # Browse the trash
    STARRED = 1 << 6            # Only starred entries
    TEAM_DRIVES = 1 << 7        # List team drives instead of files
    FOLDER = 1 << 8             # Directories only
    NON_FOLDER = 1 << 9         # Non-directories only


def is_minimal(mask: int) -> bool:
    return bool(mask & TypeMask.MINIMAL)


def disk_usage_only(mask: int) -> bool:
    return bool(mask & TypeMask.DISK_USAGE_ONLY)


def owners(mask: int) -> bool:
    return bool(mask & TypeMask.OWNERS)


def version(mask: int) -> bool:
    return bool(mask & TypeMask.VERSION)


def shared(mask: int) -> bool:
    return bool(mask & TypeMask.SHARED)


def trashed(mask: int) -> bool:
    return bool(mask & TypeMask.IN_TRASH)


def starred(mask: int) -> bool:
    return bool(mask & TypeMask.STARRED)


def team_drives(mask: int) -> bool:
    return bool(mask & TypeMask.TEAM_DRIVES)


def folders_only(mask: int) -> bool:
    return bool(mask & TypeMask.FOLDER)


def non_folders_only(mask: int) -> bool:
    return bool(mask & TypeMask.NON_FOLDER)


def validate_mask(mask: int) -> TypeMask:
    """Normalize a mask and reject flag combinations that cannot list anything.

    Args:
        mask: Integer or TypeMask value

    Returns:
        The mask as a TypeMask

    Raises:
        ValueError: If both FOLDER and NON_FOLDER are set
    """
    mask = TypeMask(mask)
    if folders_only(mask) and non_folders_only(mask):
        raise ValueError("FOLDER and NON_FOLDER masks are mutually exclusive")
    return mask


@dataclass
class ListOptions:
    """Options for one listing invocation.

    A negative depth means traverse as deep as the tree goes, zero means
    do not descend into the roots at all.
    """

    sources: List[str] = field(default_factory=list)
    path: str = "/"
    depth: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    hidden: bool = False
    in_trash: bool = False
    type_mask: TypeMask = TypeMask.NONE
    meta: Optional[Dict[str, List[str]]] = None
    no_prompt: bool = False
    exact_title: bool = False

    def __post_init__(self):
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        self.type_mask = validate_mask(self.type_mask)
        if trashed(self.type_mask):
            self.in_trash = True

    def can_prompt(self) -> bool:
        """Whether interactive prompts are allowed at all for this listing."""
        return not self.no_prompt

    @property
    def sort_keys(self) -> List[str]:
        from .match import sort_keys_from_meta
        return sort_keys_from_meta(self.meta)


@dataclass
class PresentationOptions:
    """How entries are rendered at one traversal level."""

    minimal: bool = False
    disk_usage_only: bool = False
    show_owners: bool = False
    show_version: bool = False
    parent: str = ""

    @classmethod
    def from_mask(cls, mask: int, head_path: str = "") -> "PresentationOptions":
        """Derive presentation flags from a type mask.

        Args:
            mask: Type mask of the traversal
            head_path: Display path of the directory being listed

        Returns:
            PresentationOptions with ``parent`` blanked for ``/``
        """
        return cls(
            minimal=is_minimal(mask),
            disk_usage_only=disk_usage_only(mask),
            show_owners=owners(mask),
            show_version=version(mask),
            parent="" if head_path == "/" else head_path,
        )
