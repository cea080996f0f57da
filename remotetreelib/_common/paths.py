"""Display path helpers shared by the traversal engine and entry points."""

import posixpath

REMOTE_ROOT_NAME = "My Drive"
ROOT_ALIAS = "root"


def root_like(p: str) -> bool:
    """True for names that denote the store's logical root."""
    return p in ("", "/", ROOT_ALIAS)


def remote_root_like(p: str) -> bool:
    """True for the name the remote gives its own root folder."""
    return p == REMOTE_ROOT_NAME


def sep_join(sep: str, *parts: str) -> str:
    return sep.join(parts)


def join_head_path(parent: str, name: str) -> str:
    """Join a display parent and an entry name.

    Two root-like halves collapse to the root-like parent, so normalizing
    an already root-like path never produces ``//``.
    """
    if root_like(parent) and root_like(name):
        return parent
    return sep_join("/", parent, name)


def parent_path(p: str) -> str:
    """Parent display path of a root locator, ``""`` for top-level paths."""
    parent = posixpath.dirname(p.rstrip("/")) if p not in ("", "/") else "/"
    if parent in (".", ""):
        return ""
    return parent


def normalize_head_path(p: str) -> str:
    if remote_root_like(p) or root_like(p):
        return ""
    return p


def is_hidden(name: str, include_hidden: bool) -> bool:
    """Dot-files are hidden unless the caller asked for them."""
    if include_hidden:
        return False
    return name.startswith(".")
