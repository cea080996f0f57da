"""Stable multi-key sorting of sibling entries.

Sort keys are looked up in a registry by name. A ``_r`` suffix reverses
that key. Unknown names are skipped so a typo degrades to remote order
instead of failing the listing.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List

logger = logging.getLogger(__name__)

REVERSE_SUFFIX = "_r"

_EPOCH = datetime.min


def _mod_time_key(entry: Any) -> Any:
    mod_time = entry.mod_time
    if mod_time is None:
        return _EPOCH
    # Compare aware and naive timestamps on the same footing
    return mod_time.replace(tzinfo=None)


SORT_KEYS: Dict[str, Callable[[Any], Any]] = {
    "name": lambda entry: entry.name,
    "type": lambda entry: not entry.is_dir,
    "size": lambda entry: entry.size or 0,
    "modtime": _mod_time_key,
    "version": lambda entry: entry.version or 0,
}


def register_sort_key(name: str, key: Callable[[Any], Any]) -> None:
    """Add or replace a named sort key."""
    if name.endswith(REVERSE_SUFFIX):
        raise ValueError(f"sort key names may not end with {REVERSE_SUFFIX!r}: {name}")
    SORT_KEYS[name] = key


def _resolve(key_name: str):
    name = key_name.strip().lower()
    reverse = False
    if name.endswith(REVERSE_SUFFIX) and name[:-len(REVERSE_SUFFIX)] in SORT_KEYS:
        name = name[:-len(REVERSE_SUFFIX)]
        reverse = True
    return SORT_KEYS.get(name), reverse


def sort_entries(entries: Iterable[Any], *keys: str) -> List[Any]:
    """Sort entries by the named keys, earlier keys dominating.

    Python's sort is stable, so sorting by the least significant key first
    and the most significant last gives a multi-key ordering in which
    fully equal entries keep their original order.

    Args:
        entries: Entries of one directory page
        *keys: Sort key names, e.g. ``"name"``, ``"size_r"``

    Returns:
        New sorted list
    """
    result = list(entries)
    for key_name in reversed(keys):
        key, reverse = _resolve(key_name)
        if key is None:
            logger.debug("ignoring unknown sort key %r", key_name)
            continue
        result.sort(key=key, reverse=reverse)
    return result
