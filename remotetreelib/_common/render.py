"""Formatting of one entry into an output line.

Layout, in order of precedence:

- disk-usage-only: size then path, nothing else
- minimal: path, plus owners and/or version when requested
- full: type, share flag, role, owners, version, size, id, modtime, path
"""

from typing import Any

from .config import PresentationOptions
from .paths import sep_join

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB")


def pretty_bytes(size: int) -> str:
    """Human readable byte count, e.g. ``1536 -> '1.50KB'``."""
    value = float(size or 0)
    for unit in _UNITS:
        if abs(value) < 1024 or unit == _UNITS[-1]:
            return f"{value:.2f}{unit}"
        value /= 1024
    return f"{value:.2f}{_UNITS[-1]}"


def format_entry(entry: Any, opt: PresentationOptions) -> str:
    """Format an entry as one newline-terminated line.

    Args:
        entry: Entry to format
        opt: Presentation flags and display parent

    Returns:
        The line, including the trailing newline
    """
    path = sep_join("/", opt.parent, entry.name)

    if opt.disk_usage_only:
        return f"{entry.size:<12} {path}\n"

    parts = []
    if opt.minimal:
        parts.append(path)
    else:
        parts.append("d" if entry.is_dir else "-")
        parts.append("s" if entry.shared else "-")
        if entry.user_permission is not None:
            parts.append(f" {entry.user_permission.role:<10} ")

    if opt.show_owners and entry.owner_names:
        parts.append(f" {' & '.join(entry.owner_names)} ")

    if opt.show_version:
        parts.append(f" v{entry.version}")

    if opt.minimal:
        parts.append("\n")
    else:
        mod_time = "" if entry.mod_time is None else str(entry.mod_time)
        parts.append(f" {pretty_bytes(entry.size):<10}\t{entry.id:<10}\t\t{mod_time:<20}\t{path}\n")

    return "".join(parts)
