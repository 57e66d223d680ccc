"""
File information and formatting utilities.
"""
import os
import stat
from dataclasses import dataclass
from typing import Optional

from .path_utils import url_encode_name

SIZE_UNITS = ["B", "k", "M", "G", "T", "P", "E", "Z", "Y"]


@dataclass(frozen=True)
class DirectoryEntry:
    """One row of a directory listing."""
    name: str
    is_dir: bool
    href: str
    size: Optional[int] = None
    ext: str = ""


PARENT_ENTRY = DirectoryEntry(name="..", is_dir=True, href="../")


def format_file_info(name: str, stat_result: os.stat_result) -> DirectoryEntry:
    """
    Build the listing entry for a directory child.

    Args:
        name: Entry name inside its directory
        stat_result: Result of stat() on the entry, symlinks followed

    Returns:
        DirectoryEntry; folders carry no size or extension
    """
    href = url_encode_name(name)
    if stat.S_ISDIR(stat_result.st_mode):
        return DirectoryEntry(name=name, is_dir=True, href=href + "/")

    return DirectoryEntry(
        name=name,
        is_dir=False,
        href=href,
        size=stat_result.st_size,
        ext=get_file_extension(name),
    )


def get_file_extension(filename: str) -> str:
    """
    Get the file extension.

    Args:
        filename: The filename

    Returns:
        Lowercase text after the last dot, without the dot, or empty string
    """
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def format_size(num_bytes: Optional[int]) -> str:
    """
    Render a byte count with one decimal and a single-letter unit, e.g. "10.0B".

    Args:
        num_bytes: Size in bytes, None for folders

    Returns:
        Human readable size, empty string for None
    """
    if num_bytes is None:
        return ""

    value = float(num_bytes)
    for unit in SIZE_UNITS:
        if value < 1024 or unit == SIZE_UNITS[-1]:
            return f"{value:.1f}{unit}"
        value /= 1024
