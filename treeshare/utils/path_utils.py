"""
Path manipulation and safety utilities.
"""
import os
import urllib.parse
from typing import Optional


def check_path_safety(path_abs: str, root_dir: str) -> bool:
    """
    Check if the absolute path is the root directory or lies beneath it.

    Args:
        path_abs: Absolute path to check
        root_dir: The shared root directory

    Returns:
        True if path is safe, False otherwise
    """
    root_norm = os.path.normpath(root_dir)
    path_abs_norm = os.path.normpath(path_abs)

    if path_abs_norm == root_norm:
        return True

    # Root "/" already ends with the separator
    root_with_sep = root_norm if root_norm.endswith(os.sep) else root_norm + os.sep
    return path_abs_norm.startswith(root_with_sep)


def strip_prefix(path: str, prefix: str) -> Optional[str]:
    """
    Remove a URL prefix from the front of a path.

    Args:
        path: Raw request path
        prefix: URL prefix, starting and ending with "/"

    Returns:
        The remainder, or None if the path is not under the prefix
    """
    if not path.startswith(prefix):
        return None
    return path[len(prefix):]


def has_hidden_segment(path: str) -> bool:
    """
    Check if any segment of a slash-separated path starts with a dot.

    "." and ".." count as hidden segments too.
    """
    return any(segment.startswith(".") for segment in path.split("/"))


def normalize_path_display(path: str) -> str:
    """
    Normalize path for display (use forward slashes).

    Args:
        path: Path to normalize

    Returns:
        Path with forward slashes
    """
    if os.sep != "/":
        return path.replace(os.sep, "/")
    return path


def relative_display_path(path_abs: str, root_dir: str) -> str:
    """Return the forward-slash path of path_abs below root_dir, "" for the root."""
    rel = os.path.relpath(path_abs, root_dir)
    if rel == ".":
        return ""
    return normalize_path_display(rel)


def url_encode_name(name: str) -> str:
    """
    URL encode a single path segment, slashes included.

    Args:
        name: Entry name

    Returns:
        Encoded segment safe to use as a relative link
    """
    return urllib.parse.quote(name, safe="")


def url_decode_path(path: str) -> str:
    """
    URL decode a path.

    Args:
        path: Path to decode

    Returns:
        Decoded path
    """
    return urllib.parse.unquote(path, errors="strict")
