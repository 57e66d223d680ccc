"""
Sandboxed resolution of client supplied paths.
"""
import os
from dataclasses import dataclass

from ..config import Settings
from ..errors import InvalidPathError
from ..utils.path_utils import (
    check_path_safety, has_hidden_segment,
    relative_display_path, strip_prefix
)


@dataclass(frozen=True)
class ResolvedPath:
    """
    A filesystem location verified to lie within the shared root.

    Only PathResolver.resolve() creates these.
    """
    absolute: str
    relative: str

    @property
    def is_root(self) -> bool:
        return self.relative == ""


class PathResolver:
    """Turns raw request paths into verified absolute paths."""

    def __init__(self, settings: Settings):
        """
        Initialize the resolver.

        Args:
            settings: Runtime settings holding root, prefix and policy flags
        """
        self.settings = settings
        self.root = settings.root

    def resolve(self, raw_path: str) -> ResolvedPath:
        """
        Resolve a raw path taken from a URL, header or RPC argument.

        The path must carry the configured URL prefix. Every rejection raises
        the same InvalidPathError so callers cannot tell the reasons apart.

        Args:
            raw_path: Decoded, untrusted path including the URL prefix

        Returns:
            ResolvedPath for the requested location

        Raises:
            InvalidPathError: If the path is malformed or escapes the root
        """
        if not isinstance(raw_path, str) or "\x00" in raw_path:
            raise InvalidPathError()

        remainder = strip_prefix(raw_path, self.settings.prefix)
        if remainder is None:
            raise InvalidPathError()

        # Lexical join; abspath collapses "." and ".." without touching disk
        try:
            full_path = os.path.abspath(os.path.join(self.root, remainder.lstrip("/")))
        except (TypeError, ValueError):
            raise InvalidPathError()

        if not check_path_safety(full_path, self.root):
            raise InvalidPathError()

        # Checked on the raw text: symlink resolution below could mask a hidden segment
        if self.settings.skip_hidden and has_hidden_segment(remainder):
            raise InvalidPathError()

        if not self.settings.follow_symlinks:
            try:
                real_path = os.path.realpath(full_path)
            except (OSError, ValueError):
                # Missing targets are reported by the filesystem call that follows
                real_path = ""
            if real_path and not check_path_safety(real_path, self.root):
                raise InvalidPathError()

        return ResolvedPath(
            absolute=full_path,
            relative=relative_display_path(full_path, self.root)
        )
