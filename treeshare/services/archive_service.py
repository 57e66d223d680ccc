"""
Streaming zip downloads of directory trees.
"""
import logging
import os
import stat
import zipfile
from typing import Iterator, List, Tuple

from ..config import Settings
from ..errors import SymlinkInArchiveError
from ..utils.path_utils import has_hidden_segment, normalize_path_display
from .path_resolver import ResolvedPath

logger = logging.getLogger(__name__)


class _ChunkBuffer:
    """
    Write-only sink handed to ZipFile.

    It has no tell() or seek(), so ZipFile writes in streaming mode
    (data descriptors after each entry, no seeking back).
    """

    def __init__(self):
        self._chunks: List[bytes] = []

    def write(self, data) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        pass

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


class ArchiveService:
    """Builds zip archives of the shared tree while walking it."""

    def __init__(self, settings: Settings):
        """
        Initialize the archive service.

        Args:
            settings: Runtime settings
        """
        self.settings = settings

    def iter_files(self, top: ResolvedPath) -> Iterator[Tuple[str, str]]:
        """
        Walk a resolved path depth-first in name order.

        Yields:
            (absolute path, forward-slash archive name) for each regular file

        Raises:
            SymlinkInArchiveError: On the first symlink met, top included
            OSError: If any directory or file cannot be inspected
        """
        top_stat = os.lstat(top.absolute)
        if stat.S_ISLNK(top_stat.st_mode):
            raise SymlinkInArchiveError()
        if not stat.S_ISDIR(top_stat.st_mode):
            yield top.absolute, os.path.basename(top.absolute)
            return

        yield from self._walk(top.absolute, "")

    def _walk(self, directory: str, rel_dir: str) -> Iterator[Tuple[str, str]]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            rel = os.path.join(rel_dir, entry.name) if rel_dir else entry.name
            rel = normalize_path_display(rel)

            if self.settings.skip_hidden and has_hidden_segment(rel):
                continue
            if entry.is_symlink():
                raise SymlinkInArchiveError()

            if entry.is_dir(follow_symlinks=False):
                yield from self._walk(entry.path, rel)
            else:
                yield entry.path, rel

    def stream_zip(self, top: ResolvedPath) -> Iterator[bytes]:
        """
        Generate a zip archive of a file or directory tree, piece by piece.

        Entries are stored uncompressed. Empty directories get no entry.
        If anything fails midway the generator raises and the bytes already
        produced form a truncated archive.

        Args:
            top: Resolved file or directory to archive

        Yields:
            Archive bytes, roughly one chunk per file chunk read
        """
        chunk_size = self.settings.chunk_size
        sink = _ChunkBuffer()

        with zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_STORED) as zf:
            for path, arcname in self.iter_files(top):
                zinfo = zipfile.ZipInfo.from_file(path, arcname, strict_timestamps=False)
                zinfo.filename = arcname
                zinfo.compress_type = zipfile.ZIP_STORED

                with open(path, "rb") as src, zf.open(zinfo, mode="w") as dest:
                    while True:
                        chunk = src.read(chunk_size)
                        if not chunk:
                            break
                        dest.write(chunk)
                        yield sink.drain()

                # Data descriptor written when the entry closed
                tail = sink.drain()
                if tail:
                    yield tail
                logger.debug("zipped %s", arcname)

        # Central directory
        yield sink.drain()
