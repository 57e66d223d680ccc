"""
File operations service.
"""
import logging
import os
import shutil
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterator, List, Optional, Tuple

from werkzeug.sansio.multipart import (
    Data, Epilogue, Field, File, MultipartDecoder, NeedData
)

from ..config import Settings
from ..errors import InvalidPathError, MalformedRequestError, UnknownOperationError
from ..utils.file_utils import PARENT_ENTRY, DirectoryEntry, format_file_info
from .path_resolver import PathResolver, ResolvedPath

logger = logging.getLogger(__name__)

RPC_ARITY = {
    "mkdirp": 1,
    "mv": 2,
    "rm": 1,
}


@dataclass(frozen=True)
class RpcOperation:
    """A decoded RPC call: operation name plus raw path arguments."""
    call: str
    args: Tuple[str, ...]

    @classmethod
    def from_json(cls, payload: Any) -> "RpcOperation":
        """
        Decode an RPC body of the form {"call": "mv", "args": ["/a", "/b"]}.

        Raises:
            UnknownOperationError: If the call name is not supported
            MalformedRequestError: If the body or its arguments are malformed
        """
        if not isinstance(payload, dict):
            raise MalformedRequestError("rpc body must be a JSON object")

        call = payload.get("call")
        args = payload.get("args")
        if not isinstance(call, str) or call not in RPC_ARITY:
            raise UnknownOperationError(f"unknown rpc call {call!r}")
        if not isinstance(args, list) or not all(isinstance(a, str) for a in args):
            raise MalformedRequestError("rpc args must be a list of strings")
        if len(args) < RPC_ARITY[call]:
            raise MalformedRequestError(f"{call} expects {RPC_ARITY[call]} argument(s)")

        return cls(call=call, args=tuple(args[:RPC_ARITY[call]]))


class FileService:
    """Handles directory listings, tree mutations and uploads."""

    def __init__(self, settings: Settings, path_resolver: PathResolver):
        """
        Initialize the file service.

        Args:
            settings: Runtime settings
            path_resolver: Resolver used for every client supplied path
        """
        self.settings = settings
        self.path_resolver = path_resolver

    def list_directory(
        self,
        directory: ResolvedPath
    ) -> Tuple[List[DirectoryEntry], List[DirectoryEntry]]:
        """
        List the immediate children of a directory.

        Args:
            directory: Resolved directory to list

        Returns:
            Tuple of (folders, files), each sorted case-insensitively by name.
            Folders start with a parent entry unless the directory is the root.

        Raises:
            OSError: If the directory itself cannot be read
        """
        with os.scandir(directory.absolute) as it:
            children = sorted(it, key=lambda e: e.name.lower())

        folders = [] if directory.is_root else [PARENT_ENTRY]
        files = []

        for child in children:
            if self.settings.skip_hidden and child.name.startswith("."):
                continue
            try:
                if not self.settings.follow_symlinks and child.is_symlink():
                    continue
                # Fresh stat; the entry may have changed since scandir
                stat_result = os.stat(child.path)
            except OSError as e:
                logger.warning("cannot stat %s: %s", child.path, e)
                continue

            entry = format_file_info(child.name, stat_result)
            if entry.is_dir:
                folders.append(entry)
            else:
                files.append(entry)

        return folders, files

    def dispatch(self, operation: RpcOperation) -> None:
        """
        Run an RPC operation against the tree.

        Every argument is resolved before anything on disk changes.

        Raises:
            UnknownOperationError: If the operation is not supported
            InvalidPathError: If any argument fails resolution
            OSError: If the filesystem operation fails
        """
        if operation.call == "mkdirp":
            self.create_directory(operation.args[0])
        elif operation.call == "mv":
            self.move(operation.args[0], operation.args[1])
        elif operation.call == "rm":
            self.remove(operation.args[0])
        else:
            raise UnknownOperationError(f"unknown rpc call {operation.call!r}")

    def create_directory(self, raw_path: str) -> None:
        """Create a directory and any missing parents; existing ones are fine."""
        target = self.path_resolver.resolve(raw_path)
        os.makedirs(target.absolute, exist_ok=True)

    def move(self, raw_src: str, raw_dst: str) -> None:
        """Rename raw_src to raw_dst, both resolved independently."""
        src = self.path_resolver.resolve(raw_src)
        dst = self.path_resolver.resolve(raw_dst)
        os.rename(src.absolute, dst.absolute)

    def remove(self, raw_path: str) -> None:
        """
        Delete a file or a whole directory tree. Missing paths are not an error.

        Raises:
            InvalidPathError: If the path is the root itself or fails resolution
        """
        target = self.path_resolver.resolve(raw_path)
        if target.is_root:
            raise InvalidPathError()

        if os.path.isdir(target.absolute) and not os.path.islink(target.absolute):
            shutil.rmtree(target.absolute)
        elif os.path.lexists(target.absolute):
            os.remove(target.absolute)

    def save_uploaded_file_stream(
        self,
        stream: BinaryIO,
        raw_destination: str,
        boundary: Optional[str]
    ) -> int:
        """
        Write the first part of a multipart body to a file.

        The destination is created or truncated. A body without any part
        leaves an empty file; parts after the first are not read.

        Args:
            stream: Request body stream
            raw_destination: Decoded destination path, URL prefix included
            boundary: Multipart boundary from the Content-Type header

        Returns:
            Number of bytes written

        Raises:
            InvalidPathError: If the destination fails resolution
            MalformedRequestError: If there is no boundary
            ValueError: If the multipart body is corrupt
        """
        if not boundary:
            raise MalformedRequestError("upload must be multipart/form-data")

        destination = self.path_resolver.resolve(raw_destination)
        written = 0

        with open(destination.absolute, "wb") as f:
            for data in _first_part(stream, boundary, self.settings.chunk_size):
                f.write(data)
                written += len(data)

        return written


def _read_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[Optional[bytes]]:
    """Yield body chunks, then a final None marking the end of input."""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        yield chunk
    yield None


def _first_part(stream: BinaryIO, boundary: str, chunk_size: int) -> Iterator[bytes]:
    """Yield the body of the first part of a multipart stream."""
    decoder = MultipartDecoder(boundary.encode("latin-1"))
    started = False
    received_any = False

    for chunk in _read_chunks(stream, chunk_size):
        if chunk is None and not received_any:
            # Empty body: no parts at all
            return
        received_any = True
        decoder.receive_data(chunk)

        event = decoder.next_event()
        while not isinstance(event, (NeedData, Epilogue)):
            if isinstance(event, (Field, File)):
                started = True
            elif isinstance(event, Data) and started:
                if event.data:
                    yield event.data
                if not event.more_data:
                    return
            event = decoder.next_event()

        if isinstance(event, Epilogue):
            return
