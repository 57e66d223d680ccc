"""
Service modules for business logic.
"""
from .path_resolver import PathResolver, ResolvedPath
from .file_service import FileService, RpcOperation
from .archive_service import ArchiveService

__all__ = [
    "PathResolver",
    "ResolvedPath",
    "FileService",
    "RpcOperation",
    "ArchiveService",
]
