"""
Utility modules for the file server application.
"""
from .path_utils import check_path_safety, has_hidden_segment, strip_prefix
from .file_utils import DirectoryEntry, format_file_info, format_size

__all__ = [
    "check_path_safety",
    "has_hidden_segment",
    "strip_prefix",
    "DirectoryEntry",
    "format_file_info",
    "format_size",
]
