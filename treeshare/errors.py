"""
Exception types raised by the services.

Routes convert every one of these into the same opaque ``500 error`` reply,
so the messages are for logs only.
"""


class TreeShareError(Exception):
    """Base class for request failures raised by the services."""


class InvalidPathError(TreeShareError):
    """A client path that is malformed or would leave the shared root."""

    def __init__(self, message: str = "invalid path"):
        super().__init__(message)


class UnknownOperationError(TreeShareError):
    """An RPC call name that is not one of the supported operations."""


class MalformedRequestError(TreeShareError):
    """A request body or header that cannot be decoded."""


class SymlinkInArchiveError(TreeShareError):
    """A symlink was met while walking a tree for a zip download."""

    def __init__(self, message: str = "symlink not allowed in zip downloads"):
        super().__init__(message)
