"""
Uniform replies for every route.

Failures never leak details to the client: the body is always "error" and
the specifics go to the log.
"""
import logging
from typing import Any

from flask import Response

from ..errors import TreeShareError

logger = logging.getLogger(__name__)

# Everything a handler turns into "500 error"
HANDLED_ERRORS = (TreeShareError, OSError, ValueError)


def error_response(operation: str, args: Any, error: Exception) -> Response:
    """Log a failed call and build the opaque 500 reply."""
    logger.error("error %s %r: %s", operation, args, error)
    return Response("error", status=500, mimetype="text/plain")


def ok_response(operation: str, args: Any) -> Response:
    """Log a successful call (visible in verbose mode) and reply "ok"."""
    log_success(operation, args)
    return Response("ok", status=200, mimetype="text/plain")


def log_success(operation: str, args: Any) -> None:
    logger.info("%s %r", operation, args)
