"""
Main routes for directory listings, file serving and zip downloads.
"""
import gzip
import logging
import os
import stat
import urllib.parse

from flask import (
    Blueprint, Response, abort, current_app, make_response,
    redirect, render_template, request, send_from_directory
)

from .responses import HANDLED_ERRORS, error_response, log_success

logger = logging.getLogger(__name__)

main_bp = Blueprint("main", __name__)


@main_bp.before_app_request
def redirect_outside_prefix():
    """Send anything outside the URL prefix back to the prefix."""
    prefix = current_app.settings.prefix
    if not request.path.startswith(prefix):
        return redirect(prefix, code=302)
    return None


@main_bp.route("/zip")
def download_zip():
    """Stream a zip archive of the requested file or directory."""
    archive_service = current_app.archive_service
    resolver = current_app.path_resolver

    zip_path = request.args.get("zipPath", "")
    zip_name = request.args.get("zipName", "")

    try:
        target = resolver.resolve(zip_path)
        os.lstat(target.absolute)
        chunks = archive_service.stream_zip(target)
        # Errors before the first byte can still become a 500
        first = next(chunks)
    except HANDLED_ERRORS as e:
        return error_response("zip", zip_path, e)

    default_name = os.path.basename(target.absolute) or "archive"
    response = Response(
        _guard_stream(first, chunks, zip_path),
        mimetype="application/zip"
    )
    response.headers["Content-Disposition"] = (
        f'attachment; filename="{_sanitize_download_filename(zip_name, default_name)}.zip"'
    )
    return response


@main_bp.route("/", defaults={"path": ""})
@main_bp.route("/<path:path>")
def serve(path):
    """Serve a directory listing or hand a file to the static file sender."""
    resolver = current_app.path_resolver
    file_service = current_app.file_service
    settings = current_app.settings

    raw_path = request.path
    try:
        target = resolver.resolve(raw_path)
        stat_result = os.stat(target.absolute)

        if not stat.S_ISDIR(stat_result.st_mode):
            response = send_from_directory(settings.root, target.relative)
            log_success("get content", raw_path)
            return response

        # Listing links are relative to the directory URL
        if not raw_path.endswith("/"):
            return redirect(urllib.parse.quote(raw_path + "/"), code=302)

        folders, files = file_service.list_directory(target)
    except HANDLED_ERRORS as e:
        return error_response("get content", raw_path, e)

    log_success("get content", raw_path)
    return _render_listing(target, folders, files)


@main_bp.route("/", methods=["POST"])
@main_bp.route("/<path:path>", methods=["POST"])
def reject_post(path=""):
    """POSTs that no mutation route claimed, e.g. everything in read-only mode."""
    abort(404)


def _render_listing(target, folders, files) -> Response:
    """Render the listing page, gzip encoded when the client accepts it."""
    settings = current_app.settings
    title = "/" + target.relative + ("/" if target.relative else "")

    body = render_template(
        "index.html",
        title=title,
        prefix=settings.prefix,
        read_only=settings.read_only,
        folders=folders,
        files=files,
        zip_path=request.path,
        zip_name=os.path.basename(target.absolute) or "root",
    )

    response = make_response(body)
    response.headers["Vary"] = "Accept-Encoding"
    if "gzip" in request.headers.get("Accept-Encoding", ""):
        # Fastest level: much quicker than the default, output still small
        response.set_data(gzip.compress(response.get_data(), compresslevel=1))
        response.headers["Content-Encoding"] = "gzip"
    return response


def _guard_stream(first, chunks, zip_path):
    """Yield archive chunks; a failure mid-stream ends the body early."""
    yield first
    try:
        yield from chunks
    except HANDLED_ERRORS as e:
        # Headers are gone already, the client gets a truncated archive
        logger.error("error zip %r: %s", zip_path, e)
        return
    log_success("zip", zip_path)


def _sanitize_download_filename(name: str, default: str) -> str:
    """Strip characters that would break the Content-Disposition header."""
    cleaned = (name or "").strip()
    for char in ("\r", "\n", '"', "\\"):
        cleaned = cleaned.replace(char, "")
    return cleaned[:180] or default
