"""
Upload route for file uploads.
"""
from flask import Blueprint, current_app, request

from ..utils.path_utils import url_decode_path
from .responses import HANDLED_ERRORS, error_response, ok_response

upload_bp = Blueprint("upload", __name__)


@upload_bp.route("/post", methods=["POST"])
def upload_file():
    """Store the first part of a multipart body at the gossa-path header location."""
    file_service = current_app.file_service

    raw_destination = request.headers.get("gossa-path", "")
    try:
        destination = url_decode_path(raw_destination)

        boundary = None
        if request.mimetype == "multipart/form-data":
            boundary = request.mimetype_params.get("boundary")

        #stream straight from the body, never through request.files
        file_service.save_uploaded_file_stream(request.stream, destination, boundary)
    except HANDLED_ERRORS as e:
        return error_response("upload", raw_destination, e)

    return ok_response("upload", raw_destination)
