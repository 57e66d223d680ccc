"""
RPC route for tree mutations.
"""
from flask import Blueprint, current_app, request

from ..services.file_service import RpcOperation
from .responses import HANDLED_ERRORS, error_response, ok_response

api_bp = Blueprint("api", __name__)


@api_bp.route("/rpc", methods=["POST"])
def rpc():
    """Run one of mkdirp, mv or rm from a JSON body."""
    file_service = current_app.file_service

    payload = request.get_json(force=True, silent=True)
    try:
        operation = RpcOperation.from_json(payload)
        file_service.dispatch(operation)
    except HANDLED_ERRORS as e:
        return error_response("rpc", payload, e)

    return ok_response("rpc", payload)
