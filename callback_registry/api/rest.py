# callback_registry/api/rest.py
import json
from flask import Blueprint, Response, current_app, request
from werkzeug.datastructures import MultiDict
from ..utils.logging import get_logger

rest_bp = Blueprint("rest", __name__)
log = get_logger(__name__)

def registry():
    return current_app.extensions["rest"]

def request_dict() -> dict:
    """The current flask request as the plain dict callbacks receive."""
    return {
        "method": request.method,
        "path": request.path,
        "host_url": request.host_url,
        # query string and form fields are both visible as callback args
        "query": MultiDict(request.values.items(multi=True)),
        "headers": dict(request.headers),
    }

def to_response(rsp: dict) -> Response:
    content = rsp.get("content", "")
    content_type = rsp.get("content_type")
    if isinstance(content, (dict, list)):
        content = json.dumps(content, default=str)
        content_type = content_type or "application/json"
    elif not isinstance(content, (str, bytes)):
        content = str(content)

    resp = Response(content, status=int(rsp.get("code", 200)),
                    content_type=content_type or "text/html; charset=utf-8")
    for name, value in (rsp.get("headers_out") or {}).items():
        resp.headers[name] = value
    if rsp.get("location"):
        resp.headers["Location"] = rsp["location"]
    if rsp.get("dynamic"):
        resp.headers["Cache-Control"] = "no-store"
    return resp

@rest_bp.route("/<path:suffix>", methods=["GET", "POST"])
def do(suffix: str):
    log.debug(f"{request.method} {request.path}", extra={"suffix": suffix})
    if request.method == "HEAD":
        # link previewers and proxies must not spend a one-shot address
        status = 200 if registry().exists(suffix) else 404
        return Response(status=status, headers={"Cache-Control": "no-store"})
    rsp = registry().dispatch(request_dict())
    return to_response(rsp)
