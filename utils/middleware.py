import logging
import uuid
from flask import g, request

logger = logging.getLogger("hris.requests")

def attach_request_id():
    g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    logger.debug("%s %s [%s]", request.method, request.path, g.request_id)

def echo_request_id(response):
    request_id = get_request_id()
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response

def get_request_id():
    return getattr(g, "request_id", None)
