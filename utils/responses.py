from flask import jsonify

def ok(message=None, code=200, **extra):
    payload = {}
    if message is not None:
        payload["message"] = message
    payload.update(extra)
    return jsonify(payload), code

def fail(message="Bad Request", code=400, **extra):
    payload = {"error": message}
    payload.update(extra)
    return jsonify(payload), code
