from flask import jsonify


def ok(data=None, message=None, status=200):
    payload = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error(message, status=400, details=None):
    payload = {"success": False, "error": message}
    if details is not None:
        payload["details"] = details
    return jsonify(payload), status


def validation_error_response(errors):
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ())) or 'body'}: {e.get('msg')}"
        for e in errors
    )
    return error("Invalid request data", status=400, details=details)


def internal_error_response():
    return error("An unexpected error occurred. Please try again later.", status=500)
