from flask import jsonify


def api_response(success: bool, message: str, data: dict | None = None, error_code: str | None = None):
    # Always return status 200 with unified envelope
    body = {
        "success": success,
        "message": message,
        "data": data
    }
    if error_code:
        body["error_code"] = error_code
    return jsonify(body), 200


def error_response(exc):
    """Envelope for one of the domain errors in utils.errors."""
    return api_response(False, str(exc), getattr(exc, "data", None), error_code=exc.error_code)
