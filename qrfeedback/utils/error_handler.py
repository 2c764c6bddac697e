from flask import current_app

from .response import api_response


def register_error_handlers(app):
    @app.errorhandler(400)
    def bad_request(e):
        return api_response(False, "Bad Request", None, error_code="validation")

    @app.errorhandler(401)
    def unauthorized(e):
        return api_response(False, "Unauthorized", None, error_code="unauthorized")

    @app.errorhandler(404)
    def not_found(e):
        return api_response(False, "Not Found", None, error_code="not_found")

    @app.errorhandler(405)
    def method_not_allowed(e):
        return api_response(False, "Method Not Allowed", None, error_code="validation")

    @app.errorhandler(500)
    def server_error(e):
        current_app.logger.error(f"Unhandled server error: {e}")
        return api_response(False, "Server Error", None, error_code="server_error")
