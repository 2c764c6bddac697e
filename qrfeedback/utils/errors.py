"""Domain errors shared by the API blueprints and the client package.

Each error carries an ``error_code`` that travels in the response envelope so
a caller can tell a validation failure from a missing record or an exceeded
plan limit without parsing messages.
"""


class QRFeedbackError(Exception):
    error_code = "server_error"

    def __init__(self, message: str, data: dict | None = None):
        super().__init__(message)
        self.message = message
        self.data = data


class ValidationError(QRFeedbackError):
    error_code = "validation"


class NotFoundError(QRFeedbackError):
    """Record is absent or not owned by the caller."""
    error_code = "not_found"


class PlanLimitError(QRFeedbackError):
    error_code = "plan_limit"


class ConflictError(QRFeedbackError):
    """A save was based on a stale form version."""
    error_code = "conflict"


class UnauthorizedError(QRFeedbackError):
    error_code = "unauthorized"


ERRORS_BY_CODE = {
    cls.error_code: cls
    for cls in (ValidationError, NotFoundError, PlanLimitError, ConflictError, UnauthorizedError)
}
