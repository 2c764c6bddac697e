from flask import Blueprint, current_app, request

from ..extensions import db
from ..routes.auth_routes import current_profile_or_none
from ..schemas.form_schema import serialize_public_form
from ..services import form_service
from ..utils.errors import QRFeedbackError
from ..utils.form_cache import cache_form, get_cached_form
from ..utils.response import api_response, error_response

feedback_bp = Blueprint("feedback", __name__)


@feedback_bp.route('/feedback/<form_id>', methods=['GET'])
def public_form(form_id):
    """Form as shown to respondents. No account needed."""
    payload = get_cached_form(form_id)
    if payload is None:
        try:
            form = form_service.get_public_form(form_id)
        except QRFeedbackError as e:
            return error_response(e)
        payload = serialize_public_form(form)
        payload["user_id"] = form.user_id
        cache_form(form_id, payload)

    viewer = current_profile_or_none()
    owner_id = payload.pop("user_id", None)
    payload["is_owner"] = bool(viewer and viewer.id == owner_id)

    return api_response(True, "Feedback form", {"form": payload})


@feedback_bp.route('/feedback/<form_id>', methods=['POST'])
def submit_feedback(form_id):
    data = request.get_json(silent=True) or {}
    try:
        form = form_service.get_public_form(form_id)
        response = form_service.submit_response(form, data.get("answers"))
    except QRFeedbackError as e:
        db.session.rollback()
        return error_response(e)

    current_app.logger.info(f"Response {response.id} stored for form {form_id}")
    return api_response(True, "Thank you for your feedback!", {
        "response_id": response.id,
        "submitted_at": response.submitted_at.isoformat(),
    })
