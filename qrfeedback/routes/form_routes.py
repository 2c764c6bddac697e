from flask import Blueprint, Response, current_app, request

from ..extensions import db
from ..routes.auth_routes import token_required
from ..schemas.form_schema import serialize_form, serialize_response
from ..services import form_service
from ..utils.csv_export import export_filename, generate_csv
from ..utils.errors import QRFeedbackError
from ..utils.qr_generator import generate_styled_qr
from ..utils.response import api_response, error_response

form_bp = Blueprint("forms", __name__)


@form_bp.route('/forms', methods=['GET'])
@token_required
def my_forms(current_user):
    forms = form_service.list_forms(current_user)
    counts = form_service.response_counts([f.id for f in forms])
    return api_response(True, "Forms", {
        "user_id": current_user.id,
        "forms": [serialize_form(f, counts.get(f.id, 0)) for f in forms],
    })


@form_bp.route('/forms', methods=['POST'])
@token_required
def create(current_user):
    data = request.get_json(silent=True) or {}
    try:
        form = form_service.create_form(current_user, data.get("title"), data.get("description"))
    except QRFeedbackError as e:
        return error_response(e)

    return api_response(True, "Form created! Click Edit to add questions.", {
        "form": serialize_form(form, 0),
    })


@form_bp.route('/forms/<form_id>', methods=['GET'])
@token_required
def get_form(current_user, form_id):
    try:
        form = form_service.get_owned_form(current_user, form_id)
    except QRFeedbackError as e:
        return error_response(e)
    return api_response(True, "Form details", {"form": serialize_form(form)})


@form_bp.route('/forms/<form_id>', methods=['PUT'])
@token_required
def save_form(current_user, form_id):
    data = request.get_json(silent=True) or {}
    try:
        form = form_service.update_form(current_user, form_id, data)
    except QRFeedbackError as e:
        db.session.rollback()
        return error_response(e)

    return api_response(True, "Form saved successfully.", {"form": serialize_form(form)})


@form_bp.route('/forms/<form_id>', methods=['DELETE'])
@token_required
def delete(current_user, form_id):
    try:
        form_service.delete_form(current_user, form_id)
    except QRFeedbackError as e:
        db.session.rollback()
        return error_response(e)

    return api_response(True, "Form deleted successfully!", {"form_id": form_id})


@form_bp.route('/forms/<form_id>/qr', methods=['POST'])
@token_required
def generate_qr(current_user, form_id):
    data = request.get_json(silent=True) or {}
    try:
        form = form_service.get_owned_form(current_user, form_id)
    except QRFeedbackError as e:
        return error_response(e)

    payload, data_url = generate_styled_qr(
        form.id,
        color_dark=(data.get("color_dark") or "#1f2937").strip(),
        style=(data.get("style") or "square").strip(),
        logo_data=data.get("logo"),
    )
    return api_response(True, "QR code generated successfully.", {
        "qr_payload": payload,
        "qr_code": data_url,
    })


@form_bp.route('/forms/<form_id>/responses', methods=['GET'])
@token_required
def form_responses(current_user, form_id):
    try:
        form = form_service.get_owned_form(current_user, form_id)
    except QRFeedbackError as e:
        return error_response(e)

    responses = form_service.list_responses(form)
    return api_response(True, "Responses", {
        "form": serialize_form(form, len(responses)),
        "responses": [serialize_response(r) for r in responses],
    })


@form_bp.route('/forms/<form_id>/responses/export', methods=['GET'])
@token_required
def export_responses(current_user, form_id):
    try:
        form = form_service.get_owned_form(current_user, form_id)
    except QRFeedbackError as e:
        return error_response(e)

    responses = form_service.list_responses(form)
    if not responses:
        return api_response(False, "No responses to export yet.", None, error_code="validation")

    csv_content = generate_csv(
        form.questions,
        responses,
        current_app.config.get("DISPLAY_TIMEZONE", "UTC"),
    )
    return Response(
        csv_content,
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(form.title)}"'},
    )
