from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models.form import Form
from ..models.profile import Profile
from ..models.response import FeedbackResponse
from ..schemas.answers import decode_answers, encode_answers
from ..schemas.questions import parse_questions, dump_questions
from ..utils.dates import start_of_month, utcnow
from ..utils.errors import ConflictError, NotFoundError, PlanLimitError, ValidationError
from ..utils.form_cache import drop_cached_form
from ..utils.plan_checker import check_form_limit, check_response_limit


def list_forms(owner: Profile) -> list[Form]:
    return (
        Form.query.filter_by(user_id=owner.id)
        .order_by(Form.created_at.desc())
        .all()
    )


def count_forms(owner: Profile) -> int:
    return Form.query.filter_by(user_id=owner.id).count()


def response_counts(form_ids) -> dict:
    if not form_ids:
        return {}
    rows = (
        db.session.query(FeedbackResponse.form_id, func.count(FeedbackResponse.id))
        .filter(FeedbackResponse.form_id.in_(form_ids))
        .group_by(FeedbackResponse.form_id)
        .all()
    )
    return {form_id: count for form_id, count in rows}


def responses_this_month(owner_id: str) -> int:
    return (
        FeedbackResponse.query.join(Form, Form.id == FeedbackResponse.form_id)
        .filter(Form.user_id == owner_id, FeedbackResponse.submitted_at >= start_of_month())
        .count()
    )


def get_owned_form(owner: Profile, form_id: str) -> Form:
    form = Form.query.filter_by(id=form_id, user_id=owner.id).first()
    if not form:
        raise NotFoundError("Form not found or you don't have access to it.")
    return form


def get_public_form(form_id: str) -> Form:
    form = db.session.get(Form, form_id)
    if not form:
        raise NotFoundError("Form not found")
    return form


def create_form(owner: Profile, title, description=None) -> Form:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Form title is required.")

    ok, msg = check_form_limit(owner.plan, count_forms(owner))
    if not ok:
        raise PlanLimitError(msg)

    form = Form(
        user_id=owner.id,
        title=title,
        description=(description or "").strip(),
    )
    form.questions = []
    db.session.add(form)
    db.session.commit()

    current_app.logger.info(f"Form {form.id} created for {owner.id}")
    return form


def update_form(owner: Profile, form_id: str, data: dict) -> Form:
    """
    Saves title/description/questions. When ``version`` is sent it must match
    the stored version, otherwise the last write wins.
    """
    form = get_owned_form(owner, form_id)

    expected = data.get("version")
    if expected is not None:
        try:
            expected = int(expected)
        except (TypeError, ValueError):
            raise ValidationError("version must be a number.")
    if expected is not None and expected != form.version:
        raise ConflictError(
            "This form was changed somewhere else. Reload it before saving.",
            data={"version": form.version},
        )

    if "title" in data:
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("Form title is required.")
        form.title = title

    if "description" in data:
        form.description = (data.get("description") or "").strip()

    if "questions" in data:
        form.questions = dump_questions(parse_questions(data.get("questions")))

    form.version = (form.version or 0) + 1
    form.updated_at = utcnow()
    db.session.commit()
    drop_cached_form(form.id)
    return form


def delete_form(owner: Profile, form_id: str):
    form = get_owned_form(owner, form_id)
    db.session.delete(form)
    db.session.commit()
    drop_cached_form(form_id)
    current_app.logger.info(f"Form {form_id} deleted by {owner.id}")


def list_responses(form: Form) -> list[FeedbackResponse]:
    return (
        FeedbackResponse.query.filter_by(form_id=form.id)
        .order_by(FeedbackResponse.submitted_at.desc())
        .all()
    )


def submit_response(form: Form, raw_answers) -> FeedbackResponse:
    questions = parse_questions(form.questions)
    answers = decode_answers(questions, raw_answers)

    owner = db.session.get(Profile, form.user_id)
    ok, msg = check_response_limit(owner.plan if owner else None, responses_this_month(form.user_id))
    if not ok:
        raise PlanLimitError(msg)

    response = FeedbackResponse(form_id=form.id)
    response.answers = encode_answers(answers)
    db.session.add(response)
    db.session.commit()
    return response
