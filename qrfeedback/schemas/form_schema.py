def serialize_profile(profile) -> dict:
    return {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "plan": profile.plan,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
    }


def serialize_form(form, response_count: int | None = None) -> dict:
    data = {
        "id": form.id,
        "user_id": form.user_id,
        "title": form.title,
        "description": form.description or "",
        "questions": form.questions,
        "version": form.version,
        "created_at": form.created_at.isoformat() if form.created_at else None,
        "updated_at": form.updated_at.isoformat() if form.updated_at else None,
    }
    if response_count is not None:
        data["response_count"] = response_count
    return data


def serialize_public_form(form, is_owner: bool = False) -> dict:
    return {
        "id": form.id,
        "title": form.title,
        "description": form.description or "",
        "questions": form.questions,
        "is_owner": is_owner,
    }


def serialize_response(response) -> dict:
    return {
        "id": response.id,
        "form_id": response.form_id,
        "answers": response.answers,
        "submitted_at": response.submitted_at.isoformat() if response.submitted_at else None,
    }
