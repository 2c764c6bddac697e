QUESTIONS = [
    {"id": "q1", "type": "rating", "text": "Rate us"},
    {"id": "q2", "type": "text", "text": "Comments"},
]
ANSWERS = [{"questionId": "q1", "value": 5}, {"questionId": "q2", "value": "Great"}]


def test_public_form_needs_no_login(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)

    body = client.get(f"/feedback/{form['id']}").get_json()
    assert body["success"]
    assert body["data"]["form"]["questions"] == QUESTIONS
    assert body["data"]["form"]["is_owner"] is False
    assert "user_id" not in body["data"]["form"]


def test_owner_sees_the_owner_flag(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)
    body = client.get(f"/feedback/{form['id']}", headers=headers).get_json()
    assert body["data"]["form"]["is_owner"] is True


def test_unknown_form(client):
    body = client.get("/feedback/does-not-exist").get_json()
    assert body["error_code"] == "not_found"


def test_submit_and_list_responses(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)

    body = client.post(f"/feedback/{form['id']}", json={"answers": ANSWERS}).get_json()
    assert body["success"]

    data = client.get(f"/forms/{form['id']}/responses", headers=headers).get_json()["data"]
    assert data["form"]["response_count"] == 1
    assert data["responses"][0]["answers"] == ANSWERS


def test_unanswered_question_is_rejected(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)
    body = client.post(f"/feedback/{form['id']}", json={"answers": ANSWERS[:1]}).get_json()
    assert body["success"] is False
    assert body["message"] == "Please answer all questions before submitting."


def test_monthly_response_limit(client, owner, make_form):
    from qrfeedback.extensions import db
    from qrfeedback.models.response import FeedbackResponse

    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)
    for _ in range(50):
        response = FeedbackResponse(form_id=form["id"])
        response.answers = ANSWERS
        db.session.add(response)
    db.session.commit()

    body = client.post(f"/feedback/{form['id']}", json={"answers": ANSWERS}).get_json()
    assert body["success"] is False
    assert body["error_code"] == "plan_limit"
