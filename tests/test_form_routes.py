QUESTIONS = [
    {"id": "q1", "type": "rating", "text": "How was your visit?"},
    {"id": "q2", "type": "multiple", "text": "Would you return?", "options": ["Yes", "No"]},
]


def test_protected_routes_need_a_token(client):
    body = client.get("/forms").get_json()
    assert body["success"] is False
    assert body["error_code"] == "unauthorized"


def test_create_and_list(client, owner, make_form):
    headers, profile = owner
    form = make_form(headers, "Lunch survey")
    assert form["user_id"] == profile["id"]
    assert form["questions"] == []
    assert form["version"] == 1

    body = client.get("/forms", headers=headers).get_json()
    assert [f["id"] for f in body["data"]["forms"]] == [form["id"]]
    assert body["data"]["forms"][0]["response_count"] == 0


def test_title_is_required(client, owner):
    headers, _ = owner
    body = client.post("/forms", json={"title": "   "}, headers=headers).get_json()
    assert body["success"] is False
    assert body["error_code"] == "validation"


def test_free_plan_blocks_the_fourth_form(client, owner, make_form):
    headers, _ = owner
    for i in range(3):
        make_form(headers, f"Form {i}")

    body = client.post("/forms", json={"title": "One too many"}, headers=headers).get_json()
    assert body["success"] is False
    assert body["error_code"] == "plan_limit"
    assert "free" in body["message"]
    assert "3" in body["message"]

    forms = client.get("/forms", headers=headers).get_json()["data"]["forms"]
    assert len(forms) == 3


def test_paid_plan_is_not_limited(app, client, owner, make_form):
    from qrfeedback.extensions import db
    from qrfeedback.models.profile import Profile

    headers, profile = owner
    db.session.get(Profile, profile["id"]).plan = "pro"
    db.session.commit()

    for i in range(4):
        make_form(headers, f"Form {i}")
    assert len(client.get("/forms", headers=headers).get_json()["data"]["forms"]) == 4


def test_save_questions_bumps_version(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)
    assert form["version"] == 2
    assert [q["id"] for q in form["questions"]] == ["q1", "q2"]


def test_stale_version_is_a_conflict(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers)
    url = f"/forms/{form['id']}"

    first = client.put(url, json={"title": "A", "version": 1}, headers=headers).get_json()
    assert first["success"]

    second = client.put(url, json={"title": "B", "version": 1}, headers=headers).get_json()
    assert second["success"] is False
    assert second["error_code"] == "conflict"
    assert second["data"] == {"version": 2}

    # Without a version the last write wins
    third = client.put(url, json={"title": "C"}, headers=headers).get_json()
    assert third["data"]["form"]["title"] == "C"


def test_multiple_choice_needs_an_option(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers)
    body = client.put(
        f"/forms/{form['id']}",
        json={"questions": [{"id": "x", "type": "multiple", "text": "Pick", "options": []}]},
        headers=headers,
    ).get_json()
    assert body["error_code"] == "validation"


def test_other_owners_forms_are_not_found(client, owner, register, make_form):
    headers, _ = owner
    form = make_form(headers)
    other_headers, _ = register("other@example.com")

    for method in ("get", "delete"):
        body = getattr(client, method)(f"/forms/{form['id']}", headers=other_headers).get_json()
        assert body["error_code"] == "not_found"

    body = client.get(f"/forms/{form['id']}/responses", headers=other_headers).get_json()
    assert body["error_code"] == "not_found"

    assert client.get(f"/forms/{form['id']}", headers=headers).get_json()["success"]


def test_delete_removes_form_and_responses(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, questions=QUESTIONS)
    client.post(f"/feedback/{form['id']}", json={"answers": [
        {"questionId": "q1", "value": 5},
        {"questionId": "q2", "value": "Yes"},
    ]})

    body = client.delete(f"/forms/{form['id']}", headers=headers).get_json()
    assert body["success"]
    assert client.get(f"/forms/{form['id']}", headers=headers).get_json()["error_code"] == "not_found"

    from qrfeedback.models.response import FeedbackResponse
    assert FeedbackResponse.query.count() == 0


def test_qr_code_for_own_form(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers)
    body = client.post(f"/forms/{form['id']}/qr", json={"style": "dots"}, headers=headers).get_json()
    assert body["data"]["qr_payload"] == f"https://qrfeedback.ai/feedback/{form['id']}"
    assert body["data"]["qr_code"].startswith("data:image/png;base64,")


def test_csv_export(client, owner, make_form):
    headers, _ = owner
    form = make_form(headers, "Cafe", questions=QUESTIONS)

    empty = client.get(f"/forms/{form['id']}/responses/export", headers=headers).get_json()
    assert empty["success"] is False

    client.post(f"/feedback/{form['id']}", json={"answers": [
        {"questionId": "q1", "value": 4},
        {"questionId": "q2", "value": "No"},
    ]})

    resp = client.get(f"/forms/{form['id']}/responses/export", headers=headers)
    assert resp.mimetype == "text/csv"
    assert 'filename="Cafe-responses.csv"' in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).split("\n")
    assert lines[0] == '"Submitted At","How was your visit?","Would you return?"'
    assert lines[1].endswith('"4","No"')


def test_subscription_status(client, owner, make_form):
    headers, _ = owner
    make_form(headers)
    data = client.get("/subscription/status", headers=headers).get_json()["data"]
    assert data["plan"] == "free"
    assert data["usage"]["forms"] == 1
    assert data["is_paid"] is False


def test_plans_listing(client):
    plans = client.get("/subscription/plans").get_json()["data"]["plans"]
    assert [p["id"] for p in plans] == ["free", "pro", "business"]
