import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BASE_URL", "https://qrfeedback.ai")

import pytest

from qrfeedback import create_app
from qrfeedback.extensions import db


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "REDIS_URL": None,
        "BASE_URL": "https://qrfeedback.ai",
        "STRIPE_SECRET_KEY": "sk_test_123",
        "STRIPE_WEBHOOK_SECRET": "whsec_test",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _register(client, email, password="secret123"):
    resp = client.post("/register", json={"email": email, "password": password, "full_name": "Test"})
    body = resp.get_json()
    assert body["success"], body
    return body["data"]


@pytest.fixture
def register(client):
    """register(email) -> (headers, profile dict)"""
    def _do(email="owner@example.com"):
        data = _register(client, email)
        return {"Authorization": f"Bearer {data['token']}"}, data["profile"]
    return _do


@pytest.fixture
def owner(register):
    return register("owner@example.com")


@pytest.fixture
def make_form(client):
    def _do(headers, title="Customer survey", questions=None):
        body = client.post("/forms", json={"title": title}, headers=headers).get_json()
        assert body["success"], body
        form = body["data"]["form"]
        if questions is not None:
            body = client.put(
                f"/forms/{form['id']}", json={"questions": questions}, headers=headers
            ).get_json()
            assert body["success"], body
            form = body["data"]["form"]
        return form
    return _do
