from types import SimpleNamespace

import pytest
import stripe

from qrfeedback.utils.plan_limits import PLANS


@pytest.fixture
def stripe_calls(monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(id="cs_test_123")

    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)
    return calls


def test_checkout_returns_session_id(client, stripe_calls):
    resp = client.post("/api/create-checkout", json={"priceId": PLANS[1].price_id, "userId": "user-1"})
    assert resp.status_code == 200
    assert resp.get_json() == {"sessionId": "cs_test_123"}

    call = stripe_calls[0]
    assert call["mode"] == "subscription"
    assert call["line_items"] == [{"price": PLANS[1].price_id, "quantity": 1}]
    assert call["client_reference_id"] == "user-1"
    assert call["success_url"] == "https://qrfeedback.ai/dashboard?upgrade=success"
    assert call["cancel_url"] == "https://qrfeedback.ai/dashboard?upgrade=cancelled"


def test_payment_provider_failure_is_a_500(client, monkeypatch):
    def boom(**kwargs):
        raise stripe.StripeError("card network down")

    monkeypatch.setattr(stripe.checkout.Session, "create", boom)
    resp = client.post("/api/create-checkout", json={"priceId": "price_x", "userId": "u"})
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Error creating checkout session"}


def test_missing_price_is_a_500(client, stripe_calls):
    resp = client.post("/api/create-checkout", json={"userId": "u"})
    assert resp.status_code == 500
    assert stripe_calls == []


def test_malformed_body_is_a_500(client, stripe_calls):
    resp = client.post("/api/create-checkout", data="not json", content_type="application/json")
    assert resp.status_code == 500
