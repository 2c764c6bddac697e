import json
import stripe
from flask import current_app

from ..extensions import db
from ..models.profile import Profile
from ..models.webhook_events import WebhookEvent
from ..utils.dates import utcnow
from ..utils.plan_checker import get_plan_by_price_id
from ..utils.plan_limits import FREE_PLAN


class BillingError(Exception):
    pass


def _configure_stripe():
    secret_key = current_app.config.get("STRIPE_SECRET_KEY")
    if not secret_key:
        raise BillingError("STRIPE_SECRET_KEY not configured")
    stripe.api_key = secret_key


def create_checkout_session(price_id, user_id) -> str:
    """Start a subscription checkout. Returns the Stripe session id."""
    if not price_id:
        raise BillingError("priceId is required")

    _configure_stripe()
    base_url = current_app.config.get("BASE_URL")

    try:
        session = stripe.checkout.Session.create(
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            mode="subscription",
            success_url=f"{base_url}/dashboard?upgrade=success",
            cancel_url=f"{base_url}/dashboard?upgrade=cancelled",
            client_reference_id=user_id,
            metadata={"price_id": price_id, "user_id": user_id or ""},
        )
    except stripe.StripeError as e:
        raise BillingError(f"Stripe checkout session creation failed: {e}")

    return session.id


def verify_webhook(payload_body, signature):
    """
    Verify the Stripe-Signature header and return the parsed event dict.
    Raises BillingError on a bad signature or payload.
    """
    secret = current_app.config.get("STRIPE_WEBHOOK_SECRET")
    if not secret:
        raise BillingError("STRIPE_WEBHOOK_SECRET not configured")

    try:
        stripe.Webhook.construct_event(payload_body, signature, secret)
    except ValueError as e:
        raise BillingError(f"Invalid payload: {e}")
    except stripe.SignatureVerificationError as e:
        raise BillingError(f"Invalid signature: {e}")

    if isinstance(payload_body, bytes):
        payload_body = payload_body.decode("utf-8")
    return json.loads(payload_body)


def store_webhook_event(event_data):
    """
    Store webhook event in database.

    Returns the new WebhookEvent, or None when the event id was seen before.
    """
    event_id = event_data.get("id")
    if not event_id:
        raise BillingError("Webhook event has no id")

    if WebhookEvent.query.filter_by(event_id=event_id).first():
        current_app.logger.info(f"Webhook event {event_id} already stored, skipping")
        return None

    obj = event_data.get("data", {}).get("object", {}) or {}
    webhook_event = WebhookEvent(
        event_id=event_id,
        event_type=event_data.get("type", "unknown"),
        payload=json.dumps(event_data),
        processed=False,
        user_id=obj.get("client_reference_id"),
    )
    db.session.add(webhook_event)
    db.session.commit()
    return webhook_event


def _mark_processed(webhook_event):
    webhook_event.processed = True
    webhook_event.processed_at = utcnow()
    db.session.commit()


def process_checkout_completed(event_data, webhook_event):
    """checkout.session.completed: move the profile to the purchased plan."""
    session = event_data.get("data", {}).get("object", {}) or {}
    user_id = session.get("client_reference_id")
    price_id = (session.get("metadata") or {}).get("price_id")

    profile = db.session.get(Profile, user_id) if user_id else None
    if not profile:
        webhook_event.error_message = f"No profile for client_reference_id {user_id!r}"
        db.session.commit()
        return False

    plan = get_plan_by_price_id(price_id)
    if not plan:
        webhook_event.error_message = f"Unknown price id {price_id!r}"
        db.session.commit()
        return False

    profile.plan = plan.id
    profile.stripe_customer_id = session.get("customer") or profile.stripe_customer_id
    profile.stripe_subscription_id = session.get("subscription") or profile.stripe_subscription_id
    _mark_processed(webhook_event)

    current_app.logger.info(f"Profile {profile.id} upgraded to {plan.id}")
    return True


def process_subscription_deleted(event_data, webhook_event):
    """customer.subscription.deleted: back to the free plan."""
    subscription = event_data.get("data", {}).get("object", {}) or {}
    profile = Profile.query.filter_by(stripe_subscription_id=subscription.get("id")).first()
    if not profile and subscription.get("customer"):
        profile = Profile.query.filter_by(stripe_customer_id=subscription.get("customer")).first()

    if profile:
        profile.plan = FREE_PLAN.id
        profile.stripe_subscription_id = None
        current_app.logger.info(f"Profile {profile.id} downgraded to free")
    else:
        current_app.logger.warning(f"No profile for cancelled subscription {subscription.get('id')}")

    _mark_processed(webhook_event)
    return True


EVENT_HANDLERS = {
    "checkout.session.completed": process_checkout_completed,
    "customer.subscription.deleted": process_subscription_deleted,
}


def process_webhook_event(event_data):
    """
    Main webhook processing function.

    Returns:
        tuple: (success: bool, message: str)
    """
    webhook_event = store_webhook_event(event_data)
    if not webhook_event:
        return True, "Duplicate event, already processed"

    event_type = event_data.get("type", "")
    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        _mark_processed(webhook_event)
        return True, f"Event {event_type} ignored"

    if handler(event_data, webhook_event):
        return True, f"Event {event_type} processed successfully"
    return False, f"Failed to process event {event_type}: {webhook_event.error_message}"
