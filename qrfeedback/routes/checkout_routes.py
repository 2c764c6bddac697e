from flask import Blueprint, request, jsonify, current_app

from ..extensions import db
from ..services.billing_service import (
    BillingError,
    create_checkout_session,
    process_webhook_event,
    verify_webhook,
)

checkout_bp = Blueprint('checkout', __name__)


@checkout_bp.route('/create-checkout', methods=['POST'])
def create_checkout():
    """
    Stripe checkout session for a plan upgrade.
    Body: {priceId, userId}. Replies 200 {sessionId} or 500 {error}, nothing else.
    """
    try:
        data = request.get_json(silent=True) or {}
        session_id = create_checkout_session(data.get('priceId'), data.get('userId'))
        return jsonify({'sessionId': session_id}), 200
    except Exception as e:
        current_app.logger.error(f"Checkout session error: {e}")
        return jsonify({'error': 'Error creating checkout session'}), 500


@checkout_bp.route('/stripe-webhook', methods=['POST'])
def stripe_webhook():
    """
    Stripe webhook endpoint - NO AUTHENTICATION REQUIRED
    Plan changes arrive here once a checkout completes or a subscription ends.
    """
    payload_body = request.get_data()
    signature = request.headers.get('Stripe-Signature')

    if not signature:
        current_app.logger.error("Missing Stripe-Signature header")
        return jsonify({'error': 'Missing signature'}), 400

    try:
        event_data = verify_webhook(payload_body, signature)
    except BillingError as e:
        current_app.logger.error(f"Webhook rejected: {e}")
        return jsonify({'error': str(e)}), 400

    event_type = event_data.get('type', 'unknown')
    current_app.logger.info(f"Received webhook event: {event_type}")

    try:
        success, message = process_webhook_event(event_data)
    except Exception as e:
        db.session.rollback()
        message = f"Webhook handler error: {e}"
        current_app.logger.error(message)
        # Return 200 to prevent retries, the event is kept for inspection
        return jsonify({'status': 'error', 'message': message}), 200

    if success:
        return jsonify({'status': 'success', 'message': message}), 200

    current_app.logger.error(f"Webhook processing failed: {message}")
    return jsonify({'status': 'error', 'message': message}), 200
