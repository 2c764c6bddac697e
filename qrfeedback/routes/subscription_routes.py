from flask import Blueprint, current_app

from ..routes.auth_routes import token_required
from ..services import form_service
from ..utils.plan_checker import usage_summary
from ..utils.plan_limits import PLANS
from ..utils.response import api_response

subscription_bp = Blueprint("subscription", __name__)


@subscription_bp.route("/plans", methods=["GET"])
def list_plans():
    return api_response(True, "Plans", {
        "plans": [plan.to_dict() for plan in PLANS],
        "publishable_key": current_app.config.get("STRIPE_PUBLISHABLE_KEY"),
    })


@subscription_bp.route("/status", methods=["GET"])
@token_required
def subscription_status(current_user):
    summary = usage_summary(
        current_user.plan,
        form_service.count_forms(current_user),
        form_service.responses_this_month(current_user.id),
    )
    summary["is_paid"] = summary["plan"] != "free"
    return api_response(True, "Subscription status fetched", summary)
