# utils/plan_checker.py
from .plan_limits import FREE_PLAN, PLAN_ALIASES, PLANS, UNLIMITED


def get_plan(plan_name):
    """Find a plan by id, display name, payment product name or legacy alias."""
    if not plan_name:
        return None
    key = str(plan_name).strip().lower()
    key = PLAN_ALIASES.get(key, key)
    for plan in PLANS:
        if key in (plan.id, plan.name.lower(), plan.stripe_name.lower()):
            return plan
    return None


def get_plan_by_price_id(price_id):
    for plan in PLANS:
        if price_id and plan.price_id == price_id:
            return plan
    return None


def effective_plan(plan_name):
    """The plan whose limits apply. Unknown or missing plans count as free."""
    return get_plan(plan_name) or FREE_PLAN


def limits_for(plan_name):
    return effective_plan(plan_name).limits


def is_within_limit(limit, current_count: int) -> bool:
    # Checked before the action that would create the next item
    if limit == UNLIMITED:
        return True
    return current_count < limit


def format_plan_name(plan_name) -> str:
    plan = get_plan(plan_name)
    if plan:
        return plan.name
    name = str(plan_name or "")
    return name[:1].upper() + name[1:]


def format_limit(limit) -> str:
    return "∞" if limit == UNLIMITED else str(limit)


def check_form_limit(plan_name, current_forms: int):
    """Return (ok, message) for creating one more form."""
    limit = limits_for(plan_name).forms
    if is_within_limit(limit, current_forms):
        return True, None
    return False, f"Your {effective_plan(plan_name).id} plan allows only {limit} forms. Please upgrade!"


def check_response_limit(plan_name, responses_this_month: int):
    """Return (ok, message) for accepting one more response this month."""
    limit = limits_for(plan_name).responses
    if is_within_limit(limit, responses_this_month):
        return True, None
    return False, (
        f"This form is not accepting responses right now. The owner's "
        f"{effective_plan(plan_name).id} plan allows only {limit} responses per month."
    )


def usage_summary(plan_name, forms_count: int, responses_this_month: int) -> dict:
    limits = limits_for(plan_name)
    return {
        "plan": effective_plan(plan_name).id,
        "plan_name": effective_plan(plan_name).name,
        "limits": {"forms": limits.forms, "responses": limits.responses},
        "usage": {"forms": forms_count, "responses_this_month": responses_this_month},
        "can_create_form": is_within_limit(limits.forms, forms_count),
        "can_accept_responses": is_within_limit(limits.responses, responses_this_month),
    }
