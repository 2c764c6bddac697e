# utils/plan_limits.py
from dataclasses import dataclass

UNLIMITED = "unlimited"


@dataclass(frozen=True)
class PlanLimits:
    forms: int | str
    responses: int | str   # per calendar month


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    stripe_name: str
    price_monthly: int
    price_id: str | None
    limits: PlanLimits
    features: tuple[str, ...]
    cta: str
    popular: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": f"${self.price_monthly}",
            "price_monthly": self.price_monthly,
            "price_id": self.price_id,
            "popular": self.popular,
            "cta": self.cta,
            "features": list(self.features),
            "limits": {"forms": self.limits.forms, "responses": self.limits.responses},
        }


PLANS = (
    Plan(
        id="free",
        name="Free",
        stripe_name="QR Freeplan",
        price_monthly=0,
        price_id="price_1SJcpn04KnTBJoOrKtEQjQM7",
        cta="Get Started Free",
        features=(
            "3 feedback forms",
            "50 responses per month",
            "QR code generation",
            "Basic analytics dashboard",
            "Email support",
        ),
        limits=PlanLimits(forms=3, responses=50),
    ),
    Plan(
        id="pro",
        name="Pro",
        stripe_name="QR Pro Plan",
        price_monthly=19,
        price_id="price_1SJcqG04KnTBJoOrVzcOJ1jB",
        popular=True,
        cta="Start Free Trial",
        features=(
            "Unlimited feedback forms",
            "1,000 responses per month",
            "Advanced analytics & insights",
            "QR code customization",
            "Email notifications",
            "Priority email support",
            "Export data (CSV/Excel)",
            "Custom branding options",
        ),
        limits=PlanLimits(forms=UNLIMITED, responses=1000),
    ),
    Plan(
        id="business",
        name="Business",
        stripe_name="QR Business Plan",
        price_monthly=49,
        price_id="price_1SJcvI04KnTBJoOr8jJ5uVnX",
        cta="Start Free Trial",
        features=(
            "Everything in Pro",
            "Unlimited responses",
            "White-label feedback forms",
            "Remove QRfeedback.ai branding",
            "API access for integrations",
            "Custom domain support",
            "Dedicated account manager",
            "Phone & priority support",
            "Advanced team collaboration",
        ),
        limits=PlanLimits(forms=UNLIMITED, responses=UNLIMITED),
    ),
)

FREE_PLAN = PLANS[0]

# Older tier names still found on some profiles
PLAN_ALIASES = {
    "starter": "pro",
    "professional": "pro",
    "enterprise": "business",
}

PLAN_LIMITS = {plan.id: plan.limits for plan in PLANS}
