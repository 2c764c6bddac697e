"""Dashboard: the owner's forms, plan usage, create and delete."""
import logging

from ..utils.errors import QRFeedbackError
from ..utils.plan_checker import check_form_limit, format_limit, format_plan_name, limits_for
from .loader import SLOW_CONNECTION_MESSAGE, LoadState, Loader
from .optimistic import OptimisticController
from .store import Store, add_item, by_created_at
from .toasts import ToastCenter

logger = logging.getLogger(__name__)


class DashboardPage:
    def __init__(self, api, toasts=None, loader=None, navigate=None):
        self.api = api
        self.toasts = toasts or ToastCenter()
        self.navigate = navigate or (lambda path: None)
        self.store = Store(profile=None, forms=[], status=LoadState.LOADING.value, error=None)
        self.loader = loader or Loader()
        self.loader.on_state = self._on_load_state
        self.loader.on_redirect = lambda: self.navigate("/auth/login")
        self.forms = OptimisticController(
            self.store,
            "forms",
            sort_key=by_created_at,
            on_error=self._on_delete_failed,
        )

    # -- loading ---------------------------------------------------------

    def _on_load_state(self, state):
        self.store.set("status", state.value)
        if state is LoadState.TIMEOUT_RETRY:
            self.toasts.error(SLOW_CONNECTION_MESSAGE)

    def load(self):
        result = self.loader.load(self.api.get_profile, self.api.list_forms)
        if result.ok:
            profile, forms = result.value
            self.store.set("profile", profile)
            self.store.set("forms", sorted(forms, key=by_created_at, reverse=True))
        elif result.state is LoadState.FAILED:
            self.store.set("error", str(result.error))
        return result

    def refresh(self):
        try:
            self.store.set("forms", self.api.list_forms())
        except QRFeedbackError as e:
            logger.warning("Refresh failed: %s", e)
            self.toasts.error("Error refreshing forms")

    # -- plan ------------------------------------------------------------

    @property
    def plan(self) -> str:
        profile = self.store.get("profile") or {}
        return profile.get("plan") or "free"

    def usage_line(self) -> str:
        limits = limits_for(self.plan)
        forms = self.store.get("forms") or []
        return (
            f"{format_plan_name(self.plan)} plan - Forms: {len(forms)}/{format_limit(limits.forms)}, "
            f"Responses Limit: {format_limit(limits.responses)}/month"
        )

    # -- create ----------------------------------------------------------

    def create_form(self, title, description=""):
        title = (title or "").strip()
        if not title:
            self.toasts.error("Form title is required.")
            return None

        ok, msg = check_form_limit(self.plan, len(self.store.get("forms") or []))
        if not ok:
            self.toasts.error(msg)
            return None

        try:
            form = self.api.create_form(title, (description or "").strip())
        except QRFeedbackError as e:
            self.toasts.error(f"Error creating form: {e}")
            return None

        self.store.update("forms", add_item, form, at_start=True)
        self.toasts.success("Form created! Click Edit to add questions.")

        try:
            self.store.set("forms", self.api.list_forms())
        except QRFeedbackError as e:
            # Keep the locally added form
            logger.warning("Reload after create failed: %s", e)
        return form

    # -- delete ----------------------------------------------------------

    def _on_delete_failed(self, mutation, error):
        self.toasts.error(f"Error deleting form: {error}")

    def delete_form(self, form_id):
        self.toasts.success("Deleting form...")
        mutation = self.forms.remove(
            form_id,
            lambda: self.api.delete_form(form_id),
            reconcile=self.api.list_forms,
        )
        if mutation is None:
            logger.error("Form not found in state: %s", form_id)
            return None
        if mutation.confirmed:
            self.toasts.success("Form deleted successfully!")
        return mutation
