from ..utils.csv_export import export_filename, generate_csv
from .loader import SLOW_CONNECTION_MESSAGE, LoadState, Loader
from .store import Store
from .toasts import ToastCenter


class ResponsesPage:
    def __init__(self, api, form_id, toasts=None, loader=None, navigate=None, tz_name="UTC"):
        self.api = api
        self.form_id = form_id
        self.tz_name = tz_name
        self.toasts = toasts or ToastCenter()
        self.navigate = navigate or (lambda path: None)
        self.store = Store(form=None, responses=[], status=LoadState.LOADING.value, error=None)
        self.loader = loader or Loader()
        self.loader.on_state = self._on_load_state
        self.loader.on_redirect = lambda: self.navigate("/dashboard")

    def _on_load_state(self, state):
        self.store.set("status", state.value)
        if state is LoadState.TIMEOUT_RETRY:
            self.toasts.error(SLOW_CONNECTION_MESSAGE)

    def load(self):
        result = self.loader.load(lambda: self.api.list_responses(self.form_id))
        if result.ok:
            self.store.set("form", result.value["form"])
            self.store.set("responses", result.value["responses"])
        elif result.state is LoadState.FAILED:
            self.store.set("error", str(result.error))
        return result

    def export_csv(self):
        """Returns ``(filename, content)``, or None when there is nothing to export."""
        responses = self.store.get("responses") or []
        if not responses:
            self.toasts.error("No responses to export yet.")
            return None

        form = self.store.get("form") or {}
        content = generate_csv(form.get("questions") or [], responses, self.tz_name)
        self.toasts.success("CSV exported successfully!")
        return export_filename(form.get("title")), content
