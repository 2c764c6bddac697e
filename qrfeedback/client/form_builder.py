import logging

from ..schemas.questions import build_question, parse_questions
from ..utils.errors import ConflictError, QRFeedbackError
from .loader import SLOW_CONNECTION_MESSAGE, LoadState, Loader
from .optimistic import OptimisticController
from .store import Store
from .toasts import ToastCenter

logger = logging.getLogger(__name__)


class FormBuilderPage:
    """
    Edits one form. Adding or removing a question shows up at once and the
    whole question list is saved in the background; a failed save puts the
    list back the way it was.
    """

    def __init__(self, api, form_id, toasts=None, loader=None, navigate=None):
        self.api = api
        self.form_id = form_id
        self.toasts = toasts or ToastCenter()
        self.navigate = navigate or (lambda path: None)
        self.store = Store(form=None, questions=[], qr=None, status=LoadState.LOADING.value, error=None)
        self.loader = loader or Loader()
        self.loader.on_state = self._on_load_state
        self.loader.on_redirect = lambda: self.navigate("/dashboard")
        self.questions = OptimisticController(self.store, "questions", on_error=self._on_save_failed)

    def _on_load_state(self, state):
        self.store.set("status", state.value)
        if state is LoadState.TIMEOUT_RETRY:
            self.toasts.error(SLOW_CONNECTION_MESSAGE)
        elif state is LoadState.DENIED:
            self.toasts.error("Form not found or access denied")

    def load(self):
        result = self.loader.load(lambda: self.api.get_form(self.form_id))
        if result.ok:
            self._take(result.value)
        elif result.state is LoadState.FAILED:
            self.store.set("error", str(result.error))
        return result

    def _take(self, form):
        self.store.set("form", {k: v for k, v in form.items() if k != "questions"})
        self.store.set("questions", list(form.get("questions") or []))

    @property
    def version(self):
        return (self.store.get("form") or {}).get("version")

    def _persist_questions(self):
        saved = self.api.save_form(
            self.form_id,
            questions=self.store.get("questions"),
            version=self.version,
        )
        form = dict(self.store.get("form") or {})
        form.update({k: v for k, v in saved.items() if k != "questions"})
        self.store.set("form", form)
        return saved

    def _on_save_failed(self, mutation, error):
        if isinstance(error, ConflictError):
            self.toasts.error(str(error))
        else:
            self.toasts.error(f"Error saving form: {error}")

    # -- questions -------------------------------------------------------

    def add_question(self, question_type, text, options=None):
        try:
            question = build_question(
                question_type,
                text,
                options,
                min_options=2 if question_type == "multiple" else 1,
            )
        except QRFeedbackError as e:
            self.toasts.error(str(e))
            return None

        mutation = self.questions.add(question.to_dict(), self._persist_questions)
        if mutation.confirmed:
            self.toasts.success("Question added!")
        return mutation

    def remove_question(self, question_id):
        mutation = self.questions.remove(question_id, self._persist_questions)
        if mutation is not None and mutation.confirmed:
            self.toasts.success("Question removed.")
        return mutation

    # -- save / QR -------------------------------------------------------

    def save(self, title=None, description=None):
        questions = self.store.get("questions") or []
        try:
            parse_questions(questions, min_options=2)
        except QRFeedbackError as e:
            self.toasts.error(str(e))
            return None

        fields = {"questions": questions, "version": self.version}
        if title is not None:
            fields["title"] = title
        if description is not None:
            fields["description"] = description

        try:
            saved = self.api.save_form(self.form_id, **fields)
        except QRFeedbackError as e:
            self._on_save_failed(None, e)
            return None

        self._take(saved)
        self.toasts.success("Form saved successfully!")
        return saved

    def generate_qr(self, color_dark=None, style=None):
        try:
            qr = self.api.generate_qr(self.form_id, color_dark=color_dark, style=style)
        except QRFeedbackError as e:
            logger.error("QR generation failed for %s: %s", self.form_id, e)
            self.toasts.error("Error generating QR code")
            return None
        self.store.set("qr", qr)
        return qr
