"""Public feedback form reached through the QR code. No login needed."""
import logging

from ..schemas.answers import UNANSWERED_MESSAGE, is_unanswered
from ..utils.errors import PlanLimitError, QRFeedbackError
from .loader import SLOW_CONNECTION_MESSAGE, LoadState, Loader
from .store import Store

logger = logging.getLogger(__name__)

SUBMIT_FAILED_MESSAGE = "Error submitting feedback. Please try again."


class FeedbackPage:
    def __init__(self, api, form_id, loader=None):
        self.api = api
        self.form_id = form_id
        self.store = Store(form=None, answers={}, submitted=False, status=LoadState.LOADING.value, error=None)
        self.loader = loader or Loader()
        self.loader.on_state = self._on_load_state

    def _on_load_state(self, state):
        self.store.set("status", state.value)
        if state is LoadState.TIMEOUT_RETRY:
            self.store.set("error", SLOW_CONNECTION_MESSAGE)

    def load(self):
        result = self.loader.load(lambda: self.api.get_feedback_form(self.form_id))
        if result.ok:
            form = result.value
            self.store.set("form", form)
            self.store.set("answers", {
                q["id"]: 0 if q["type"] == "rating" else ""
                for q in form.get("questions") or []
            })
            self.store.set("error", None)
        elif result.state is LoadState.REDIRECTING:
            self.store.set("error", "Form not found")
        else:
            self.store.set("error", str(result.error))
        return result

    @property
    def is_owner(self) -> bool:
        return bool((self.store.get("form") or {}).get("is_owner"))

    def set_answer(self, question_id, value):
        answers = dict(self.store.get("answers") or {})
        if question_id not in answers:
            raise KeyError(question_id)
        answers[question_id] = value
        self.store.set("answers", answers)

    def submit(self) -> bool:
        answers = self.store.get("answers") or {}
        if any(is_unanswered(v) for v in answers.values()):
            self.store.set("error", UNANSWERED_MESSAGE)
            return False

        payload = [{"questionId": qid, "value": value} for qid, value in answers.items()]
        try:
            self.api.submit_feedback(self.form_id, payload)
        except PlanLimitError as e:
            self.store.set("error", str(e))
            return False
        except QRFeedbackError as e:
            logger.error("Feedback submit failed for %s: %s", self.form_id, e)
            self.store.set("error", SUBMIT_FAILED_MESSAGE)
            return False

        self.store.set("error", None)
        self.store.set("submitted", True)
        return True
