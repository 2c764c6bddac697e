"""HTTP client for the QRFeedback API.

Every JSON route answers with the ``{"success", "message", "data"}`` envelope.
Failures are raised as the matching error from ``qrfeedback.utils.errors`` so
page code can branch on the kind of failure; anything else (transport errors,
non-JSON bodies, unknown codes) becomes ``RemoteError``.
"""
import logging

import requests

from ..utils.errors import ERRORS_BY_CODE, QRFeedbackError
from . import settings

logger = logging.getLogger(__name__)


class RemoteError(QRFeedbackError):
    error_code = "remote"


class ApiClient:
    def __init__(self, base_url=None, token=None, session=None, timeout=None):
        self.base_url = (base_url or settings.API_URL).rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SECONDS

    def _headers(self):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method, path, payload=None):
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method, url, json=payload, headers=self._headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise RemoteError(f"Network error: {e}") from e
        return resp

    def _call(self, method, path, payload=None):
        resp = self._request(method, path, payload)
        try:
            body = resp.json()
        except ValueError:
            raise RemoteError(f"Unexpected response from {path} (HTTP {resp.status_code})")

        if body.get("success"):
            return body.get("data") or {}

        message = body.get("message") or "Request failed"
        error_cls = ERRORS_BY_CODE.get(body.get("error_code"), RemoteError)
        raise error_cls(message, data=body.get("data"))

    # -- auth / profile --------------------------------------------------

    def register(self, email, password, full_name=None):
        data = self._call("POST", "/register", {"email": email, "password": password, "full_name": full_name})
        self.token = data["token"]
        return data["profile"]

    def login(self, email, password):
        data = self._call("POST", "/login", {"email": email, "password": password})
        self.token = data["token"]
        return self.token

    def get_profile(self):
        return self._call("GET", "/me")["profile"]

    def subscription_status(self):
        return self._call("GET", "/subscription/status")

    # -- forms -----------------------------------------------------------

    def list_forms(self):
        return self._call("GET", "/forms")["forms"]

    def create_form(self, title, description=""):
        return self._call("POST", "/forms", {"title": title, "description": description})["form"]

    def get_form(self, form_id):
        return self._call("GET", f"/forms/{form_id}")["form"]

    def save_form(self, form_id, **fields):
        return self._call("PUT", f"/forms/{form_id}", fields)["form"]

    def delete_form(self, form_id):
        self._call("DELETE", f"/forms/{form_id}")

    def generate_qr(self, form_id, color_dark=None, style=None):
        payload = {k: v for k, v in (("color_dark", color_dark), ("style", style)) if v}
        return self._call("POST", f"/forms/{form_id}/qr", payload)

    def list_responses(self, form_id):
        return self._call("GET", f"/forms/{form_id}/responses")

    # -- public feedback -------------------------------------------------

    def get_feedback_form(self, form_id):
        return self._call("GET", f"/feedback/{form_id}")["form"]

    def submit_feedback(self, form_id, answers):
        return self._call("POST", f"/feedback/{form_id}", {"answers": answers})

    # -- billing ---------------------------------------------------------

    def create_checkout(self, price_id, user_id):
        resp = self._request("POST", "/api/create-checkout", {"priceId": price_id, "userId": user_id})
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code != 200 or "sessionId" not in body:
            raise RemoteError(body.get("error") or "Error creating checkout session")
        return body["sessionId"]
