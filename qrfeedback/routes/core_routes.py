from flask import Blueprint

from ..extensions import cache_state
from ..utils.response import api_response

core_bp = Blueprint("core", __name__)


@core_bp.route("/")
def root():
    return api_response(True, "QRFeedback API. Forms, QR codes and responses live under /forms and /feedback.", None)


@core_bp.route("/health")
def health():
    return {"status": "ok", "cache": cache_state()}, 200
