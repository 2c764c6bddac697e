import logging
import time
from dataclasses import dataclass

from . import settings

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Toast:
    message: str
    severity: str
    expires_at: float


class ToastCenter:
    """Non-blocking notices. Each toast disappears after ``duration`` seconds."""

    def __init__(self, duration=None, clock=time.monotonic):
        self.duration = settings.TOAST_SECONDS if duration is None else duration
        self.clock = clock
        self._toasts = []

    def show(self, message: str, severity: str = SUCCESS) -> Toast:
        if severity not in (SUCCESS, ERROR):
            raise ValueError(f"Unknown toast severity: {severity}")
        toast = Toast(message, severity, self.clock() + self.duration)
        self._toasts.append(toast)
        log = logger.error if severity == ERROR else logger.info
        log("toast: %s", message)
        return toast

    def success(self, message: str) -> Toast:
        return self.show(message, SUCCESS)

    def error(self, message: str) -> Toast:
        return self.show(message, ERROR)

    def active(self) -> list:
        now = self.clock()
        self._toasts = [t for t in self._toasts if t.expires_at > now]
        return list(self._toasts)

    @property
    def latest(self) -> Toast | None:
        current = self.active()
        return current[-1] if current else None
