"""Initial page reads raced against a timer.

``Loader.load`` runs one read, or several in parallel, and waits up to
``timeout`` seconds. A read that is still running when the timer fires is
abandoned: its thread keeps going and its late result is ignored. After the
first timeout the page is told the connection is slow and the read is retried
once after ``retry_backoff``; a second timeout is final and the page has to
offer a manual refresh.

A ``NotFoundError`` from any read means the record is missing or not ours.
That is reported at once as ``DENIED`` with no retry, followed by
``on_redirect`` after ``redirect_delay``.

States: loading -> loaded | timeout-retry -> loading | denied -> redirecting | failed
"""
import enum
import logging
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any

from ..utils.errors import NotFoundError, QRFeedbackError
from . import settings

logger = logging.getLogger(__name__)

SLOW_CONNECTION_MESSAGE = "Slow connection detected. Retrying..."
LOAD_FAILED_MESSAGE = "Loading is taking too long. Please refresh the page."


class LoadState(enum.Enum):
    LOADING = "loading"
    LOADED = "loaded"
    TIMEOUT_RETRY = "timeout-retry"
    DENIED = "denied"
    REDIRECTING = "redirecting"
    FAILED = "failed"


class LoadTimeoutError(QRFeedbackError):
    error_code = "timeout"


@dataclass
class LoadResult:
    state: LoadState
    value: Any = None
    error: Exception | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.state is LoadState.LOADED


class _TimedOut(Exception):
    pass


class Loader:
    def __init__(
        self,
        timeout=None,
        retry_backoff=None,
        redirect_delay=None,
        sleep=time.sleep,
        on_state=None,
        on_redirect=None,
    ):
        self.timeout = settings.LOAD_TIMEOUT_SECONDS if timeout is None else timeout
        self.retry_backoff = settings.RETRY_BACKOFF_SECONDS if retry_backoff is None else retry_backoff
        self.redirect_delay = settings.REDIRECT_DELAY_SECONDS if redirect_delay is None else redirect_delay
        self.sleep = sleep
        self.on_state = on_state
        self.on_redirect = on_redirect
        self.state = LoadState.LOADING
        self.history = []

    def _set(self, state):
        self.state = state
        self.history.append(state)
        if self.on_state:
            self.on_state(state)

    def _race(self, reads):
        # Fresh pool per attempt; abandoned reads keep their own threads
        executor = ThreadPoolExecutor(max_workers=len(reads), thread_name_prefix="qrfeedback-load")
        try:
            futures = [executor.submit(read) for read in reads]
            done, pending = wait(futures, timeout=self.timeout, return_when=FIRST_EXCEPTION)
        finally:
            executor.shutdown(wait=False)

        failed = [f for f in done if f.exception() is not None]
        if failed:
            # A denial wins over any other failure in the same batch
            denied = [f for f in failed if isinstance(f.exception(), NotFoundError)]
            raise (denied or failed)[0].exception()

        if pending:
            raise _TimedOut()

        return [f.result() for f in futures]

    def load(self, *reads) -> LoadResult:
        """Run ``reads`` (zero-argument callables) and join their results."""
        if not reads:
            raise ValueError("load() needs at least one read")

        attempts = 0
        while True:
            attempts += 1
            self._set(LoadState.LOADING)
            try:
                values = self._race(reads)
            except _TimedOut:
                if attempts == 1:
                    logger.warning("Load timed out after %ss, retrying once", self.timeout)
                    self._set(LoadState.TIMEOUT_RETRY)
                    self.sleep(self.retry_backoff)
                    continue
                logger.error("Load timed out twice, giving up")
                self._set(LoadState.FAILED)
                return LoadResult(LoadState.FAILED, error=LoadTimeoutError(LOAD_FAILED_MESSAGE), attempts=attempts)
            except NotFoundError as e:
                self._set(LoadState.DENIED)
                self.sleep(self.redirect_delay)
                self._set(LoadState.REDIRECTING)
                if self.on_redirect:
                    self.on_redirect()
                return LoadResult(LoadState.REDIRECTING, error=e, attempts=attempts)
            except Exception as e:
                logger.warning("Load failed: %s", e)
                self._set(LoadState.FAILED)
                return LoadResult(LoadState.FAILED, error=e, attempts=attempts)

            self._set(LoadState.LOADED)
            value = values[0] if len(values) == 1 else tuple(values)
            return LoadResult(LoadState.LOADED, value=value, attempts=attempts)
