import os

# Initial page reads
LOAD_TIMEOUT_SECONDS = float(os.getenv("QRFEEDBACK_LOAD_TIMEOUT", 15))
RETRY_BACKOFF_SECONDS = float(os.getenv("QRFEEDBACK_RETRY_BACKOFF", 2))
REDIRECT_DELAY_SECONDS = float(os.getenv("QRFEEDBACK_REDIRECT_DELAY", 2))

TOAST_SECONDS = float(os.getenv("QRFEEDBACK_TOAST_SECONDS", 5))

# Per-request socket timeout for the HTTP client; the loader's own timer is separate
REQUEST_TIMEOUT_SECONDS = float(os.getenv("QRFEEDBACK_REQUEST_TIMEOUT", 30))

API_URL = os.getenv("QRFEEDBACK_API_URL", "http://localhost:5000")
