# qrfeedback/extensions.py

from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import redis

db = SQLAlchemy()
cors = CORS()

# Optional cache for public feedback forms; None when disabled or unreachable
redis_client = None


def init_redis(app):
    """Connect the form cache from REDIS_URL. Failure leaves the cache off."""
    global redis_client
    redis_client = None

    url = app.config.get("REDIS_URL")
    if not url:
        app.logger.info("No REDIS_URL configured, form cache disabled.")
        return

    try:
        client = redis.Redis.from_url(url, decode_responses=True)
        client.ping()
    except redis.RedisError as exc:
        app.logger.warning(f"Redis unavailable, form cache disabled: {exc}")
        return

    redis_client = client
    app.logger.info("Form cache connected.")


def cache_state() -> str:
    if redis_client is None:
        return "disabled"
    try:
        redis_client.ping()
        return "up"
    except redis.RedisError:
        return "down"
