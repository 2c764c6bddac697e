import json
import redis
from flask import current_app

from .. import extensions


def _key(form_id: str) -> str:
    return f"form:{form_id}"


def get_cached_form(form_id: str) -> dict | None:
    if not extensions.redis_client:
        return None
    try:
        cached = extensions.redis_client.get(_key(form_id))
        return json.loads(cached) if cached else None
    except (redis.RedisError, ValueError) as e:
        current_app.logger.warning(f"Form cache read failed: {e}")
        return None


def cache_form(form_id: str, payload: dict):
    if not extensions.redis_client:
        return
    try:
        ttl = int(current_app.config.get("REDIS_TTL", 3600))
        extensions.redis_client.setex(_key(form_id), ttl, json.dumps(payload))
    except redis.RedisError as e:
        current_app.logger.warning(f"Form cache write failed: {e}")


def drop_cached_form(form_id: str):
    if not extensions.redis_client:
        return
    try:
        extensions.redis_client.delete(_key(form_id))
    except redis.RedisError as e:
        current_app.logger.warning(f"Form cache delete failed: {e}")
