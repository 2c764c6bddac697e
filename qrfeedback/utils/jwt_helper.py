import datetime
import jwt
from flask import current_app


def encode_token(profile_id: str) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    days = int(current_app.config.get("TOKEN_TTL_DAYS", 7))
    payload = {
        "user_id": profile_id,
        "iat": now,
        "exp": now + datetime.timedelta(days=days),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token: str) -> dict:
    return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])


def profile_id_from_token(token: str) -> str | None:
    """Profile id carried by a token. Raises jwt.InvalidTokenError (or a subclass) when it is bad."""
    return decode_token(token).get("user_id")
