from functools import wraps

import jwt
from flask import Blueprint, request, current_app
from werkzeug.security import generate_password_hash, check_password_hash

from ..extensions import db
from ..models.profile import Profile
from ..schemas.form_schema import serialize_profile
from ..utils.jwt_helper import encode_token, profile_id_from_token
from ..utils.response import api_response


auth_bp = Blueprint("auth", __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}

    email = (data.get('email') or "").strip().lower()
    password = data.get('password') or ""
    full_name = (data.get('full_name') or "").strip()

    if not email or not password:
        return api_response(False, "Email and password are required", None, error_code="validation")

    existing = Profile.query.filter_by(email=email).first()
    if existing:
        return api_response(False, "User already exists", None, error_code="validation")

    profile = Profile(
        email=email,
        full_name=full_name or None,
        password=generate_password_hash(password),
        plan="free",
    )
    db.session.add(profile)
    db.session.commit()
    current_app.logger.info(f"Registered profile {profile.id}")

    return api_response(True, "Signup successful", {
        "token": encode_token(profile.id),
        "profile": serialize_profile(profile),
    })


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or "").strip().lower()
    password = data.get('password') or ""

    profile = Profile.query.filter_by(email=email).first()
    if not profile:
        return api_response(False, "Account does not exist. Please sign up first.", None, error_code="unauthorized")

    if check_password_hash(profile.password, password):
        return api_response(True, "Login successful", {"token": encode_token(profile.id)})

    return api_response(False, "Invalid credentials", None, error_code="unauthorized")


def _token_from_header():
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        return None
    if " " in auth_header:
        return auth_header.split(" ")[1]
    return auth_header


def current_profile_or_none():
    """Profile for the bearer token if one is present and valid."""
    token = _token_from_header()
    if not token:
        return None
    try:
        user_id = profile_id_from_token(token)
    except jwt.InvalidTokenError:
        return None
    return db.session.get(Profile, user_id) if user_id else None


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _token_from_header()
        if not token:
            return api_response(False, "Token is missing!", None, error_code="unauthorized")

        try:
            user_id = profile_id_from_token(token)
        except jwt.ExpiredSignatureError:
            return api_response(False, "Token has expired!", None, error_code="unauthorized")
        except jwt.InvalidTokenError:
            return api_response(False, "Invalid token!", None, error_code="unauthorized")

        current_user = db.session.get(Profile, user_id) if user_id else None
        if not current_user:
            return api_response(False, "User not found!", None, error_code="unauthorized")

        return f(current_user, *args, **kwargs)

    return decorated


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user):
    return api_response(True, "Profile", {"profile": serialize_profile(current_user)})
