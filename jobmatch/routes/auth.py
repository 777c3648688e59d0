import re

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, jwt_required

from jobmatch.errors import NotFound, ValidationError
from jobmatch.extensions import db
from jobmatch.models import User
from jobmatch.security.context import current_context

bp = Blueprint("auth", __name__, url_prefix="/api")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8


def _credentials():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("A valid email is required")
    if not password:
        raise ValidationError("password is required")
    return email, password


@bp.post("/auth/register")
def register():
    """Create an account and return an access token."""
    email, password = _credentials()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if User.query.filter_by(email=email).first():
        return jsonify({
            "error": "Conflict",
            "message": "An account with this email already exists",
        }), 409

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    current_app.logger.info(f"User registered: {user.id}")
    return jsonify({
        "user": user.to_dict(),
        "access_token": create_access_token(identity=user.id),
    }), 201


@bp.post("/auth/login")
def login():
    email, password = _credentials()

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        current_app.logger.warning(f"Failed login attempt for email: {email}")
        return jsonify({
            "error": "Authentication failed",
            "message": "Invalid credentials",
        }), 401

    return jsonify({
        "user": user.to_dict(),
        "access_token": create_access_token(identity=user.id),
    }), 200


@bp.get("/me")
@jwt_required()
def me():
    ctx = current_context()
    user = db.session.get(User, ctx.user_id)
    if user is None:
        raise NotFound("User not found")
    return jsonify(user.to_dict()), 200
