import jwt
from datetime import datetime, timedelta, timezone
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

RESET_PURPOSE = "password_reset"


def hash_password(password):
    return generate_password_hash(password)


def verify_password(stored, password):
    """
    Check ``password`` against a stored credential.
    Returns False for users without a credential.
    """
    if not stored or not password:
        return False
    return check_password_hash(stored, password)


def generate_token(usuario):
    """
    Generate JWT access token for a user.
    """
    payload = {
        "id": str(usuario["id"]),
        "email": usuario.get("email"),
        "exp": datetime.now(timezone.utc) + timedelta(hours=current_app.config["TOKEN_EXPIRE_HOURS"])
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def verify_token(token):
    """
    Verify JWT token and return payload if valid, else None.
    """
    if not token:
        return None
    if token.startswith("Bearer "):
        token = token[len("Bearer "):]
    try:
        return jwt.decode(token, current_app.config["SECRET_KEY"], algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        return None  # Token expired
    except jwt.InvalidTokenError:
        return None  # Invalid token


def generate_reset_token(email):
    minutes = current_app.config["RESET_TOKEN_EXPIRE_MINUTES"]
    payload = {
        "email": email,
        "purpose": RESET_PURPOSE,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes)
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def verify_reset_token(token):
    """Return the email a reset token was issued for, or None."""
    payload = verify_token(token)
    if not payload or payload.get("purpose") != RESET_PURPOSE:
        return None
    return payload.get("email")
