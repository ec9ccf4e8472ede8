from functools import wraps
from flask import request, g
from utils.errors import Unauthenticated, Forbidden
from utils.responses import error_response
from utils.tokens import decode_jwt


def _read_token():
    token = request.cookies.get("access_token")
    if token:
        return token
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return None

def current_user_id():
    user = g.get("user") or {}
    return user.get("user_id")

def current_user_role():
    user = g.get("user") or {}
    return user.get("role")

def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _read_token()
        if not token:
            return error_response(Unauthenticated())

        decoded = decode_jwt(token)
        if not decoded or not decoded.get("user_id"):
            return error_response(Unauthenticated("Invalid or expired token"))
        g.user = decoded

        return f(*args, **kwargs)

    return decorated_function

def role_required(*roles):
    """Use below @login_required."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if g.user.get("role") not in roles:
                return error_response(Forbidden("Unauthorized"))
            return f(*args, **kwargs)
        return decorated_function
    return decorator
