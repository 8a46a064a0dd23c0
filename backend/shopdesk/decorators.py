# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1]


def require_auth(f):
    """
    Require a valid session token.

    Sets g.session_token to the SessionToken record.
    Returns 401 when the Authorization header is missing, the token is
    unknown, or the session was revoked by logout.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        session = session_service.validate_session(token)
        if not session:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.session_token = session
        return f(*args, **kwargs)

    return decorated_function
