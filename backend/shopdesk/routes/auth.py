# Overview: Flask API routes for the shared-password login gate.

# backend/shopdesk/routes/auth.py
"""
Authentication API routes

- One shared password for the whole shop (no accounts)
- Wrong password: inline 401 message, no lockout or retry limit
- Session tokens live until logout
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..decorators import require_auth, bearer_token


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Exchange the shop password for a session token.

    Token must be included in Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        password = data.get("password")

        if not password:
            return jsonify({"error": "password required"}), 400

        if not auth_service.check_password(password):
            return jsonify({"error": "Incorrect password"}), 401

        session, token = session_service.create_session(
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )

        return jsonify({
            "token": token,
            "session": session.to_dict(),
            "shop_name": current_app.config["SHOP_NAME"],
            "message": "Login successful"
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """Revoke the session token in the Authorization header."""
    try:
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authorization header required"}), 401

        if not session_service.revoke_session(token):
            return jsonify({"error": "Invalid or expired token"}), 401

        return jsonify({"message": "Logout successful"}), 200

    except Exception:
        current_app.logger.exception("Failed to logout")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/session")
@require_auth
def session_route():
    return jsonify({
        "session": g.session_token.to_dict(),
        "shop_name": current_app.config["SHOP_NAME"],
    }), 200
