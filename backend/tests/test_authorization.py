"""
Authorization tests for the shared-password login gate.

Verifies:
- Unauthenticated requests return 401
- Wrong password is rejected, right password issues a token
- Logout revokes the token
- SHOP_PASSWORD_HASH switches the check to bcrypt
"""

import pytest

from shopdesk.services.auth_service import hash_password

from conftest import auth_headers, get_auth_token


# =============================================================================
# UNAUTHENTICATED ACCESS — 401
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/products"),
            ("POST", "/api/products"),
            ("GET", "/api/products/categories"),
            ("GET", "/api/sales"),
            ("POST", "/api/sales"),
            ("POST", "/api/sales/cart/validate"),
            ("GET", "/api/expenses"),
            ("GET", "/api/customers"),
            ("POST", "/api/customers/C001/payments"),
            ("GET", "/api/reports/summary"),
            ("GET", "/api/reports/dashboard"),
            ("GET", "/api/reports/export.csv"),
            ("GET", "/api/auth/session"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_bogus_token_rejected(self, client):
        resp = client.get("/api/products", headers=auth_headers("not-a-real-token"))
        assert resp.status_code == 401
        assert resp.json["error"] == "Invalid or expired token"

    def test_health_is_public(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json["status"] == "healthy"
        assert resp.json["counts"]["products"] == 0


# =============================================================================
# LOGIN / LOGOUT
# =============================================================================


class TestLogin:
    def test_wrong_password(self, client):
        resp = client.post("/api/auth/login", json={"password": "nope"})
        assert resp.status_code == 401
        assert resp.json["error"] == "Incorrect password"

    def test_missing_password(self, client):
        resp = client.post("/api/auth/login", json={})
        assert resp.status_code == 400

    def test_wrong_password_has_no_lockout(self, client):
        for _ in range(10):
            assert client.post("/api/auth/login", json={"password": "nope"}).status_code == 401
        assert get_auth_token(client) is not None

    def test_login_returns_token_and_shop_name(self, client):
        resp = client.post("/api/auth/login", json={"password": "admin"})
        assert resp.status_code == 200
        assert len(resp.json["token"]) == 64
        assert resp.json["shop_name"] == "Labib Enterprise"
        assert resp.json["session"]["is_revoked"] is False

    def test_session_endpoint(self, client, headers):
        resp = client.get("/api/auth/session", headers=headers)
        assert resp.status_code == 200
        assert resp.json["shop_name"] == "Labib Enterprise"

    def test_logout_revokes_token(self, client, headers):
        resp = client.post("/api/auth/logout", headers=headers)
        assert resp.status_code == 200

        resp = client.get("/api/products", headers=headers)
        assert resp.status_code == 401

        # second logout with the same token fails
        resp = client.post("/api/auth/logout", headers=headers)
        assert resp.status_code == 401


class TestHashedPassword:
    def test_bcrypt_hash_is_used_when_configured(self, app, client):
        app.config["SHOP_PASSWORD_HASH"] = hash_password("s3cret")

        assert client.post("/api/auth/login", json={"password": "admin"}).status_code == 401
        assert client.post("/api/auth/login", json={"password": "s3cret"}).status_code == 200
