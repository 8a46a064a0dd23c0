# Overview: Shared-password check for the single shop login.

"""
Authentication Service

The whole application sits behind one shared password. There are no user
accounts and no lockout.

- SHOP_PASSWORD_HASH set: bcrypt check against that hash.
- otherwise: constant-time comparison with the SHOP_PASSWORD literal.
"""

import hmac

import bcrypt
from flask import current_app


class PasswordConfigError(Exception):
    """Raised when neither SHOP_PASSWORD nor SHOP_PASSWORD_HASH is usable."""
    pass


def hash_password(password: str) -> str:
    """bcrypt hash suitable for SHOP_PASSWORD_HASH."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in configuration
        current_app.logger.error("SHOP_PASSWORD_HASH is not a valid bcrypt hash")
        return False


def check_password(password: str | None) -> bool:
    if not password:
        return False

    password_hash = current_app.config.get("SHOP_PASSWORD_HASH")
    if password_hash:
        return verify_password(password, password_hash)

    expected = current_app.config.get("SHOP_PASSWORD")
    if not expected:
        raise PasswordConfigError("SHOP_PASSWORD is not configured")
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))
