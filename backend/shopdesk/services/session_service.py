# Overview: Session tokens issued after login; stored hashed, ended only by logout.

"""
Session Token Management Service

- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage
- No expiry: a session lasts until logout
"""

import secrets
import hashlib

from ..extensions import db
from ..models import SessionToken
from shopdesk.time_utils import utcnow


def generate_token() -> str:
    return secrets.token_hex(32)  # 32 bytes = 64 hex characters


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(user_agent: str | None = None, ip_address: str | None = None) -> tuple[SessionToken, str]:
    """
    Returns (session_record, plaintext_token).
    Client receives plaintext_token, database stores only the hash.
    """
    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        user_agent=(user_agent or "")[:255] or None,
        ip_address=ip_address,
        is_revoked=False,
    )
    db.session.add(session)
    db.session.commit()
    return session, plaintext_token


def validate_session(token: str) -> SessionToken | None:
    """Active session for a plaintext token, touching last_used_at; None otherwise."""
    if not token:
        return None

    session = db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).first()
    if not session or session.is_revoked:
        return None

    session.last_used_at = utcnow()
    db.session.commit()
    return session


def revoke_session(token: str) -> bool:
    session = db.session.query(SessionToken).filter_by(token_hash=hash_token(token)).first()
    if not session or session.is_revoked:
        return False

    session.is_revoked = True
    session.revoked_at = utcnow()
    db.session.commit()
    return True


def revoke_all_sessions() -> int:
    count = (
        db.session.query(SessionToken)
        .filter_by(is_revoked=False)
        .update({"is_revoked": True, "revoked_at": utcnow()})
    )
    db.session.commit()
    return count
