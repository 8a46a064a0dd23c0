# backend/shopdesk/routes/system.py
"""
System health endpoint.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import StoredCollection
from ..services.shop_service import get_shop
from shopdesk.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity by listing the stored collections.
    """
    start_time = time.time()
    try:
        rows = db.session.query(StoredCollection).order_by(StoredCollection.key.asc()).all()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"collections": [row.to_dict() for row in rows]},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    status = "healthy" if database["status"] == "healthy" else "unhealthy"
    body = {
        "status": status,
        "timestamp": to_utc_z(utcnow()),
        "shop_name": current_app.config["SHOP_NAME"],
        "checks": {"database": database},
    }
    if status == "healthy":
        body["counts"] = get_shop().stats()
    return body, (200 if status == "healthy" else 503)
