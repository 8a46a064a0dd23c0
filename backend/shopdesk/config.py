# backend/shopdesk/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the process working directory by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///shopdesk.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SHOP_NAME = os.environ.get("SHOP_NAME", "Labib Enterprise")

    # Shared login password. SHOP_PASSWORD_HASH (bcrypt) wins when set.
    SHOP_PASSWORD = os.environ.get("SHOP_PASSWORD", "admin")
    SHOP_PASSWORD_HASH = os.environ.get("SHOP_PASSWORD_HASH")

    # "sql" persists collections in SQLALCHEMY_DATABASE_URI, "memory" keeps them per process
    SHOP_STORAGE = os.environ.get("SHOP_STORAGE", "sql")

    # "max_suffix" reuses the id of a deleted tail record, "counter" never reuses ids
    ID_STRATEGY = os.environ.get("ID_STRATEGY", "max_suffix")

    LOW_STOCK_THRESHOLD = int(os.environ.get("LOW_STOCK_THRESHOLD", "10"))
    SCAN_COOLDOWN_SECONDS = float(os.environ.get("SCAN_COOLDOWN_SECONDS", "1.5"))
