"""
Pytest fixtures for shopdesk backend tests.

Provides an app on in-memory SQLite, a test client, an authenticated
header set, and a Shop over an in-memory key-value store with a fixed
calendar date.
"""

from datetime import date

import pytest

from shopdesk import create_app
from shopdesk.extensions import db
from shopdesk.services.shop_service import Shop, set_shop
from shopdesk.services.storage_service import InMemoryKeyValueStore, SqlKeyValueStore


TODAY = date(2026, 10, 21)  # a Wednesday
FIXED_MILLIS = 1_792_540_800_000


def _fixed_today():
    return TODAY


def _fixed_clock():
    return FIXED_MILLIS


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SHOP_PASSWORD': 'admin',
        'SHOP_PASSWORD_HASH': None,
        'SHOP_STORAGE': 'sql',
        'ID_STRATEGY': 'max_suffix',
    })

    with app.app_context():
        db.create_all()
        set_shop(Shop(SqlKeyValueStore(), today=_fixed_today, clock=_fixed_clock))
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def store():
    return InMemoryKeyValueStore()


@pytest.fixture(scope='function')
def shop(store):
    """Shop over an in-memory store; no Flask app needed."""
    return Shop(store, today=_fixed_today, clock=_fixed_clock)


@pytest.fixture(scope='function')
def stocked_shop(shop):
    """Shop with two products, one customer and one expense."""
    shop.products.add({
        "name": "Notebook",
        "category": "Stationery",
        "purchasePrice": 5,
        "sellingPrice": 10,
        "quantity": 5,
    })
    shop.products.add({
        "name": "Pen",
        "category": "Stationery",
        "purchasePrice": 1,
        "sellingPrice": 2.5,
        "quantity": 100,
    })
    shop.customers.add({"name": "Rahim", "phone": "01700000000"})
    return shop


def get_auth_token(client, password: str = "admin") -> str:
    """Helper to get auth token for the shop password."""
    response = client.post('/api/auth/login', json={'password': password})
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def headers(client):
    token = get_auth_token(client)
    assert token, "login with the configured shop password failed"
    return auth_headers(token)
