"""
Products, expenses and customers API tests.
"""

import pytest

from shopdesk.services.shop_service import get_shop
from shopdesk.services.storage_service import StorageError

from conftest import TODAY


NOTEBOOK = {
    "name": "Notebook",
    "category": "Stationery",
    "purchasePrice": 5,
    "sellingPrice": 10,
    "quantity": 5,
}


class TestProductsApi:
    def test_create_and_list(self, client, headers):
        resp = client.post("/api/products", json=NOTEBOOK, headers=headers)
        assert resp.status_code == 201
        assert resp.json["id"] == "P001"
        assert resp.json["dateAdded"] == TODAY.isoformat()

        resp = client.get("/api/products", headers=headers)
        assert resp.status_code == 200
        assert resp.json["count"] == 1
        assert resp.json["items"][0]["sellingPrice"] == 10.0

    @pytest.mark.parametrize(
        "payload",
        [
            {**NOTEBOOK, "quantity": -1},
            {**NOTEBOOK, "quantity": 1.5},
            {**NOTEBOOK, "sellingPrice": "ten"},
            {**NOTEBOOK, "sellingPrice": "inf"},
            {**NOTEBOOK, "purchasePrice": "NaN"},
            {**NOTEBOOK, "name": ""},
            {**NOTEBOOK, "color": "red"},
            {k: v for k, v in NOTEBOOK.items() if k != "name"},
        ],
    )
    def test_create_rejects_bad_payload(self, client, headers, payload):
        resp = client.post("/api/products", json=payload, headers=headers)
        assert resp.status_code == 400
        assert "error" in resp.json

    def test_update_get_delete(self, client, headers):
        client.post("/api/products", json=NOTEBOOK, headers=headers)

        resp = client.put("/api/products/P001", json={"quantity": 12}, headers=headers)
        assert resp.status_code == 200
        assert resp.json["quantity"] == 12
        assert resp.json["name"] == "Notebook"

        assert client.get("/api/products/P001", headers=headers).json["quantity"] == 12

        assert client.delete("/api/products/P001", headers=headers).status_code == 200
        assert client.get("/api/products/P001", headers=headers).status_code == 404

    def test_unknown_product(self, client, headers):
        assert client.put("/api/products/P404", json={"quantity": 1}, headers=headers).status_code == 404
        assert client.delete("/api/products/P404", headers=headers).status_code == 404

    def test_filters(self, client, headers):
        client.post("/api/products", json=NOTEBOOK, headers=headers)
        client.post("/api/products", json={**NOTEBOOK, "name": "Chips", "category": "Snacks",
                                           "sellingPrice": 1.5, "quantity": 50}, headers=headers)
        client.post("/api/products", json={**NOTEBOOK, "name": "Glue", "quantity": 0}, headers=headers)

        def names(**params):
            resp = client.get("/api/products", query_string=params, headers=headers)
            assert resp.status_code == 200
            return [p["name"] for p in resp.json["items"]]

        assert names(q="chi") == ["Chips"]
        assert names(q="p002") == ["Chips"]
        assert names(category="Stationery") == ["Notebook", "Glue"]
        assert names(category="All") == ["Notebook", "Chips", "Glue"]
        assert names(min_price=2) == ["Notebook", "Glue"]
        assert names(max_price=2) == ["Chips"]
        assert names(stock="Low Stock") == ["Notebook", "Glue"]
        assert names(stock="Out of Stock") == ["Glue"]
        assert names(stock="In Stock") == ["Notebook", "Chips"]

        assert client.get("/api/products?stock=Plenty", headers=headers).status_code == 400
        assert client.get("/api/products/categories", headers=headers).json["items"] == ["Snacks", "Stationery"]

    def test_checkout_search(self, client, headers):
        client.post("/api/products", json=NOTEBOOK, headers=headers)
        resp = client.get("/api/products/search?q=p001", headers=headers)
        assert resp.json["exact"]["id"] == "P001"
        assert len(resp.json["items"]) == 1

        resp = client.get("/api/products/search?q=note", headers=headers)
        assert resp.json["exact"] is None


class TestExpensesApi:
    def test_create_list_and_total(self, client, headers):
        resp = client.post("/api/expenses", json={"title": "Rent", "category": "Rent", "amount": 100,
                                                  "date": "2026-10-01"}, headers=headers)
        assert resp.status_code == 201
        assert resp.json["id"] == "E001"

        client.post("/api/expenses", json={"title": "Tea", "category": "Food", "amount": 2.5}, headers=headers)

        body = client.get("/api/expenses", headers=headers).json
        assert body["count"] == 2
        assert body["total"] == 102.5
        assert body["categories"] == ["Food", "Rent"]
        assert body["items"][1]["date"] == TODAY.isoformat()

        body = client.get("/api/expenses?category=Food", headers=headers).json
        assert [e["title"] for e in body["items"]] == ["Tea"]

    def test_invalid_date(self, client, headers):
        resp = client.post("/api/expenses", json={"title": "Rent", "category": "Rent", "amount": 1,
                                                  "date": "01/10/2026"}, headers=headers)
        assert resp.status_code == 400

    def test_update_and_delete(self, client, headers):
        client.post("/api/expenses", json={"title": "Rent", "category": "Rent", "amount": 100}, headers=headers)

        resp = client.put("/api/expenses/E001", json={"amount": 90}, headers=headers)
        assert resp.status_code == 200
        assert resp.json["amount"] == 90.0

        assert client.delete("/api/expenses/E001", headers=headers).status_code == 200
        assert client.delete("/api/expenses/E001", headers=headers).status_code == 404


class TestCustomersApi:
    def test_create_search_and_payments(self, client, headers):
        resp = client.post("/api/customers", json={"name": "Rahim", "phone": "01711111111"}, headers=headers)
        assert resp.status_code == 201
        assert resp.json == {"id": "C001", "name": "Rahim", "phone": "01711111111",
                             "dueAmount": 0.0, "payments": []}

        client.put("/api/customers/C001", json={"dueAmount": 20}, headers=headers)

        resp = client.post("/api/customers/C001/payments", json={"amount": 15}, headers=headers)
        assert resp.status_code == 201
        assert resp.json["customer"]["dueAmount"] == 5.0
        assert resp.json["payment"]["date"] == TODAY.isoformat()

        history = client.get("/api/customers/C001/payments", headers=headers).json
        assert history["count"] == 1

        body = client.get("/api/customers?q=0171", headers=headers).json
        assert body["count"] == 1
        assert body["totalDue"] == 5.0

    def test_payment_errors(self, client, headers):
        client.post("/api/customers", json={"name": "Rahim", "phone": "1"}, headers=headers)

        assert client.post("/api/customers/C001/payments", json={}, headers=headers).status_code == 400
        assert client.post("/api/customers/C001/payments", json={"amount": 0}, headers=headers).status_code == 400
        assert client.post("/api/customers/C404/payments", json={"amount": 5}, headers=headers).status_code == 404

    def test_payments_cannot_be_edited_through_customer(self, client, headers):
        client.post("/api/customers", json={"name": "Rahim", "phone": "1"}, headers=headers)
        resp = client.put("/api/customers/C001", json={"payments": []}, headers=headers)
        assert resp.status_code == 400

    @pytest.mark.parametrize("amount", ["NaN", "nan", "Infinity"])
    def test_non_finite_payment_rejected(self, client, headers, amount):
        client.post("/api/customers", json={"name": "Rahim", "phone": "1"}, headers=headers)

        resp = client.post("/api/customers/C001/payments", json={"amount": amount}, headers=headers)
        assert resp.status_code == 400
        assert client.get("/api/customers/C001", headers=headers).json["payments"] == []

    def test_bare_nan_json_token_rejected(self, client, headers):
        client.post("/api/customers", json={"name": "Rahim", "phone": "1"}, headers=headers)

        resp = client.post("/api/customers/C001/payments", data='{"amount": NaN}',
                           content_type="application/json", headers=headers)
        assert resp.status_code == 400
        assert client.get("/api/customers/C001", headers=headers).json["dueAmount"] == 0.0


class TestStorageFailures:
    """A failing store write surfaces as a logged JSON 500, not an HTML error page."""

    @pytest.fixture
    def broken_store(self, app, monkeypatch):
        def broken(values):
            raise StorageError("disk full")

        monkeypatch.setattr(get_shop().store, "write_many", broken)

    @pytest.mark.parametrize(
        "create_path,create_body,record_path,update_body",
        [
            ("/api/products", NOTEBOOK, "/api/products/P001", {"quantity": 1}),
            ("/api/expenses", {"title": "Rent", "category": "Rent", "amount": 5}, "/api/expenses/E001", {"amount": 6}),
            ("/api/customers", {"name": "Rahim", "phone": "1"}, "/api/customers/C001", {"phone": "2"}),
        ],
    )
    def test_update_and_delete_return_json_500(self, client, headers, request,
                                               create_path, create_body, record_path, update_body):
        assert client.post(create_path, json=create_body, headers=headers).status_code == 201
        request.getfixturevalue("broken_store")

        resp = client.put(record_path, json=update_body, headers=headers)
        assert resp.status_code == 500
        assert resp.json == {"error": "Internal server error"}

        resp = client.delete(record_path, headers=headers)
        assert resp.status_code == 500
        assert resp.json == {"error": "Internal server error"}
