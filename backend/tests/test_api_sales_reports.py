"""
Sale flow and report API tests.
"""

import pytest

from conftest import TODAY


@pytest.fixture
def seeded(client, headers):
    client.post("/api/products", json={"name": "Notebook", "category": "Stationery",
                                       "purchasePrice": 5, "sellingPrice": 10, "quantity": 5}, headers=headers)
    client.post("/api/customers", json={"name": "Rahim", "phone": "017"}, headers=headers)
    return headers


class TestSalesApi:
    def test_validate_cart(self, client, seeded):
        resp = client.post("/api/sales/cart/validate",
                           json={"items": [{"id": "P001", "quantity": 2}], "discount": 1}, headers=seeded)
        assert resp.status_code == 200
        assert resp.json["subtotal"] == 20.0
        assert resp.json["finalAmount"] == 19.0

    def test_validate_cart_over_stock(self, client, seeded):
        resp = client.post("/api/sales/cart/validate",
                           json={"items": [{"id": "P001", "quantity": 6}]}, headers=seeded)
        assert resp.status_code == 400
        assert resp.json["details"]["available"] == 5

    def test_cash_sale(self, client, seeded):
        resp = client.post("/api/sales", json={"items": [{"id": "P001", "quantity": 2}]}, headers=seeded)
        assert resp.status_code == 201
        sale = resp.json["sale"]
        assert sale["id"] == "S001"
        assert sale["finalAmount"] == 20.0
        assert sale["paymentMethod"] == "Cash"
        assert sale["customerName"] == "Walk-in Customer"
        assert sale["items"][0]["cartQuantity"] == 2
        assert resp.json["products"][0]["quantity"] == 3

        assert client.get("/api/products/P001", headers=seeded).json["quantity"] == 3
        assert client.get("/api/sales/S001", headers=seeded).json["sale"]["date"] == TODAY.isoformat()

    def test_due_sale_then_payment(self, client, seeded):
        resp = client.post("/api/sales", json={"items": [{"id": "P001", "quantity": 2}],
                                               "paymentMethod": "Due", "customerId": "C001"}, headers=seeded)
        assert resp.status_code == 201
        assert resp.json["customer"]["dueAmount"] == 20.0

        resp = client.post("/api/customers/C001/payments", json={"amount": 15}, headers=seeded)
        assert resp.json["customer"]["dueAmount"] == 5.0
        assert len(resp.json["customer"]["payments"]) == 1

    @pytest.mark.parametrize(
        "body,message",
        [
            ({"items": []}, "Cart is empty!"),
            ({"items": [{"id": "P001", "quantity": 1}], "paymentMethod": "Due"},
             "Please select a customer for Due payments."),
            ({"items": [{"id": "P404", "quantity": 1}]}, "Product not found!"),
            ({"items": [{"id": "P001", "quantity": 1}], "discount": "nan"}, "discount must be a finite number"),
            ({"items": [{"id": "P001", "quantity": 1}], "discount": "-inf"}, "discount must be a finite number"),
        ],
    )
    def test_rejected_sales(self, client, seeded, body, message):
        resp = client.post("/api/sales", json=body, headers=seeded)
        assert resp.status_code == 400
        assert resp.json["error"] == message
        assert client.get("/api/sales", headers=seeded).json["count"] == 0

    def test_list_sales_by_date(self, client, seeded):
        client.post("/api/sales", json={"items": [{"id": "P001", "quantity": 1}]}, headers=seeded)
        today = TODAY.isoformat()

        assert client.get(f"/api/sales?start={today}&end={today}", headers=seeded).json["count"] == 1
        assert client.get("/api/sales?end=2000-01-01", headers=seeded).json["count"] == 0
        assert client.get("/api/sales/S999", headers=seeded).status_code == 404


class TestReportsApi:
    def test_summary(self, client, seeded):
        client.post("/api/sales", json={"items": [{"id": "P001", "quantity": 2}]}, headers=seeded)
        client.post("/api/expenses", json={"title": "Bags", "category": "Supplies", "amount": 4}, headers=seeded)

        resp = client.get("/api/reports/summary?preset=Today", headers=seeded)
        assert resp.status_code == 200
        assert resp.json["preset"] == "Today"
        summary = resp.json["summary"]
        assert summary["grossProfit"] == 10.0
        assert summary["grossProfitMargin"] == 50.0
        assert summary["netProfit"] == 6.0
        assert resp.json["categories"] == [{"name": "Stationery", "value": 20.0}]

    def test_summary_defaults_and_errors(self, client, seeded):
        body = client.get("/api/reports/summary", headers=seeded).json
        assert body["preset"] == "This Month"
        assert body["start"] == "2026-10-01"

        assert client.get("/api/reports/summary?preset=Decade", headers=seeded).status_code == 400
        assert client.get("/api/reports/summary?start=2026-10-10&end=2026-10-01",
                          headers=seeded).status_code == 400

    def test_monthly_and_dashboard(self, client, seeded):
        client.post("/api/sales", json={"items": [{"id": "P001", "quantity": 2}]}, headers=seeded)

        monthly = client.get("/api/reports/monthly", headers=seeded).json
        assert monthly["year"] == 2026
        assert monthly["months"][9] == {"month": "Oct", "totalSales": 20.0}

        dashboard = client.get("/api/reports/dashboard", headers=seeded).json
        assert dashboard["todaySales"] == 20.0
        assert dashboard["totalStockValue"] == 15.0
        assert dashboard["lowStockCount"] == 1

    def test_export_csv(self, client, seeded):
        client.post("/api/sales", json={"items": [{"id": "P001", "quantity": 2}]}, headers=seeded)

        resp = client.get("/api/reports/export.csv?preset=Today", headers=seeded)
        assert resp.status_code == 200
        assert resp.mimetype == "text/csv"
        today = TODAY.isoformat()
        assert f'filename="Shop_Report_{today}_to_{today}.csv"' in resp.headers["Content-Disposition"]

        lines = resp.get_data(as_text=True).split("\n")
        assert lines[0] == "Type,Date,ID,Description,Category,Amount,Payment Method"
        assert lines[1] == f'Sale,{today},S001,"Notebook x2","Stationery",20.00,Cash'
