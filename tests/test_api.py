# tests/test_api.py

from decimal import Decimal

import httpx

from keyledger.api.deps import get_vin_decoder
from keyledger.core.vin import VinCache, VinDecoder
from keyledger.main import app
from tests.conftest import CRON_SECRET

INVOICE_BODY = {
    "customer_id": 1,
    "PO": "PO-7",
    "description": "Rekey front and back doors",
    "comments": "tenant pays cash",
    "vin": "",
    "startDate": "2026-10-01",
    "dueDate": "2026-10-15",
    "services": [
        {"service_id": 5, "servicename": "Lock change", "unitprice": 50,
         "istaxed": True, "quantity": 1},
        {"service_id": None, "servicename": "", "unitprice": 10},
    ],
}


def _create_invoice(client, **overrides):
    response = client.post("/invoices", json={**INVOICE_BODY, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["invoice_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_customer_upsert_by_name(client):
    created = client.post("/customers", json={"name": "Bob's Bakery", "address": "9 Elm"})
    assert created.status_code == 201
    customer_id = created.json()["customer_id"]

    updated = client.post("/customers", json={"name": "Bob's Bakery", "address": "10 Elm"})

    assert updated.json() == {
        "customer_id": customer_id,
        "customer_name": "Bob's Bakery",
        "customer_address": "10 Elm",
    }
    names = [c["customer_name"] for c in client.get("/customers").json()["customers"]]
    assert names == ["Acme Property", "Bob's Bakery", "Jane Doe"]


def test_customer_requires_name(client):
    response = client.post("/customers", json={"address": "nowhere"})

    assert response.status_code == 400
    assert response.json() == {"error": "Name is required"}


def test_customer_not_found(client):
    assert client.get("/customers/99").status_code == 404


def test_service_catalog_create_and_update(client):
    created = client.post(
        "/services",
        json={"servicename": "Safe opening", "unitprice": "120.5", "isparts": False},
    )
    assert created.status_code == 201
    service = created.json()
    assert Decimal(service["unitprice"]) == Decimal("120.50")
    assert service["istaxed"] is False

    updated = client.put(
        f"/services/{service['service_id']}",
        json={"description": "After hours", "unitprice": "150", "istaxed": True},
    )

    assert updated.status_code == 200
    assert updated.json()["description"] == "After hours"
    assert updated.json()["istaxed"] is True
    listed = [s["servicename"] for s in client.get("/services").json()["services"]]
    assert listed == ["Deadbolt", "Lock change", "Safe opening", "Service call"]


def test_service_update_missing(client):
    response = client.put("/services/404", json={"unitprice": "1"})

    assert response.status_code == 404


def test_invoice_lifecycle(client):
    invoice_id = _create_invoice(client)

    detail = client.get(f"/invoices/{invoice_id}").json()
    assert detail["status"] == "pending"
    assert Decimal(detail["subtotal"]) == Decimal("50.00")
    assert Decimal(detail["tax_total"]) == Decimal("4.38")
    assert Decimal(detail["totalamount"]) == Decimal("54.38")
    assert detail["duedate"] == "2026-10-15"
    assert len(detail["services"]) == 1

    listed = client.get("/invoices").json()["invoices"]
    assert [row["invoice_id"] for row in listed] == [invoice_id]
    assert "services" not in listed[0]

    paid = client.post(f"/invoices/{invoice_id}/payment", json={"paymentMethod": "Cash"})
    assert paid.status_code == 200
    assert paid.json()["message"] == "Invoice marked as paid with Cash"
    assert client.get(f"/invoices/{invoice_id}").json()["status"] == "paid"

    deleted = client.delete(f"/invoices/{invoice_id}")
    assert deleted.status_code == 200
    assert client.get(f"/invoices/{invoice_id}").status_code == 404


def test_invoice_update(client):
    invoice_id = _create_invoice(client)

    response = client.put(
        f"/invoices/{invoice_id}",
        json={
            **INVOICE_BODY,
            "services": [
                {"service_id": 6, "servicename": "Service call", "unitprice": "10.00",
                 "istaxed": False, "quantity": 3},
            ],
        },
    )

    assert response.status_code == 200
    detail = client.get(f"/invoices/{invoice_id}").json()
    assert Decimal(detail["totalamount"]) == Decimal("30.00")
    assert detail["services"][0]["quantity"] == 3


def test_invoice_validation_and_not_found(client):
    no_customer = client.post("/invoices", json={**INVOICE_BODY, "customer_id": None})
    assert no_customer.status_code == 400
    assert no_customer.json() == {"error": "Customer is required"}

    no_lines = client.post("/invoices", json={**INVOICE_BODY, "services": []})
    assert no_lines.status_code == 400

    assert client.put("/invoices/55", json=INVOICE_BODY).status_code == 404
    assert client.delete("/invoices/55").json() == {"error": "Invoice not found"}


def test_oversized_quantity_is_a_structured_400(client):
    body = {
        **INVOICE_BODY,
        "services": [{"service_id": 5, "servicename": "Lock change",
                      "unitprice": 50, "quantity": 10**20}],
    }

    response = client.post("/invoices", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "Quantity for Lock change exceeds 99999"
    assert response.json()["details"] == str(10**20)


def test_payment_requires_method(client):
    invoice_id = _create_invoice(client)

    response = client.post(f"/invoices/{invoice_id}/payment", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Payment method is required"}


def test_storage_failure_is_reported_with_details(client):
    body = {
        **INVOICE_BODY,
        "services": [{"service_id": 999, "servicename": "Ghost", "unitprice": 1}],
    }

    response = client.post("/invoices", json=body)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to create invoice"
    assert "FOREIGN KEY" in response.json()["details"]


def test_quote_convert_and_reject(client):
    quote = client.post("/quotes", json=INVOICE_BODY)
    assert quote.status_code == 200
    quote_id = quote.json()["quote_id"]
    assert "duedate" not in client.get(f"/quotes/{quote_id}").json()

    converted = client.post(f"/quotes/{quote_id}/convert", json={"dueDate": "2026-11-18"})
    assert converted.status_code == 200
    invoice_id = converted.json()["invoice_id"]

    invoice = client.get(f"/invoices/{invoice_id}").json()
    assert invoice["date"] == "2026-10-19"
    assert invoice["duedate"] == "2026-11-18"
    assert client.get(f"/quotes/{quote_id}").json()["status"] == "accepted"

    rejected = client.post(f"/quotes/{quote_id}/reject")
    assert rejected.status_code == 400

    other = client.post("/quotes", json=INVOICE_BODY).json()["quote_id"]
    assert client.post(f"/quotes/{other}/reject").status_code == 200
    statuses = {q["quote_id"]: q["status"] for q in client.get("/quotes").json()["quotes"]}
    assert statuses == {quote_id: "accepted", other: "rejected"}


def test_convert_missing_quote(client):
    response = client.post("/quotes/31/convert", json={})

    assert response.status_code == 404
    assert response.json() == {"error": "Quote not found"}


def test_pdf_rendering(client):
    invoice_id = _create_invoice(client, vin="1HGCM82633A004352")
    quote_id = client.post("/quotes", json=INVOICE_BODY).json()["quote_id"]

    for path in (f"/invoices/{invoice_id}/pdf", f"/quotes/{quote_id}/pdf"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    assert client.get("/invoices/999/pdf").status_code == 404


def test_cron_requires_secret(client):
    _create_invoice(client)

    assert client.post("/cron/update-overdue").status_code == 401
    wrong = client.post("/cron/update-overdue", headers={"x-cron-secret": "nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Unauthorized"}
    assert client.get("/invoices").json()["invoices"][0]["status"] == "pending"


def test_cron_marks_overdue(client):
    invoice_id = _create_invoice(client)
    headers = {"x-cron-secret": CRON_SECRET}

    first = client.post("/cron/update-overdue", headers=headers)
    second = client.post("/cron/update-overdue", headers=headers)

    assert first.json() == {"success": True, "updatedCount": 1, "updatedInvoices": [invoice_id]}
    assert second.json()["updatedCount"] == 0
    assert client.get(f"/invoices/{invoice_id}").json()["status"] == "overdue"


def test_financial_summary_endpoint(client):
    _create_invoice(client)

    summary = client.get(
        "/financial-summary", params={"start_date": "2026-10-01", "end_date": "2026-10-31"}
    ).json()

    assert summary["invoice_count"] == 1
    assert Decimal(summary["unpaid_total"]) == Decimal("54.38")
    assert Decimal(summary["parts_total"]) == Decimal("0")

    bad_range = client.get(
        "/financial-summary", params={"start_date": "2026-10-31", "end_date": "2026-10-01"}
    )
    assert bad_range.status_code == 400


def test_vin_decode_endpoint(client):
    def handler(request):
        return httpx.Response(200, json={"Results": [{"ModelYear": "2003"}]})

    decoder = VinDecoder(
        httpx.Client(transport=httpx.MockTransport(handler)),
        VinCache(),
        "https://vpic.test/api/vehicles/DecodeVinValues",
    )
    app.dependency_overrides[get_vin_decoder] = lambda: decoder

    first = client.get("/vin-decode", params={"vin": "1HGCM82633A004352"})
    second = client.get("/vin-decode", params={"vin": "1HGCM82633A004352"})
    missing = client.get("/vin-decode")

    assert first.json()["source"] == "api"
    assert second.json() == {"data": {"Results": [{"ModelYear": "2003"}]}, "source": "cache"}
    assert missing.status_code == 400
