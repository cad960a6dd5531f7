from datetime import date
from decimal import Decimal


def pay(client, auth, invoice_id, amount, method="bank_transfer"):
     return client.post(
          f"/api/invoices/{invoice_id}/payments",
          json={"amount": amount, "payment_date": date.today().isoformat(), "payment_method": method},
          headers=auth,
     )


def test_partial_then_full_payment(client, auth, invoice_payload):
     invoice = client.post(
          "/api/invoices",
          json=invoice_payload(items=[{"description": "Retainer", "quantity": 1, "unit_price": 100}], tax_rate=0),
          headers=auth,
     ).json()

     first = pay(client, auth, invoice["id"], 30)
     assert first.status_code == 201
     body = first.json()
     assert body["invoice_status"] == "unpaid"
     assert Decimal(body["total_paid"]) == Decimal("30")
     assert Decimal(body["balance_due"]) == Decimal("70")

     second = pay(client, auth, invoice["id"], 70, "cash").json()
     assert second["invoice_status"] == "paid"
     assert Decimal(second["balance_due"]) == Decimal("0")
     assert len(second["payments"]) == 2

     assert client.get(f"/api/invoices/{invoice['id']}", headers=auth).json()["status"] == "paid"


def test_payment_on_paid_invoice_rejected(client, auth, invoice):
     client.patch(f"/api/invoices/{invoice['id']}/mark-paid", headers=auth)
     response = pay(client, auth, invoice["id"], 10)
     assert response.status_code == 400
     assert response.json()["detail"]["message"] == "Invoice already paid"


def test_payment_validation(client, auth, invoice):
     assert pay(client, auth, invoice["id"], 0).status_code == 422
     assert pay(client, auth, invoice["id"], 10, "barter").status_code == 422


def test_payment_history(client, auth, invoice):
     pay(client, auth, invoice["id"], 12.5)
     history = client.get(f"/api/invoices/{invoice['id']}/payments", headers=auth).json()
     assert history["invoice_id"] == invoice["id"]
     assert Decimal(history["total"]) == Decimal("242")
     assert Decimal(history["balance_due"]) == Decimal("229.5")
     assert history["payments"][0]["payment_method"] == "bank_transfer"


def test_payments_scoped_to_owner(client, invoice, register_user):
     other_headers, _ = register_user("intruder@hippo.test")
     assert client.get(f"/api/invoices/{invoice['id']}/payments", headers=other_headers).status_code == 404
     assert pay(client, other_headers, invoice["id"], 10).status_code == 404
