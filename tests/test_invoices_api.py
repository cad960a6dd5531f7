from datetime import date, timedelta
from decimal import Decimal

from models import Invoice


def test_requires_token(client):
     assert client.get("/api/invoices").status_code == 401
     assert client.get("/api/invoices", headers={"Authorization": "Bearer nope"}).status_code == 403


def test_create_invoice(client, auth, invoice):
     assert invoice["status"] == "unpaid"
     assert invoice["invoice_number"].startswith("INV-")
     assert Decimal(invoice["subtotal"]) == Decimal("200")
     assert Decimal(invoice["tax_amount"]) == Decimal("42")
     assert Decimal(invoice["total"]) == Decimal("242")
     assert invoice["customer_name"] == "Globex"
     assert invoice["company_name"] == "Acme Studio"
     assert [i["description"] for i in invoice["items"]] == ["Design work", "Hosting"]


def test_invalid_item_rejected_before_any_write(client, auth, invoice_payload):
     payload = invoice_payload(items=[{"description": "Nothing", "quantity": 0, "unit_price": 10}])
     response = client.post("/api/invoices", json=payload, headers=auth)
     assert response.status_code == 422
     assert client.get("/api/invoices", headers=auth).json()["total"] == 0


def test_empty_items_rejected(client, auth, invoice_payload):
     response = client.post("/api/invoices", json=invoice_payload(items=[]), headers=auth)
     assert response.status_code == 422


def test_customer_must_belong_to_company(client, auth, invoice_payload, company):
     other = client.post("/api/companies", json={"name": "Other Co"}, headers=auth).json()
     stranger = client.post("/api/customers", json={"company_id": other["id"], "name": "Stranger"}, headers=auth).json()

     response = client.post("/api/invoices", json=invoice_payload(customer_id=stranger["id"]), headers=auth)
     assert response.status_code == 400
     assert response.json()["detail"]["field"] == "customer_id"


def test_invoices_are_scoped_to_owner(client, invoice, register_user):
     other_headers, _ = register_user("intruder@hippo.test")
     assert client.get(f"/api/invoices/{invoice['id']}", headers=other_headers).status_code == 404
     assert client.delete(f"/api/invoices/{invoice['id']}", headers=other_headers).status_code == 404
     assert client.get("/api/invoices", headers=other_headers).json()["total"] == 0


def test_list_filters(client, auth, invoice, invoice_payload):
     overdue = client.post(
          "/api/invoices",
          json=invoice_payload(due_date=(date.today() - timedelta(days=3)).isoformat()),
          headers=auth,
     ).json()
     client.patch(f"/api/invoices/{invoice['id']}/mark-paid", headers=auth)

     paid = client.get("/api/invoices", params={"status": "paid"}, headers=auth).json()
     assert [i["id"] for i in paid["invoices"]] == [invoice["id"]]

     late = client.get("/api/invoices", params={"overdue_only": True}, headers=auth).json()
     assert [i["id"] for i in late["invoices"]] == [overdue["id"]]
     assert late["invoices"][0]["is_overdue"] is True


def test_update_invoice(client, auth, invoice):
     response = client.put(
          f"/api/invoices/{invoice['id']}",
          json={"notes": "Net 30", "status": "sent"},
          headers=auth,
     )
     assert response.status_code == 200
     assert response.json()["notes"] == "Net 30"
     assert response.json()["status"] == "sent"


def test_mark_paid_and_unpaid(client, auth, invoice):
     response = client.patch(
          f"/api/invoices/{invoice['id']}/mark-paid",
          json={"payment_method": "credit_card", "payment_remarks": "Card ending 4242"},
          headers=auth,
     )
     assert response.status_code == 200
     assert response.json()["status"] == "paid"
     assert response.json()["payment_method"] == "credit_card"

     response = client.patch(f"/api/invoices/{invoice['id']}/mark-unpaid", headers=auth)
     body = response.json()
     assert body["status"] == "unpaid"
     assert body["payment_method"] is None
     assert body["payment_remarks"] is None


def test_delete_invoice(client, auth, invoice):
     assert client.delete(f"/api/invoices/{invoice['id']}", headers=auth).status_code == 204
     assert client.get(f"/api/invoices/{invoice['id']}", headers=auth).status_code == 404


def test_delete_invoice_without_items(client, auth, company, customer, db):
     user_id = client.get("/api/me", headers=auth).json()["id"]
     bare = Invoice(
          user_id=user_id,
          company_id=company["id"],
          customer_id=customer["id"],
          invoice_number="INV-BARE",
          date=date.today(),
          due_date=date.today(),
     )
     db.add(bare)
     db.commit()

     assert client.delete(f"/api/invoices/{bare.id}", headers=auth).status_code == 204
     assert client.get(f"/api/invoices/{bare.id}", headers=auth).status_code == 404


def test_document_endpoint(client, auth, invoice):
     document = client.get(f"/api/invoices/{invoice['id']}/document", headers=auth).json()
     assert document["header"]["invoice_number"] == invoice["invoice_number"]
     assert document["header"]["currency"] == "EUR"
     assert Decimal(document["totals"]["total"]) == Decimal("242")
     assert document["company"]["bank_name"] == "ING"
     assert len(document["items"]) == 2


def test_pdf_export_modes(client, auth, invoice):
     filename = f"invoice-{invoice['invoice_number']}.pdf"
     for mode, disposition in (("preview", "inline"), ("download", "attachment"), ("raster", "attachment")):
          response = client.get(f"/api/invoices/{invoice['id']}/pdf", params={"mode": mode}, headers=auth)
          assert response.status_code == 200
          assert response.headers["content-type"] == "application/pdf"
          assert response.headers["content-disposition"] == f'{disposition}; filename="{filename}"'
          assert response.content.startswith(b"%PDF")


def test_pdf_failure_returns_retry_url(client, auth, invoice, monkeypatch):
     def broken(*args, **kwargs):
          raise RuntimeError("layout overflow")

     monkeypatch.setattr("routers.invoices.render_invoice", broken)
     response = client.get(f"/api/invoices/{invoice['id']}/pdf", params={"mode": "download"}, headers=auth)
     assert response.status_code == 500
     body = response.json()
     assert body["error"] == "Failed to generate PDF"
     assert body["retry_url"].endswith(f"/api/invoices/{invoice['id']}/pdf?mode=download")


def test_unknown_invoice_keeps_detail(client, auth):
     response = client.get("/api/invoices/9999", headers=auth)
     assert response.status_code == 404
     assert response.json()["detail"] == "Invoice with ID 9999 not found"


def test_unknown_route(client):
     response = client.get("/api/does-not-exist")
     assert response.status_code == 404
     assert response.json() == {"error": "Route not found"}


def test_scenario_two_items_at_fifty_with_ten_percent_tax(client, auth, invoice_payload):
     payload = invoice_payload(items=[{"description": "Widget", "quantity": 2, "unit_price": 50.00}], tax_rate=10)
     created = client.post("/api/invoices", json=payload, headers=auth)
     assert created.status_code == 201, created.text
     invoice = created.json()
     assert Decimal(invoice["subtotal"]) == Decimal("100.00")
     assert Decimal(invoice["tax_amount"]) == Decimal("10.00")
     assert Decimal(invoice["total"]) == Decimal("110.00")
     assert Decimal(invoice["items"][0]["amount"]) == Decimal("100.00")

     document = client.get(f"/api/invoices/{invoice['id']}/document", headers=auth).json()
     assert Decimal(document["totals"]["subtotal"]) == Decimal("100")
     assert Decimal(document["totals"]["tax_amount"]) == Decimal("10")
     assert Decimal(document["totals"]["total"]) == Decimal("110")
     assert client.get(f"/api/invoices/{invoice['id']}/pdf", headers=auth).status_code == 200


def test_stored_totals_match_document_totals(client, auth, invoice_payload):
     # Line amount and tax carry more than six decimals
     payload = invoice_payload(
          items=[{"description": "Consulting", "quantity": "1.0625", "unit_price": "10000.0625"}],
          tax_rate="12.5",
     )
     invoice = client.post("/api/invoices", json=payload, headers=auth).json()
     document = client.get(f"/api/invoices/{invoice['id']}/document", headers=auth).json()

     for key in ("subtotal", "tax_amount", "total"):
          assert Decimal(invoice[key]) == Decimal(document["totals"][key])
     assert Decimal(invoice["items"][0]["amount"]) == Decimal("10625.06640625")
     assert Decimal(invoice["subtotal"]) == Decimal("10625.06640625")
     assert Decimal(invoice["tax_amount"]) == Decimal("1328.13330078125")
     assert Decimal(invoice["total"]) == Decimal("11953.19970703125")


def test_values_beyond_stored_scale_rejected(client, auth, invoice_payload):
     quantity = invoice_payload(items=[{"description": "Consulting", "quantity": "1.00005", "unit_price": 10000}])
     response = client.post("/api/invoices", json=quantity, headers=auth)
     assert response.status_code == 400
     assert response.json()["detail"]["field"] == "items.0.quantity"

     rate = client.post("/api/invoices", json=invoice_payload(tax_rate="7.12345"), headers=auth)
     assert rate.status_code == 400
     assert rate.json()["detail"]["field"] == "tax_rate"

     assert client.get("/api/invoices", headers=auth).json()["total"] == 0


def test_update_rejects_null_for_required_fields(client, auth, invoice):
     for body in ({"due_date": None}, {"status": None}):
          response = client.put(f"/api/invoices/{invoice['id']}", json=body, headers=auth)
          assert response.status_code == 422
     assert client.get(f"/api/invoices/{invoice['id']}", headers=auth).json()["due_date"] == invoice["due_date"]

     cleared = client.put(f"/api/invoices/{invoice['id']}", json={"notes": None}, headers=auth)
     assert cleared.status_code == 200
     assert cleared.json()["notes"] is None


def test_health(client):
     response = client.get("/api/health")
     assert response.status_code == 200
     assert response.json() == {"status": "ok", "database": True}
