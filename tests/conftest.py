import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import database
from main import app
from models import Base, Company, Customer, Invoice, InvoiceItem, User
from models.invoice import InvoiceStatus


@pytest.fixture
def engine():
     engine = create_engine(
          "sqlite://",
          connect_args={"check_same_thread": False},
          poolclass=StaticPool,
     )
     Base.metadata.create_all(engine)
     yield engine
     engine.dispose()


@pytest.fixture
def session_factory(engine):
     return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
     session = session_factory()
     yield session
     session.close()


@pytest.fixture
def client(session_factory, monkeypatch):
     def override_get_session():
          session = session_factory()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     app.dependency_overrides[database.get_session] = override_get_session
     # No network access for logos during tests
     monkeypatch.setattr("routers.invoices.fetch_logo", lambda url: None)
     monkeypatch.setattr("routers.shares.fetch_logo", lambda url: None)
     with TestClient(app) as test_client:
          yield test_client
     app.dependency_overrides.clear()


def register(client, email="owner@hippo.test", password="secret123"):
     response = client.post("/api/register", json={"email": email, "password": password, "display_name": "Owner"})
     assert response.status_code == 201, response.text
     body = response.json()
     return {"Authorization": f"Bearer {body['token']}"}, body["user"]["id"]


@pytest.fixture
def register_user(client):
     def _register(email):
          return register(client, email=email)
     return _register


@pytest.fixture
def auth(client):
     headers, _ = register(client)
     return headers


@pytest.fixture
def company(client, auth):
     response = client.post("/api/companies", json={
          "name": "Acme Studio",
          "address": "1 Main Street",
          "email": "billing@acme.test",
          "bank_name": "ING",
          "bank_account": "NL91 INGB 0001 2345 67",
     }, headers=auth)
     assert response.status_code == 201, response.text
     return response.json()


@pytest.fixture
def customer(client, auth, company):
     response = client.post("/api/customers", json={
          "company_id": company["id"],
          "name": "Globex",
          "email": "ap@globex.test",
     }, headers=auth)
     assert response.status_code == 201, response.text
     return response.json()


@pytest.fixture
def invoice_payload(company, customer):
     def build(items=None, tax_rate=21, **overrides):
          payload = {
               "company_id": company["id"],
               "customer_id": customer["id"],
               "due_date": (date.today() + timedelta(days=30)).isoformat(),
               "currency": "EUR",
               "tax_type": "VAT",
               "tax_rate": tax_rate,
               "items": items if items is not None else [
                    {"description": "Design work", "quantity": 2, "unit_price": 50},
                    {"description": "Hosting", "quantity": 1, "unit_price": 100},
               ],
          }
          payload.update(overrides)
          return payload
     return build


@pytest.fixture
def invoice(client, auth, invoice_payload):
     response = client.post("/api/invoices", json=invoice_payload(), headers=auth)
     assert response.status_code == 201, response.text
     return response.json()


@pytest.fixture
def seeded(db):
     """User, company, customer and a two-item invoice inserted directly."""
     user = User(email="direct@hippo.test", password="x")
     db.add(user)
     db.flush()
     company = Company(user_id=user.id, name="Direct Co", email="co@direct.test")
     db.add(company)
     db.flush()
     customer = Customer(user_id=user.id, company_id=company.id, name="Buyer", email="buyer@direct.test")
     db.add(customer)
     db.flush()
     invoice = Invoice(
          user_id=user.id,
          company_id=company.id,
          customer_id=customer.id,
          invoice_number="INV-1",
          date=date(2026, 10, 1),
          due_date=date(2026, 10, 31),
          currency="EUR",
          tax_type="VAT",
          tax_rate=Decimal("21"),
          subtotal=Decimal("200"),
          tax_amount=Decimal("42"),
          total=Decimal("242"),
          status=InvoiceStatus.UNPAID,
     )
     db.add(invoice)
     db.flush()
     db.add_all([
          InvoiceItem(invoice_id=invoice.id, description="Design work", quantity=2, unit_price=Decimal("50"), amount=Decimal("100")),
          InvoiceItem(invoice_id=invoice.id, description="Hosting", quantity=1, unit_price=Decimal("100"), amount=Decimal("100")),
     ])
     db.commit()
     return {"user": user, "company": company, "customer": customer, "invoice": invoice}
