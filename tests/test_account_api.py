from decimal import Decimal

from sqlalchemy.exc import OperationalError

import database
from database import check_connection
from main import app


def test_register_and_login(client, register_user):
     register_user("Someone@Hippo.test")
     response = client.post("/api/login", json={"email": "someone@hippo.test", "password": "secret123"})
     assert response.status_code == 200
     assert response.json()["user"]["email"] == "someone@hippo.test"
     assert response.json()["token"]


def test_duplicate_registration(client, register_user):
     register_user("dup@hippo.test")
     response = client.post("/api/register", json={"email": "dup@hippo.test", "password": "secret123"})
     assert response.status_code == 400


def test_login_failures(client, register_user):
     register_user("user@hippo.test")
     assert client.post("/api/login", json={"email": "nobody@hippo.test", "password": "x"}).status_code == 401
     assert client.post("/api/login", json={"email": "user@hippo.test", "password": "wrong"}).status_code == 401


def test_profile_update(client, auth):
     assert client.get("/api/me", headers=auth).json()["display_name"] == "Owner"

     response = client.put("/api/me", json={"display_name": "Boss"}, headers=auth)
     assert response.json()["display_name"] == "Boss"

     bad = client.put("/api/me", json={"password": "newsecret", "current_password": "wrong"}, headers=auth)
     assert bad.status_code == 401

     ok = client.put("/api/me", json={"password": "newsecret", "current_password": "secret123"}, headers=auth)
     assert ok.status_code == 200
     email = ok.json()["email"]
     assert client.post("/api/login", json={"email": email, "password": "newsecret"}).status_code == 200

     assert client.put("/api/me", json={}, headers=auth).status_code == 400


def test_dashboard(client, auth, invoice):
     stats = client.get("/api/dashboard", headers=auth).json()
     assert stats["total_customers"] == 1
     assert stats["total_invoices"] == 1
     assert stats["paid_invoices"] == 0
     assert Decimal(stats["total_revenue"]) == Decimal("0")
     assert stats["invoices"][0]["customer_name"] == "Globex"

     client.patch(f"/api/invoices/{invoice['id']}/mark-paid", headers=auth)
     stats = client.get("/api/dashboard", headers=auth).json()
     assert stats["paid_invoices"] == 1
     assert Decimal(stats["total_revenue"]) == Decimal("242")
     assert client.get("/api/dashboard", params={"status": "unpaid"}, headers=auth).json()["invoices"] == []


def test_feedback_submit_and_skip(client, auth):
     response = client.post("/api/feedback", json={"rating": 4, "feedback": "Nice PDFs"}, headers=auth)
     assert response.status_code == 200
     assert response.json()["rating"] == 4
     assert response.json()["feedback_skipped"] is False

     skipped = client.post("/api/feedback/skip", headers=auth).json()
     assert skipped["feedback_skipped"] is True
     assert skipped["rating"] == 4

     assert client.post("/api/feedback", json={"rating": 6}, headers=auth).status_code == 422


class _UnreachableSession:
     def execute(self, statement):
          raise OperationalError("SELECT 1", {}, Exception("connection refused"))


def test_check_connection_reports_failure():
     assert check_connection(_UnreachableSession()) is False


def test_health_reports_unavailable_database(client):
     app.dependency_overrides[database.get_session] = lambda: _UnreachableSession()
     response = client.get("/api/health")
     assert response.status_code == 503
     assert response.json()["database"] is False
