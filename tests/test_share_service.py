from datetime import datetime, timedelta, timezone
from urllib.parse import unquote

import pytest

import config
from models import Invoice
from services import share_service
from services.invoice_service import InvoiceService
from services.share_service import ShareExpired, ShareNotFound, issue_share, resolve_share


def utcnow():
     return datetime.now(timezone.utc).replace(tzinfo=None)


def test_issue_share_applies_default_lifetime(db, seeded, monkeypatch):
     monkeypatch.setattr(config, "SHARE_LINK_TTL_DAYS", 7)
     before = utcnow()
     share = issue_share(db, seeded["invoice"].id)
     assert share.expires_at is not None
     assert before + timedelta(days=7) - timedelta(minutes=1) <= share.expires_at
     assert share.expires_at <= utcnow() + timedelta(days=7)


def test_zero_ttl_and_never_expires_store_no_expiry(db, seeded, monkeypatch):
     monkeypatch.setattr(config, "SHARE_LINK_TTL_DAYS", 0)
     assert issue_share(db, seeded["invoice"].id).expires_at is None
     monkeypatch.setattr(config, "SHARE_LINK_TTL_DAYS", 7)
     assert issue_share(db, seeded["invoice"].id, never_expires=True).expires_at is None


def test_resolve_returns_bound_invoice(db, seeded):
     share = issue_share(db, seeded["invoice"].id, expires_in_days=3)
     assert resolve_share(db, share.token) == seeded["invoice"].id


def test_resolving_twice_is_idempotent(db, seeded):
     share = issue_share(db, seeded["invoice"].id)
     first = InvoiceService.load_invoice_document(db, db.get(Invoice, resolve_share(db, share.token)))
     second = InvoiceService.load_invoice_document(db, db.get(Invoice, resolve_share(db, share.token)))
     assert first == second
     assert first.totals.total == seeded["invoice"].total


def test_each_issue_creates_a_distinct_valid_token(db, seeded):
     first = issue_share(db, seeded["invoice"].id)
     second = issue_share(db, seeded["invoice"].id)
     assert first.token != second.token
     assert resolve_share(db, first.token) == resolve_share(db, second.token) == seeded["invoice"].id


def test_unknown_token_is_not_found(db, seeded):
     with pytest.raises(ShareNotFound):
          resolve_share(db, "does-not-exist")
     with pytest.raises(ShareNotFound):
          resolve_share(db, "")


def test_expired_token_is_distinguished_from_unknown(db, seeded):
     share = issue_share(db, seeded["invoice"].id, expires_in_days=1)
     with pytest.raises(ShareExpired) as exc:
          resolve_share(db, share.token, now=share.expires_at + timedelta(seconds=1))
     assert str(exc.value) == "Share link has expired"
     # Expiry instant itself counts as expired
     with pytest.raises(ShareExpired):
          resolve_share(db, share.token, now=share.expires_at)
     assert resolve_share(db, share.token, now=share.expires_at - timedelta(seconds=1)) == seeded["invoice"].id


def test_share_url(monkeypatch):
     monkeypatch.setattr(config, "PUBLIC_BASE_URL", "https://app.hippo.test")
     assert share_service.share_url("abc") == "https://app.hippo.test/invoice/share/abc"


def test_share_message_and_compose_link(db, seeded):
     document = InvoiceService.load_invoice_document(db, seeded["invoice"])
     message = share_service.compose_share_message(document)
     assert message == "Invoice #INV-1 from Direct Co\n\nAmount: EUR 242.00\nDue Date: 2026-10-31"

     link = share_service.compose_link(message)
     assert link.startswith("https://wa.me/?text=")
     assert unquote(link.split("text=", 1)[1]) == message
