# models/invoice_share.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class InvoiceShare(TimestampMixin, Base):
     """
     Public share link for one invoice.

     The token grants unauthenticated read access to that invoice only.
     expires_at is NULL for links that never expire.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
     token = Column(String(64), nullable=False, unique=True, index=True)
     expires_at = Column(DateTime, nullable=True)

     invoice = relationship("Invoice", back_populates="shares")

     def __repr__(self):
          return f"<InvoiceShare(id={self.id}, invoice_id={self.invoice_id}, token={self.token[:8]}...)>"
