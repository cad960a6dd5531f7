# models/company.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Company(TimestampMixin, Base):
     """
     Company model - the issuing business printed on invoices.

     logo_url and the bank fields are optional; renderers fall back to an
     initial avatar and omit the payment block when they are missing.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

     name = Column(String(255), nullable=False)
     address = Column(Text, nullable=True)
     phone = Column(String(50), nullable=True)
     email = Column(String(255), nullable=True)
     website = Column(String(255), nullable=True)
     tax_id = Column(String(100), nullable=True)
     logo_url = Column(String(500), nullable=True)

     # Bank payment details
     bank_name = Column(String(255), nullable=True)
     bank_account = Column(String(255), nullable=True)

     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     user = relationship("User", back_populates="companies")
     customers = relationship("Customer", back_populates="company", cascade="all, delete-orphan")
     invoices = relationship("Invoice", back_populates="company", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Company(id={self.id}, name='{self.name}')>"
