# models/customer.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Customer(TimestampMixin, Base):
     """
     Customer model - billed party; belongs to exactly one company.
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="NO ACTION"), nullable=False, index=True)
     company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)

     name = Column(String(255), nullable=False)
     email = Column(String(255), nullable=True)
     phone = Column(String(50), nullable=True)
     address = Column(Text, nullable=True)

     # Relationships
     company = relationship("Company", back_populates="customers")
     invoices = relationship("Invoice", back_populates="customer", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Customer(id={self.id}, name='{self.name}')>"
