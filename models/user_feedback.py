# models/user_feedback.py
from sqlalchemy import Column, Integer, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class UserFeedback(TimestampMixin, Base):
     """Product feedback; one row per user, overwritten on resubmission."""
     __tablename__ = "user_feedback"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
     feedback_text = Column(Text, nullable=True)
     rating = Column(Integer, nullable=True)
     feedback_skipped = Column(Boolean, default=False, nullable=False)

     user = relationship("User", back_populates="feedback")
