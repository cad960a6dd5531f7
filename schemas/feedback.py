# schemas/feedback.py
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class FeedbackCreate(BaseModel):
     rating: int = Field(..., ge=1, le=5, description="How would you rate your experience?")
     feedback: Optional[str] = Field(None, max_length=5000, description="Any suggestions for improvement?")


class FeedbackResponse(BaseModel):
     user_id: int
     rating: Optional[int] = None
     feedback_text: Optional[str] = None
     feedback_skipped: bool

     model_config = ConfigDict(from_attributes=True)
