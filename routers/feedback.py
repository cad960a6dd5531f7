# routers/feedback.py
"""
Product feedback.

One feedback row per user: submitting again overwrites it, and skipping
records that the user dismissed the prompt.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_session
from models import UserFeedback
from schemas.feedback import FeedbackCreate, FeedbackResponse
from services import data_access

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


def _upsert(db: Session, user_id: int, values: dict) -> UserFeedback:
     if data_access.select_one(db, UserFeedback, user_id=user_id):
          row, = data_access.update(db, UserFeedback, values, user_id=user_id)
     else:
          row, = data_access.insert(db, UserFeedback, [{**values, "user_id": user_id}])
     db.commit()
     return row


@router.post("", response_model=FeedbackResponse, summary="Submit feedback")
def submit_feedback(
     body: FeedbackCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _upsert(db, user_id, {
          "rating": body.rating,
          "feedback_text": body.feedback,
          "feedback_skipped": False,
     })


@router.post("/skip", response_model=FeedbackResponse, summary="Skip the feedback prompt")
def skip_feedback(
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _upsert(db, user_id, {"feedback_skipped": True})
