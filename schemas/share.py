# schemas/share.py
"""
Pydantic schemas for public share links and share actions.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class ShareCreate(BaseModel):
     """
     Request body for POST /api/invoices/{invoice_id}/shares.

     Omitting expires_in_days applies the configured default lifetime.
     """
     expires_in_days: Optional[int] = Field(None, ge=1, le=365)
     never_expires: bool = False

     model_config = ConfigDict(
          json_schema_extra={
               "example": {"expires_in_days": 7}
          }
     )


class ShareResponse(BaseModel):
     invoice_id: int
     token: str
     expires_at: Optional[datetime] = None
     url: str


class ShareMessageResponse(BaseModel):
     """Pre-filled share text plus the compose link used when no native share exists."""
     message: str
     compose_url: str
     filename: str


class ShareEmailRequest(BaseModel):
     to_email: Optional[str] = Field(None, max_length=255, description="Defaults to the customer's e-mail")


class ShareEmailResponse(BaseModel):
     sent_to: str
     filename: str
