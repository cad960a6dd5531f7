# schemas/customer.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class CustomerCreate(BaseModel):
     """Schema for creating a customer under one of the user's companies."""
     company_id: int = Field(..., gt=0, description="Company ID (must belong to the user)")
     name: str = Field(..., min_length=1, max_length=255)
     email: Optional[str] = Field(None, max_length=255)
     phone: Optional[str] = Field(None, max_length=50)
     address: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "company_id": 1,
                    "name": "Acme Corp",
                    "email": "ap@acme.test",
                    "phone": "+1 555 0100",
                    "address": "1 Main Street"
               }
          }
     )


class CustomerUpdate(BaseModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     email: Optional[str] = Field(None, max_length=255)
     phone: Optional[str] = Field(None, max_length=50)
     address: Optional[str] = None

     @field_validator("name")
     @classmethod
     def name_not_null(cls, value):
          if value is None:
               raise ValueError("name may be omitted but not set to null")
          return value


class CustomerResponse(BaseModel):
     id: int
     company_id: int
     name: str
     email: Optional[str] = None
     phone: Optional[str] = None
     address: Optional[str] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)
