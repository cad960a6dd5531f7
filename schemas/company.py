# schemas/company.py
"""
Pydantic schemas for Company API request/response validation.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class CompanyBase(BaseModel):
     name: str = Field(..., min_length=1, max_length=255, description="Company name")
     address: Optional[str] = None
     phone: Optional[str] = Field(None, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     website: Optional[str] = Field(None, max_length=255)
     tax_id: Optional[str] = Field(None, max_length=100)
     logo_url: Optional[str] = Field(None, max_length=500, description="Public URL of the company logo")
     bank_name: Optional[str] = Field(None, max_length=255)
     bank_account: Optional[str] = Field(None, max_length=255)


class CompanyCreate(CompanyBase):
     """Schema for creating a company."""

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Hippo Studio",
                    "address": "12 River Road, Amsterdam",
                    "phone": "+31 20 123 4567",
                    "email": "billing@hippo.studio",
                    "logo_url": "https://cdn.example.com/hippo.png",
                    "bank_name": "ING",
                    "bank_account": "NL91 INGB 0001 2345 67"
               }
          }
     )


class CompanyUpdate(BaseModel):
     """Schema for updating a company. Only provided fields change."""
     name: Optional[str] = Field(None, min_length=1, max_length=255)
     address: Optional[str] = None
     phone: Optional[str] = Field(None, max_length=50)
     email: Optional[str] = Field(None, max_length=255)
     website: Optional[str] = Field(None, max_length=255)
     tax_id: Optional[str] = Field(None, max_length=100)
     logo_url: Optional[str] = Field(None, max_length=500)
     bank_name: Optional[str] = Field(None, max_length=255)
     bank_account: Optional[str] = Field(None, max_length=255)

     @field_validator("name")
     @classmethod
     def name_not_null(cls, value):
          if value is None:
               raise ValueError("name may be omitted but not set to null")
          return value


class CompanyResponse(CompanyBase):
     id: int
     user_id: int
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)
