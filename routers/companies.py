# routers/companies.py
"""
Company API routes.

Companies are the issuing businesses printed on invoices. Every route is
scoped to the authenticated user's own companies.
"""
import io
import logging
from typing import List

from azure.core.exceptions import AzureError
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

import azure_blob
from auth import get_current_user_id
from database import get_session
from models import Company
from schemas.company import CompanyCreate, CompanyResponse, CompanyUpdate
from services import data_access
from services.logo_service import MAX_LOGO_BYTES, reencode_logo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies", tags=["companies"])


def _get_company_or_404(db: Session, user_id: int, company_id: int) -> Company:
     company = data_access.select_one(db, Company, id=company_id, user_id=user_id)
     if not company:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Company with ID {company_id} not found"
          )
     return company


def _discard_logo(url) -> None:
     """Remove a logo blob that upload_company_logo stored; failures are only logged."""
     if not azure_blob.is_stored_logo(url):
          return
     try:
          azure_blob.delete_from_blob(url)
     except (AzureError, RuntimeError):
          logger.exception("Failed to delete logo %s", url)


@router.get("", response_model=List[CompanyResponse], summary="List companies")
def list_companies(
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return data_access.select(db, Company, order_by=Company.name, user_id=user_id)


@router.post(
     "",
     response_model=CompanyResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a company"
)
def create_company(
     body: CompanyCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     company, = data_access.insert(db, Company, [{**body.model_dump(), "user_id": user_id}])
     db.commit()
     db.refresh(company)
     return company


@router.get("/{company_id}", response_model=CompanyResponse, summary="Get a company")
def get_company(
     company_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _get_company_or_404(db, user_id, company_id)


@router.put("/{company_id}", response_model=CompanyResponse, summary="Update a company")
def update_company(
     company_id: int,
     body: CompanyUpdate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """Only fields present in the request body are changed."""
     _get_company_or_404(db, user_id, company_id)
     values = body.model_dump(exclude_unset=True)
     if values:
          data_access.update(db, Company, values, id=company_id, user_id=user_id)
     db.commit()
     return _get_company_or_404(db, user_id, company_id)


@router.put("/{company_id}/logo", response_model=CompanyResponse, summary="Upload a company logo")
def upload_company_logo(
     company_id: int,
     logo: UploadFile = File(...),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Store a logo image in Azure Blob Storage.

     The image is re-encoded to PNG before upload; the previous logo blob is
     removed after the new URL is saved.
     """
     company = _get_company_or_404(db, user_id, company_id)
     data = logo.file.read(MAX_LOGO_BYTES + 1)
     if len(data) > MAX_LOGO_BYTES:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Logo must be 5 MB or smaller")
     try:
          png = reencode_logo(data)
     except (OSError, ValueError):
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Logo is not a readable image")

     old_url = company.logo_url
     company.logo_url = azure_blob.upload_logo(io.BytesIO(png), "logo.png", user_id)
     db.commit()
     db.refresh(company)

     _discard_logo(old_url)
     return company


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a company")
def delete_company(
     company_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """Deletes the company together with its customers, invoices and uploaded logo."""
     company = _get_company_or_404(db, user_id, company_id)
     logo_url = company.logo_url
     data_access.delete(db, Company, id=company_id, user_id=user_id)
     db.commit()
     _discard_logo(logo_url)
     return None
