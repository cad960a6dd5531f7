# routers/customers.py
"""
Customer API routes.

A customer belongs to exactly one of the user's companies.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_session
from models import Company, Customer
from schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from services import data_access

router = APIRouter(prefix="/api/customers", tags=["customers"])


def _get_customer_or_404(db: Session, user_id: int, customer_id: int) -> Customer:
     customer = data_access.select_one(db, Customer, id=customer_id, user_id=user_id)
     if not customer:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Customer with ID {customer_id} not found"
          )
     return customer


@router.get("", response_model=List[CustomerResponse], summary="List customers")
def list_customers(
     company_id: Optional[int] = Query(None, description="Filter by company ID"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     filters = {"user_id": user_id}
     if company_id:
          filters["company_id"] = company_id
     return data_access.select(db, Customer, order_by=Customer.name, **filters)


@router.post(
     "",
     response_model=CustomerResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a customer"
)
def create_customer(
     body: CustomerCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     # Verify company exists and belongs to the user
     if not data_access.select_one(db, Company, id=body.company_id, user_id=user_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Company with ID {body.company_id} not found"
          )

     customer, = data_access.insert(db, Customer, [{**body.model_dump(), "user_id": user_id}])
     db.commit()
     db.refresh(customer)
     return customer


@router.get("/{customer_id}", response_model=CustomerResponse, summary="Get a customer")
def get_customer(
     customer_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _get_customer_or_404(db, user_id, customer_id)


@router.put("/{customer_id}", response_model=CustomerResponse, summary="Update a customer")
def update_customer(
     customer_id: int,
     body: CustomerUpdate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     _get_customer_or_404(db, user_id, customer_id)
     values = body.model_dump(exclude_unset=True)
     if values:
          data_access.update(db, Customer, values, id=customer_id, user_id=user_id)
     db.commit()
     return _get_customer_or_404(db, user_id, customer_id)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a customer")
def delete_customer(
     customer_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """Deletes the customer and the invoices issued to them."""
     _get_customer_or_404(db, user_id, customer_id)
     data_access.delete(db, Customer, id=customer_id, user_id=user_id)
     db.commit()
     return None
