import logging
from typing import Optional

from fastapi import FastAPI, Request, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
import uvicorn

import config
from auth import create_access_token, get_current_user_id, hash_password, verify_password
from database import check_connection, get_session
from models import User
from routers import (
    companies_router,
    customers_router,
    dashboard_router,
    feedback_router,
    invoices_router,
    payments_router,
    public_share_router,
    shares_router,
)
from services import data_access

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# App instance
app = FastAPI(title="Hippo Invoices")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Auth Schemas
class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    display_name: Optional[str] = Field(None, max_length=200)

class LoginRequest(BaseModel):
    email: str
    password: str

class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    current_password: Optional[str] = None

class UserResponse(BaseModel):
    id: int
    email: str
    display_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@app.post("/api/register", status_code=status.HTTP_201_CREATED)
def register_user(body: RegisterRequest, db: Session = Depends(get_session)):
    email = _normalize_email(body.email)
    if data_access.select_one(db, User, email=email):
        raise HTTPException(status_code=400, detail="Email already registered")

    user, = data_access.insert(db, User, [{
        "email": email,
        "password": hash_password(body.password),
        "display_name": body.display_name,
    }])
    db.commit()
    logger.info("Registered user %s", user.id)
    return {"token": create_access_token(user.id), "user": UserResponse.model_validate(user)}

@app.post("/api/login")
def login_user(body: LoginRequest, db: Session = Depends(get_session)):
    user = data_access.select_one(db, User, email=_normalize_email(body.email))

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(body.password, user.password):
        raise HTTPException(status_code=401, detail="Incorrect password")

    return {"token": create_access_token(user.id), "user": UserResponse.model_validate(user)}

@app.get("/api/me", response_model=UserResponse)
def get_profile(db: Session = Depends(get_session), user_id: int = Depends(get_current_user_id)):
    user = data_access.select_one(db, User, id=user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@app.put("/api/me", response_model=UserResponse)
def update_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_session),
    user_id: int = Depends(get_current_user_id),
):
    user = data_access.select_one(db, User, id=user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    updates = {}
    if body.display_name is not None:
        updates["display_name"] = body.display_name

    if body.email:
        email = _normalize_email(body.email)
        existing = data_access.select_one(db, User, email=email)
        if existing and existing.id != user_id:
            raise HTTPException(status_code=400, detail="Email already registered")
        updates["email"] = email

    if body.password:
        if not body.current_password or not verify_password(body.current_password, user.password):
            raise HTTPException(status_code=401, detail="Incorrect current password")
        updates["password"] = hash_password(body.password)

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    data_access.update(db, User, updates, id=user_id)
    db.commit()
    return user


@app.get("/api/health")
def health(db: Session = Depends(get_session)):
    if not check_connection(db):
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": False})
    return {"status": "ok", "database": True}


app.include_router(companies_router)
app.include_router(customers_router)
app.include_router(invoices_router)
app.include_router(payments_router)
app.include_router(shares_router)
app.include_router(public_share_router)
app.include_router(dashboard_router)
app.include_router(feedback_router)

# 404 Fallback Middleware
@app.middleware("http")
async def not_found_middleware(request: Request, call_next):
    try:
        response = await call_next(request)
        # Only unmatched paths; 404s raised by handlers keep their detail
        if response.status_code == 404 and request.scope.get("endpoint") is None:
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return response
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT, reload=True)
