# config.py
"""
Environment configuration for the Hippo backend.

Values are read from the process environment (and a local .env file).
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "hippo-dev-secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# Database
DATABASE_URL = os.getenv("DATABASE_URL")
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# HTTP
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
PORT = int(os.getenv("PORT", 10000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5173").rstrip("/")

# Invoices
SHARE_LINK_TTL_DAYS = int(os.getenv("SHARE_LINK_TTL_DAYS", "7"))  # 0 = links never expire
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")
DEFAULT_TAX_TYPE = os.getenv("DEFAULT_TAX_TYPE", "VAT")
LOGO_FETCH_TIMEOUT = float(os.getenv("LOGO_FETCH_TIMEOUT", "5"))

# Brevo transactional mail
BREVO_API_KEY = os.getenv("BREVO_API_KEY")
MAIL_SENDER_NAME = os.getenv("MAIL_SENDER_NAME", "Hippo Invoices")
MAIL_SENDER_EMAIL = os.getenv("MAIL_SENDER_EMAIL", "noreply@hippo.invoice")

# Azure Blob Storage (company logos)
AZURE_STORAGE_ACCOUNT = os.getenv("AZURE_STORAGE_ACCOUNT")
AZURE_STORAGE_KEY = os.getenv("AZURE_STORAGE_KEY")
AZURE_LOGO_CONTAINER = os.getenv("AZURE_LOGO_CONTAINER", "logos")


def build_database_url() -> str:
     """
     Resolve the SQLAlchemy URL.

     DATABASE_URL wins when set. Otherwise the DB_* variables describe an
     MS SQL Server reached through pymssql, and with nothing configured a
     local SQLite file is used.
     """
     if DATABASE_URL:
          return DATABASE_URL
     if DB_SERVER:
          from urllib.parse import quote_plus
          safe_user = quote_plus(DB_USER or "")
          safe_pass = quote_plus(DB_PASS or "")
          return f"mssql+pymssql://{safe_user}:{safe_pass}@{DB_SERVER}:{DB_PORT}/{DB_NAME}"
     return "sqlite:///./hippo.db"
