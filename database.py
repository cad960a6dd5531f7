# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (MS SQL Server, PostgreSQL or SQLite)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/items")
     def get_items(db: Session = Depends(get_session)):
          return db.query(Item).all()
     """
import logging
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

import config

logger = logging.getLogger(__name__)

DATABASE_URL = config.build_database_url()

if DATABASE_URL.startswith("sqlite"):
     engine = create_engine(
          DATABASE_URL,
          connect_args={"check_same_thread": False},
          echo=config.SQL_ECHO,
     )
else:
     engine = create_engine(
          DATABASE_URL,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          pool_pre_ping=True,
          echo=config.SQL_ECHO,
     )

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     The session is committed when the request handler returns and rolled
     back if it raises.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def check_connection(session: Session) -> bool:
     """
     Test database connectivity on the given session.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          session.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError:
          logger.exception("Database connection failed")
          return False
