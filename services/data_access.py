# services/data_access.py
"""
Generic table operations over a SQLAlchemy session.

select / insert / update / delete with equality filters on column names,
typically the ownership keys (user_id, company_id, invoice_id) plus id.
Operations flush but never commit; the request-scoped session commits.
"""
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from models import Base

ModelT = TypeVar("ModelT", bound=Base)


def _filtered(db: Session, model: Type[ModelT], filters: Dict[str, Any]):
     query = db.query(model)
     for column, value in filters.items():
          query = query.filter(getattr(model, column) == value)
     return query


def select(db: Session, model: Type[ModelT], order_by: Optional[Any] = None, **filters: Any) -> List[ModelT]:
     query = _filtered(db, model, filters)
     if order_by is not None:
          query = query.order_by(order_by)
     return query.all()


def select_one(db: Session, model: Type[ModelT], **filters: Any) -> Optional[ModelT]:
     return _filtered(db, model, filters).first()


def insert(db: Session, model: Type[ModelT], rows: Iterable[Dict[str, Any]]) -> List[ModelT]:
     created = [model(**row) for row in rows]
     db.add_all(created)
     db.flush()  # Flush to get the IDs without committing
     return created


def update(db: Session, model: Type[ModelT], values: Dict[str, Any], **filters: Any) -> List[ModelT]:
     """Set values on every matching row and return the rows."""
     rows = _filtered(db, model, filters).all()
     for row in rows:
          for column, value in values.items():
               setattr(row, column, value)
     db.flush()
     return rows


def delete(db: Session, model: Type[ModelT], **filters: Any) -> int:
     """
     Delete matching rows through the ORM so relationship cascades run.

     Returns:
          Number of rows deleted (0 when nothing matched)
     """
     rows = _filtered(db, model, filters).all()
     for row in rows:
          db.delete(row)
     db.flush()
     return len(rows)
