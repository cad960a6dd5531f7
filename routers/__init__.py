# routers/__init__.py
from .companies import router as companies_router
from .customers import router as customers_router
from .dashboard import router as dashboard_router
from .feedback import router as feedback_router
from .invoices import router as invoices_router
from .payments import router as payments_router
from .shares import public_router as public_share_router, router as shares_router

__all__ = [
     "companies_router",
     "customers_router",
     "dashboard_router",
     "feedback_router",
     "invoices_router",
     "payments_router",
     "shares_router",
     "public_share_router",
]
