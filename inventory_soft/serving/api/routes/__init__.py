"""
API Routes Module
"""
from .auth import router as auth_router
from .categories import router as categories_router
from .dashboard import router as dashboard_router
from .events import router as events_router
from .health import router as health_router
from .products import router as products_router
from .reports import router as reports_router
from .sales import router as sales_router

__all__ = [
    "auth_router",
    "categories_router",
    "dashboard_router",
    "events_router",
    "health_router",
    "products_router",
    "reports_router",
    "sales_router",
]
