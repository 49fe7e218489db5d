# app/routers/__init__.py

from .activity_router import router as activity_router
from .auth_router import router as auth_router
from .customers_router import router as customers_router
from .discount_router import router as discount_router, validate_router as discount_validate_router
from .orders_router import router as orders_router
from .settings_router import router as settings_router
from .tax_rules_router import router as tax_rules_router

__all__ = [
    "activity_router",
    "auth_router",
    "customers_router",
    "discount_router",
    "discount_validate_router",
    "orders_router",
    "settings_router",
    "tax_rules_router",
]
