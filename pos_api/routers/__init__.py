"""HTTP routers."""

from .orders import router as orders_router
from .tables import router as tables_router

__all__ = ["orders_router", "tables_router"]
