"""Pre-order domain - dine-in and takeaway orders placed ahead"""

from .router import config_router, router

__all__ = ["router", "config_router"]
