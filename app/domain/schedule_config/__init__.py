"""Schedule configuration domain - roster locks and per-branch scheduling rules"""

from .router import config_router, lock_router

__all__ = ["config_router", "lock_router"]
