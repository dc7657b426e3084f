"""Branch domain - branches, table types, dining tables and table availability"""

from .router import router

__all__ = ["router"]
