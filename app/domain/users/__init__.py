"""Users domain - back-office staff accounts"""

from .router import router

__all__ = ["router"]
