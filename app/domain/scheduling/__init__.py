"""Scheduling domain - shift templates, scheduled shifts and week copies"""

from .router import router, shifts_router

__all__ = ["router", "shifts_router"]
