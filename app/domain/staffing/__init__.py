"""Staffing domain - staff shift assignment, publishing and feedback"""

from .router import publish_router, router

__all__ = ["router", "publish_router"]
