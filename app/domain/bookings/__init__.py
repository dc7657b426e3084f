"""Booking domain - table reservations"""

from .router import router

__all__ = ["router"]
