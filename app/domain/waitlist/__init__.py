"""Waitlist domain - guests waiting for a table"""

from .router import router

__all__ = ["router"]
