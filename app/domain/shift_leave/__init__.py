"""Shift leave domain - leave requests, approvals and balances"""

from .router import router

__all__ = ["router"]
