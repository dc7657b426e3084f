"""Presentation descriptors for waitlist statuses, shared by every client"""

from ...constants import WaitlistStatus

UNKNOWN_STATUS = {
    "color": "bg-gray-100 text-gray-800 border-gray-200",
    "icon": "❓",
    "displayName": "Unknown",
    "description": "",
}

STATUS_DISPLAY = {
    WaitlistStatus.ACTIVE.value: {
        "color": "bg-yellow-100 text-yellow-800 border-yellow-200",
        "icon": "🟡",
        "displayName": "Active",
        "description": "We are looking for a suitable table for you...",
    },
    WaitlistStatus.NOTIFIED.value: {
        "color": "bg-blue-100 text-blue-800 border-blue-200",
        "icon": "🔵",
        "displayName": "Notified",
        "description": "Table available! Please check your email to proceed with payment.",
    },
    WaitlistStatus.CONVERTED.value: {
        "color": "bg-green-100 text-green-800 border-green-200",
        "icon": "🟢",
        "displayName": "Converted",
        "description": "Booking confirmed successfully! Enjoy your meal.",
    },
    WaitlistStatus.EXPIRED.value: {
        "color": "bg-red-100 text-red-800 border-red-200",
        "icon": "🔴",
        "displayName": "Expired",
        "description": "Wait time has expired.",
    },
    WaitlistStatus.CANCELLED.value: {
        "color": "bg-gray-100 text-gray-800 border-gray-200",
        "icon": "⚫",
        "displayName": "Cancelled",
        "description": "Waitlist entry has been cancelled.",
    },
}

CANCELLABLE_STATUSES = (WaitlistStatus.ACTIVE.value, WaitlistStatus.NOTIFIED.value)


def get_status_display(status: str) -> dict:
    display = dict(STATUS_DISPLAY.get(status, UNKNOWN_STATUS))
    display["canCancel"] = status in CANCELLABLE_STATUSES
    return display
