"""Response envelope shared by every endpoint.

The back-office client reads ``payload`` from ``{success, code, message, payload}``
and shows ``message`` in a toast when ``success`` is false.
"""

from typing import Any

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


def ok(payload: Any = None, message: str = "Success", code: int = 200) -> dict:
    return {"success": True, "code": code, "message": message, "payload": payload}


def error_body(code: int, message: str, payload: Any = None) -> dict:
    return {"success": False, "code": code, "message": message, "payload": payload}


def page(data: list, page_number: int, size: int, total: int) -> dict:
    return {"page": page_number, "size": size, "total": total, "data": data}
