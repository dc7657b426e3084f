"""Paging and sorting helpers for list endpoints"""

from typing import Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Query


def apply_sort(query: Query, sort_by: Optional[str], columns: dict, default: str) -> Query:
    """
    Apply a ``field,asc|desc`` sort expression.

    Args:
        query: Query to sort
        sort_by: Client sort expression, e.g. "timeStart,desc"
        columns: Allowed client field names mapped to model columns
        default: Expression used when sort_by is empty
    """
    field, _, direction = (sort_by or default).partition(",")
    field = field.strip()
    direction = (direction or "asc").strip().lower()

    column = columns.get(field)
    if column is None:
        raise HTTPException(status_code=400, detail=f"Cannot sort by '{field}'")
    if direction not in ("asc", "desc"):
        raise HTTPException(status_code=400, detail=f"Invalid sort direction '{direction}'")

    return query.order_by(column.desc() if direction == "desc" else column.asc())


def apply_keyword(query: Query, keyword: Optional[str], *columns) -> Query:
    """Case-insensitive contains match of keyword against any of columns"""
    if not keyword or not keyword.strip():
        return query
    pattern = f"%{keyword.strip()}%"
    return query.filter(or_(*[column.ilike(pattern) for column in columns]))


def paginate(query: Query, page: int, size: int) -> tuple[list, int]:
    """Return (items, total) for a 0-based page"""
    total = query.order_by(None).count()
    items = query.offset(page * size).limit(size).all()
    return items, total
