"""
Filter builders.

Small pure functions that turn parsed filter values into SQLAlchemy
conditions. Each router composes them into a list and applies it with
query.filter(*conditions).
"""
from datetime import date, datetime, time
from typing import Any, List, Optional

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement


def date_range(column, desde: Optional[date], hasta: Optional[date]) -> List[ColumnElement]:
    """
    Inclusive range on a Date or DateTime column.

    For DateTime columns the upper bound covers the whole `hasta` day.
    """
    conditions: List[ColumnElement] = []
    is_datetime = getattr(column.type, "python_type", None) is datetime
    if desde is not None:
        lower = datetime.combine(desde, time.min) if is_datetime else desde
        conditions.append(column >= lower)
    if hasta is not None:
        upper = datetime.combine(hasta, time.max) if is_datetime else hasta
        conditions.append(column <= upper)
    return conditions


def equals(column, value: Any) -> List[ColumnElement]:
    return [] if value is None else [column == value]


def contains(column, value: Optional[str]) -> List[ColumnElement]:
    """Case-insensitive substring match on one column."""
    if not value:
        return []
    return [column.ilike(f"%{value}%")]


def search(columns, value: Optional[str]) -> List[ColumnElement]:
    """Case-insensitive substring match on any of several columns."""
    if not value:
        return []
    pattern = f"%{value}%"
    return [or_(*(column.ilike(pattern) for column in columns))]
