"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def coerce_date(value: Any) -> Any:
    """Accept ISO datetimes where a calendar date is expected.

    The tracking service echoes JavaScript ``toISOString()`` values such as
    ``2026-02-01T00:00:00.000Z``; only the date part is meaningful.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if value == "":
        return None
    return value


class HerizonBase(BaseModel):
    """Base model with shared config for all Herizon schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ErrorDetail(BaseModel):
    detail: str
