from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    v = str(value or "").strip()
    if not v:
        return None
    return parse_iso_date(v)


def now_local() -> datetime:
    """Naive local wall-clock time; attendance and review timestamps use it."""
    return datetime.now()


def week_bounds(anchor: date) -> tuple[date, date]:
    """Monday..Sunday window containing ``anchor``."""
    start = anchor - timedelta(days=anchor.weekday())
    return start, start + timedelta(days=6)


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1
