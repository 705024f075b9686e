from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional


def today() -> date:
    """Local calendar date, used for report range defaults."""
    return date.today()


def default_report_range(days: int, end: Optional[date] = None) -> tuple[str, str]:
    """(from, to) as YYYY-MM-DD strings covering the last `days` days."""
    end = end or today()
    start = end - timedelta(days=days)
    return start.isoformat(), end.isoformat()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string as sent by the backend.

    - None / "" -> None
    - "...Z" is accepted and converted to an aware UTC datetime
    - anything unparseable raises ValueError
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    return datetime.fromisoformat(s)


def format_datetime(value: Optional[str]) -> str:
    """
    Human readable timestamp for pages and receipts.

    Aware datetimes are shown in the server's local time. Values that cannot be
    parsed are returned unchanged.
    """
    if not value:
        return ""
    try:
        dt = parse_iso_datetime(value)
    except ValueError:
        return value
    if dt is None:
        return value
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%Y-%m-%d %H:%M:%S")

