"""Utility functions for date manipulation."""

from datetime import date, datetime
from typing import Optional, Union

import pytz

from jewelerp.common.config.settings import settings


def business_timezone() -> pytz.BaseTzInfo:
    """Returns the configured shop timezone."""
    return pytz.timezone(settings.BUSINESS_TIMEZONE)


def local_business_date(now: Optional[datetime] = None) -> date:
    """
    Returns today's calendar date in the shop's timezone.

    Ledger rows are dated by the local calendar so a late-evening sale is never
    shifted into the next (or previous) month by a UTC conversion.
    """
    tz = business_timezone()
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        # Naive datetimes are taken to be local shop time already
        return now.date()
    return now.astimezone(tz).date()


def resolve_entry_date(entry_date: Union[date, str, None]) -> date:
    """Accepts a date, an ISO date string or None (today, local)."""
    if entry_date is None:
        return local_business_date()
    if isinstance(entry_date, datetime):
        return local_business_date(entry_date)
    if isinstance(entry_date, date):
        return entry_date
    return date.fromisoformat(entry_date)


def format_date_for_db(value: Union[date, str, None]) -> str | None:
    """Formats a date (or ISO date string) for a SQL DATE column."""
    if not value:
        return None
    try:
        date_obj = value if isinstance(value, date) else date.fromisoformat(value)
        return date_obj.strftime("%Y-%m-%d")
    except (ValueError, TypeError):
        return None


def parse_db_date(value: Union[date, str, None]) -> date | None:
    """Parses a DATE value returned by MySQL or a PostgREST JSON payload."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
