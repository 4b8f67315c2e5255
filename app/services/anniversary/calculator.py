"""Calendar-accurate account age.

Durations are computed on calendar fields (years, months, days), never by
dividing elapsed seconds. All timestamps are interpreted in UTC.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone

NOT_JOINED_LABEL = "Not joined yet"
TODAY_LABEL = "Today"


@dataclass(frozen=True)
class AnniversaryDuration:
    """Elapsed time between account creation and now."""

    years: int
    months: int
    days: int
    label: str


@dataclass(frozen=True)
class NotYetJoined:
    """Creation time lies in the future."""

    label: str = NOT_JOINED_LABEL


def days_in_month(year: int, month: int) -> int:
    """Day count of a month; month 0 means December of the previous year."""
    if month < 1:
        year, month = year - 1, month + 12
    return calendar.monthrange(year, month)[1]


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's end."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, days_in_month(year, month))
    return date(year, month, day)


def add_duration(start: datetime | date, duration: AnniversaryDuration) -> date:
    """Re-add a duration to its starting date.

    Inverse of ``compute_duration``: the result is the calendar date of ``now``.
    """
    start_date = _as_utc_date(start)
    anchor = add_months(start_date, duration.years * 12 + duration.months)
    return date.fromordinal(anchor.toordinal() + duration.days)


def _as_utc_date(value: datetime | date) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def _pluralize(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_label(years: int, months: int, days: int) -> str:
    """Human readable duration, e.g. ``"2 years 1 month"``."""
    parts = [
        _pluralize(count, unit)
        for count, unit in ((years, "year"), (months, "month"), (days, "day"))
        if count > 0
    ]
    return " ".join(parts) or TODAY_LABEL


def compute_duration(
    created_at: datetime, now: datetime
) -> AnniversaryDuration | NotYetJoined:
    """Calendar difference between ``created_at`` and ``now``.

    Years and months borrow the usual way. Days are counted from
    ``created_at`` shifted by those years and months, with the day clamped
    to the end of the month; when the creation day exists in the month
    preceding ``now`` this is the same as borrowing that month's length.
    """
    if created_at > now:
        return NotYetJoined()

    start = _as_utc_date(created_at)
    end = _as_utc_date(now)

    years = end.year - start.year
    months = end.month - start.month
    days = end.day - start.day

    if months < 0 or (months == 0 and days < 0):
        years -= 1
        months += 12

    if days < 0:
        months -= 1

    anchor = add_months(start, years * 12 + months)
    days = end.toordinal() - anchor.toordinal()

    return AnniversaryDuration(
        years=years,
        months=months,
        days=days,
        label=format_label(years, months, days),
    )


def format_join_date(created_at: datetime) -> str:
    """US long date, e.g. ``"January 15, 2021"``."""
    joined = _as_utc_date(created_at)
    return f"{calendar.month_name[joined.month]} {joined.day}, {joined.year}"


def from_unix_timestamp(timestamp: int | float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
