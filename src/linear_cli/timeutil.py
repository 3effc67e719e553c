"""Parsing of human time expressions used by list filters and snoozing."""

from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone

DEFAULT_TIME_EXPRESSION = "6_months_ago"
TIME_UNITS = ("minute", "hour", "day", "week", "month", "year")

SNOOZE_RE = re.compile(r"^(\d+)([wdhm])$")


def _subtract_months(moment: datetime, months: int) -> datetime:
    """Move back ``months`` calendar months, clamping to the last valid day."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_time_expression(expression: str | None, now: datetime | None = None) -> str | None:
    """Turn an expression like ``3_weeks_ago`` into an RFC 3339 timestamp.

    Returns ``None`` for ``all_time``. An empty expression means
    ``6_months_ago``. Plain dates and RFC 3339 timestamps pass through.
    """
    expr = (expression or "").strip() or DEFAULT_TIME_EXPRESSION
    if expr == "all_time":
        return None

    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", expr):
        try:
            datetime.strptime(expr, "%Y-%m-%d")
        except ValueError as exc:
            raise ValueError(f"invalid date: {expr}") from exc
        return f"{expr}T00:00:00Z"

    if "T" in expr:
        try:
            datetime.fromisoformat(expr.replace("Z", "+00:00"))
        except ValueError:
            pass
        else:
            return expr

    parts = expr.split("_")
    if len(parts) < 3 or parts[-1] != "ago":
        raise ValueError(
            f"invalid time expression: {expr} (expected format like '3_weeks_ago' or 'all_time')"
        )
    try:
        amount = int(parts[0])
    except ValueError as exc:
        raise ValueError(f"invalid number in time expression: {parts[0]}") from exc

    unit = "_".join(parts[1:-1])
    base = unit[:-1] if unit.endswith("s") else unit
    current = now or datetime.now(timezone.utc)

    if base == "minute":
        target = current - timedelta(minutes=amount)
    elif base == "hour":
        target = current - timedelta(hours=amount)
    elif base == "day":
        target = current - timedelta(days=amount)
    elif base == "week":
        target = current - timedelta(weeks=amount)
    elif base == "month":
        target = _subtract_months(current, amount)
    elif base == "year":
        target = _subtract_months(current, amount * 12)
    else:
        raise ValueError(
            f"invalid time unit: {unit} (valid units: {', '.join(TIME_UNITS)})"
        )
    return target.replace(microsecond=0).isoformat()


def parse_snooze_duration(value: str, now: datetime | None = None) -> datetime:
    """Resolve ``tomorrow`` or ``<N>w|d|h|m`` into the instant to snooze until.

    ``tomorrow`` means 09:00 on the next day in the local timezone.
    """
    current = now or datetime.now().astimezone()
    text = value.strip().lower()
    if text == "tomorrow":
        tomorrow = current + timedelta(days=1)
        return tomorrow.replace(hour=9, minute=0, second=0, microsecond=0)

    match = SNOOZE_RE.match(text)
    if not match:
        raise ValueError(
            f"invalid duration '{value}' (use tomorrow, or a number followed by w, d, h or m)"
        )
    amount = int(match.group(1))
    unit = match.group(2)
    delta = {
        "w": timedelta(weeks=amount),
        "d": timedelta(days=amount),
        "h": timedelta(hours=amount),
        "m": timedelta(minutes=amount),
    }[unit]
    return current + delta
